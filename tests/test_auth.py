# tests/test_auth.py
import time

import pytest
from jose import jwt

from college_erp.core.config import settings
from college_erp.models.user import AdminDetail, FacultyDetail, SuperuserDetail, UserRole
from college_erp.services.auth_service import classify_identifier
from college_erp.services.role_service import resolve_role
from college_erp.services.user_service import generate_user_id
from tests.conftest import TEST_PASSWORD, auth_headers, make_user


@pytest.mark.parametrize(
    "identifier, expected",
    [
        ("2025123456", ("id", UserRole.STUDENT)),
        ("F1234", ("id", UserRole.FACULTY)),
        ("a1234", ("id", UserRole.ADMIN)),
        ("SU0001", ("id", UserRole.SUPERUSER)),
        ("someone@example.com", ("email", None)),
        ("12345", None),
        ("X9999", None),
    ],
)
def test_classify_identifier(identifier, expected):
    assert classify_identifier(identifier) == expected


def test_login_with_student_id(client, student):
    resp = client.post(
        "/api/auth/login", json={"identifier": student.id, "password": TEST_PASSWORD}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["user"]["id"] == student.id
    assert body["data"]["user"]["role"] == "student"

    claims = jwt.decode(body["data"]["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == student.id
    assert claims["role"] == "student"
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 60 * 24 * 7
    expected_exp = time.time() + settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    assert abs(claims["exp"] - expected_exp) < 60


def test_login_with_email_for_faculty(client, faculty):
    resp = client.post(
        "/api/auth/login", json={"identifier": "CAROL@example.com", "password": TEST_PASSWORD}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["role"] == "faculty"


def test_login_with_lowercase_staff_id(client, admin):
    resp = client.post(
        "/api/auth/login", json={"identifier": admin.id.lower(), "password": TEST_PASSWORD}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["id"] == admin.id


def test_wrong_password_and_unknown_user_look_the_same(client, student):
    wrong_password = client.post(
        "/api/auth/login", json={"identifier": student.id, "password": "nope-nope"}
    )
    unknown_user = client.post(
        "/api/auth/login", json={"identifier": "2025000000", "password": TEST_PASSWORD}
    )
    bad_format = client.post(
        "/api/auth/login", json={"identifier": "not-an-id", "password": TEST_PASSWORD}
    )

    for resp in (wrong_password, unknown_user, bad_format):
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Invalid identifier or password."}


def test_user_without_role_detail_cannot_log_in(client, db_session, admin):
    db_session.delete(admin.admin_detail)
    db_session.commit()

    resp = client.post(
        "/api/auth/login", json={"identifier": admin.email, "password": TEST_PASSWORD}
    )
    assert resp.status_code == 500
    assert resp.json()["message"] == "User role is not configured."


def test_role_mismatch_between_column_and_detail_fails_closed(client, db_session, student):
    db_session.add(AdminDetail(user_id=student.id))
    db_session.delete(student.student_detail)
    db_session.commit()

    resp = client.post(
        "/api/auth/login", json={"identifier": student.id, "password": TEST_PASSWORD}
    )
    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "message": "User role configuration is inconsistent.",
        "details": {"user_id": student.id},
    }


def test_resolve_role_prefers_earlier_detail_tables(db_session, cs_department, student, faculty, admin):
    db_session.add_all([
        FacultyDetail(user_id=student.id, department_id=cs_department.id),
        AdminDetail(user_id=student.id),
        AdminDetail(user_id=faculty.id),
        SuperuserDetail(user_id=admin.id),
    ])
    db_session.commit()

    assert resolve_role(db_session, student.id) == UserRole.STUDENT
    assert resolve_role(db_session, faculty.id) == UserRole.FACULTY
    assert resolve_role(db_session, admin.id) == UserRole.ADMIN


def test_student_ids_follow_configured_prefix(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "STUDENT_ID_PREFIX", "202526")

    generated = generate_user_id(db_session, UserRole.STUDENT)
    assert len(generated) == 12
    assert generated.startswith("202526")
    assert classify_identifier(generated) == ("id", UserRole.STUDENT)
    # ids minted under the default prefix length are no longer student ids
    assert classify_identifier("2025123456") is None

    user = make_user(db_session, role="student", email="erin@example.com")
    resp = client.post(
        "/api/auth/login", json={"identifier": user.id, "password": TEST_PASSWORD}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["role"] == "student"


def test_student_prefix_must_be_numeric():
    with pytest.raises(ValueError):
        type(settings)(STUDENT_ID_PREFIX="S2025")


def test_login_requires_both_fields(client):
    resp = client.post("/api/auth/login", json={"identifier": ""})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed."
    assert "identifier" in body["details"]
    assert "password" in body["details"]


def test_protected_route_without_token(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Unauthorized: No token provided or invalid format."


def test_protected_route_with_garbage_token(client):
    resp = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Unauthorized: Invalid or expired token."


def test_token_for_deleted_user_is_rejected(client, db_session, other_student):
    headers = auth_headers(other_student)
    db_session.delete(other_student)
    db_session.commit()

    resp = client.get("/api/users/me", headers=headers)
    assert resp.status_code == 401
