# tests/test_users.py
import re

from college_erp.models.message import Message
from college_erp.models.section import Section, StudentSectionEnrollment
from college_erp.models.user import StudentDetail
from tests.conftest import auth_headers, enroll


def test_me_returns_profile_with_role_details(client, student):
    resp = client.get("/api/users/me", headers=auth_headers(student))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == student.id
    assert data["role"] == "student"
    assert data["student_details"]["program"] == "B.Tech"
    assert data["student_details"]["enrollment_date"] is not None
    assert data["faculty_details"] is None
    assert data["department"]["name"] == "Computer Science"


def test_admin_can_view_faculty_profile(client, admin, faculty, cs_department):
    resp = client.get(f"/api/users/{faculty.id}", headers=auth_headers(admin))
    assert resp.status_code == 200
    details = resp.json()["data"]["faculty_details"]
    assert details["department_id"] == cs_department.id
    assert details["office_number"] == "CS-101"


def test_profile_of_unknown_user_is_404(client, admin):
    resp = client.get("/api/users/F0000", headers=auth_headers(admin))
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "User not found."}


def test_student_cannot_view_other_profiles(client, student, faculty):
    resp = client.get(f"/api/users/{faculty.id}", headers=auth_headers(student))
    assert resp.status_code == 403


def test_list_users_is_for_staff_only(client, student, faculty, admin):
    assert client.get("/api/users", headers=auth_headers(student)).status_code == 403

    resp = client.get("/api/users", headers=auth_headers(faculty))
    assert resp.status_code == 200
    ids = {u["id"] for u in resp.json()["data"]}
    assert {student.id, faculty.id, admin.id} <= ids


def test_list_users_filtered_by_role(client, admin, student, other_student, faculty):
    resp = client.get("/api/users", params={"role": "student"}, headers=auth_headers(admin))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert {u["id"] for u in data} == {student.id, other_student.id}
    assert all(u["role"] == "student" for u in data)


def test_departments_visible_to_any_user(client, student, math_department):
    resp = client.get("/api/users/departments", headers=auth_headers(student))
    assert resp.status_code == 200
    assert [d["name"] for d in resp.json()["data"]] == ["Computer Science", "Mathematics"]


def test_admin_creates_student_with_generated_id(client, admin):
    resp = client.post(
        "/api/users",
        json={
            "name": "New Student",
            "email": "new.student@example.com",
            "password": "password123",
            "role": "student",
            "program": "B.Sc.",
        },
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert re.fullmatch(r"2025\d{6}", data["id"])
    assert data["role"] == "student"
    assert data["student_details"]["program"] == "B.Sc."


def test_created_staff_ids_carry_role_prefix(client, superuser, cs_department):
    headers = auth_headers(superuser)
    expected = {"faculty": r"F\d{4}", "admin": r"A\d{4}", "superuser": r"SU\d{4}"}
    for role, pattern in expected.items():
        resp = client.post(
            "/api/users",
            json={
                "name": f"New {role}",
                "email": f"new.{role}@example.com",
                "password": "password123",
                "role": role,
                "department_id": cs_department.id,
            },
            headers=headers,
        )
        assert resp.status_code == 201, resp.json()
        assert re.fullmatch(pattern, resp.json()["data"]["id"])


def test_new_user_can_log_in(client, admin):
    created = client.post(
        "/api/users",
        json={"name": "Eve", "email": "eve@example.com", "password": "password123", "role": "student"},
        headers=auth_headers(admin),
    ).json()["data"]

    resp = client.post("/api/auth/login", json={"identifier": created["id"], "password": "password123"})
    assert resp.status_code == 200


def test_faculty_requires_department(client, admin):
    resp = client.post(
        "/api/users",
        json={"name": "No Dept", "email": "nodept@example.com", "password": "password123", "role": "faculty"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Faculty members must belong to a department."


def test_create_with_unknown_department(client, admin):
    resp = client.post(
        "/api/users",
        json={
            "name": "Lost",
            "email": "lost@example.com",
            "password": "password123",
            "role": "student",
            "department_id": 999,
        },
        headers=auth_headers(admin),
    )
    assert resp.status_code == 404


def test_duplicate_email_conflicts(client, admin, student):
    resp = client.post(
        "/api/users",
        json={"name": "Copy", "email": "Alice@example.com", "password": "password123", "role": "student"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "A user with this email already exists."


def test_superuser_permissions_must_be_json(client, superuser):
    resp = client.post(
        "/api/users",
        json={
            "name": "Root Two",
            "email": "root2@example.com",
            "password": "password123",
            "role": "superuser",
            "superuser_permissions": "{not json",
        },
        headers=auth_headers(superuser),
    )
    assert resp.status_code == 400


def test_create_validation_errors_are_field_level(client, admin):
    resp = client.post(
        "/api/users",
        json={"name": "", "email": "not-an-email", "password": "123", "role": "janitor"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    details = resp.json()["details"]
    assert {"name", "email", "password", "role"} <= set(details)


def test_student_cannot_create_users(client, student):
    resp = client.post(
        "/api/users",
        json={"name": "X", "email": "x@example.com", "password": "password123", "role": "student"},
        headers=auth_headers(student),
    )
    assert resp.status_code == 403


def test_update_base_and_detail_fields(client, admin, student):
    resp = client.put(
        f"/api/users/{student.id}",
        json={"name": "Alice Cooper", "program": "M.Tech", "current_year_of_study": 2},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Alice Cooper"
    assert data["student_details"]["program"] == "M.Tech"
    assert data["student_details"]["current_year_of_study"] == 2


def test_update_password_allows_new_login(client, admin, student):
    client.put(
        f"/api/users/{student.id}",
        json={"password": "brand-new-pass"},
        headers=auth_headers(admin),
    )
    resp = client.post("/api/auth/login", json={"identifier": student.id, "password": "brand-new-pass"})
    assert resp.status_code == 200


def test_role_change_is_rejected(client, admin, student):
    resp = client.put(
        f"/api/users/{student.id}", json={"role": "faculty"}, headers=auth_headers(admin)
    )
    assert resp.status_code == 400

    same_role = client.put(
        f"/api/users/{student.id}", json={"role": "student"}, headers=auth_headers(admin)
    )
    assert same_role.status_code == 200


def test_update_email_to_taken_address_conflicts(client, admin, student, other_student):
    resp = client.put(
        f"/api/users/{student.id}",
        json={"email": other_student.email},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 409


def test_cannot_delete_yourself(client, admin):
    resp = client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))
    assert resp.status_code == 400


def test_admin_cannot_delete_superuser(client, admin, superuser):
    resp = client.delete(f"/api/users/{superuser.id}", headers=auth_headers(admin))
    assert resp.status_code == 403


def test_superuser_deletes_admin(client, admin, superuser):
    resp = client.delete(f"/api/users/{admin.id}", headers=auth_headers(superuser))
    assert resp.status_code == 200
    # absent envelope keys are omitted, not sent as null
    assert resp.json() == {"success": True, "message": "User deleted successfully."}

    resp = client.get(f"/api/users/{admin.id}", headers=auth_headers(superuser))
    assert resp.status_code == 404


def test_me_fails_closed_when_detail_rows_disagree_with_role(client, db_session, admin):
    db_session.add(StudentDetail(user_id=admin.id))
    db_session.commit()

    resp = client.get("/api/users/me", headers=auth_headers(admin))
    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "message": "User role configuration is inconsistent.",
        "details": {"user_id": admin.id},
    }


def test_delete_faculty_nulls_section_and_message_refs(
    client, db_session, superuser, faculty, student, section
):
    enroll(db_session, student, section)
    direct = Message(
        sender_id=faculty.id, receiver_id=student.id,
        subject="Office hours", content="Moved to Friday.", type="Direct",
    )
    reply = Message(
        sender_id=student.id, receiver_id=faculty.id,
        subject="Re: Office hours", content="Thanks.", type="Direct",
    )
    db_session.add_all([direct, reply])
    db_session.commit()
    direct_id, reply_id, section_id = direct.id, reply.id, section.id

    resp = client.delete(f"/api/users/{faculty.id}", headers=auth_headers(superuser))
    assert resp.status_code == 200

    db_session.expire_all()
    assert db_session.get(Section, section_id).faculty_user_id is None
    assert db_session.get(Message, direct_id).sender_id is None
    assert db_session.get(Message, reply_id).receiver_id is None

    # deleting the student takes their enrollments with them
    resp = client.delete(f"/api/users/{student.id}", headers=auth_headers(superuser))
    assert resp.status_code == 200

    db_session.expire_all()
    assert db_session.query(StudentSectionEnrollment).filter(
        StudentSectionEnrollment.section_id == section_id
    ).count() == 0
    assert db_session.get(Message, direct_id).receiver_id is None
    assert db_session.get(Message, reply_id).sender_id is None
