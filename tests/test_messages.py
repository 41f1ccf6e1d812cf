# tests/test_messages.py
from fastapi.testclient import TestClient

from college_erp.db.session import get_db
from college_erp.main import create_app
from college_erp.models.message import Message
from tests.conftest import auth_headers


def _send(client, sender, **body):
    payload = {"subject": "Hello", "content": "Body text", "type": "Direct"}
    payload.update(body)
    return client.post("/api/messages", json=payload, headers=auth_headers(sender))


def test_direct_message_requires_receiver(client, faculty):
    resp = _send(client, faculty)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Receiver ID is required for direct messages."


def test_direct_message_to_unknown_receiver(client, faculty):
    resp = _send(client, faculty, receiver_id="2025999999")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Receiver not found."


def test_direct_message_is_stored_and_pushed(client, gateway, faculty, student):
    resp = _send(client, faculty, receiver_id=student.id, priority="Urgent")
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["receiver_id"] == student.id
    assert data["sender"]["name"] == "Faculty Carol"
    assert data["is_read"] is False

    assert len(gateway.published) == 1
    payload, receiver_id = gateway.published[0]
    assert receiver_id == student.id
    assert payload.type == "Direct"
    assert payload.id == str(data["id"])
    assert payload.title == "New Message: Hello"
    assert payload.sender == "Faculty Carol"
    assert payload.priority == "Urgent"


def test_broadcast_ignores_receiver(client, gateway, admin, student):
    resp = _send(client, admin, type="Broadcast", subject="Exams", receiver_id=student.id)
    assert resp.status_code == 201
    assert resp.json()["data"]["receiver_id"] is None

    payload, receiver_id = gateway.published[0]
    assert receiver_id is None
    assert payload.title == "Announcement: Exams"


def test_students_cannot_send(client, student, other_student):
    resp = _send(client, student, receiver_id=other_student.id)
    assert resp.status_code == 403


def test_invalid_priority_is_a_validation_error(client, admin):
    resp = _send(client, admin, type="Broadcast", priority="Whenever")
    assert resp.status_code == 400
    assert "priority" in resp.json()["details"]


def test_my_messages_has_direct_and_broadcasts_newest_first(
    client, faculty, admin, student, other_student
):
    _send(client, faculty, receiver_id=student.id, subject="For Alice")
    _send(client, faculty, receiver_id=other_student.id, subject="For Bob")
    _send(client, admin, type="Broadcast", subject="For everyone")

    resp = client.get("/api/messages/my", headers=auth_headers(student))
    assert resp.status_code == 200
    subjects = [m["subject"] for m in resp.json()["data"]]
    assert subjects == ["For everyone", "For Alice"]


def test_broadcast_without_live_clients_is_still_listed(db_session, admin, student, other_student):
    # no gateway at all: the push is skipped, the row is not
    app = create_app(gateway=None)
    app.dependency_overrides[get_db] = lambda: db_session
    client = TestClient(app)

    resp = _send(client, admin, type="Broadcast", subject="Offline notice")
    assert resp.status_code == 201

    for user in (student, other_student):
        listed = client.get("/api/messages/my", headers=auth_headers(user)).json()["data"]
        assert [m["subject"] for m in listed] == ["Offline notice"]


def test_receiver_marks_message_read(client, faculty, student):
    message_id = _send(client, faculty, receiver_id=student.id).json()["data"]["id"]

    resp = client.patch(f"/api/messages/{message_id}/read", headers=auth_headers(student))
    assert resp.status_code == 200
    assert resp.json()["data"]["is_read"] is True

    listed = client.get("/api/messages/my", headers=auth_headers(student)).json()["data"]
    assert listed[0]["is_read"] is True


def test_non_receiver_cannot_mark_read(client, db_session, faculty, student, other_student):
    message_id = _send(client, faculty, receiver_id=student.id).json()["data"]["id"]

    resp = client.patch(f"/api/messages/{message_id}/read", headers=auth_headers(other_student))
    assert resp.status_code == 403
    assert resp.json()["message"] == "Forbidden to mark this message as read."
    assert db_session.get(Message, message_id).is_read is False


def test_marking_broadcast_read_is_a_noop(client, admin, student):
    message_id = _send(client, admin, type="Broadcast").json()["data"]["id"]

    resp = client.patch(f"/api/messages/{message_id}/read", headers=auth_headers(student))
    assert resp.status_code == 200
    assert resp.json()["data"]["is_read"] is False


def test_mark_unknown_message(client, student):
    resp = client.patch("/api/messages/999/read", headers=auth_headers(student))
    assert resp.status_code == 404
