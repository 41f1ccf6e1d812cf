# tests/conftest.py
"""
Shared fixtures: one in-memory SQLite database per test, the FastAPI app
wired to it, and a handful of users for each role.
"""
import os

# Must be set before college_erp.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from college_erp.core.security import create_access_token
from college_erp.db.init_db import init_db
from college_erp.db.session import create_db_engine, get_db
from college_erp.main import create_app
from college_erp.models.course import Course
from college_erp.models.section import Section, StudentSectionEnrollment
from college_erp.models.semester import Semester
from college_erp.models.user import Department, User
from college_erp.schemas.realtime import RealtimeMessagePayload
from college_erp.schemas.user import UserCreate
from college_erp.services import user_service

TEST_PASSWORD = "secret123"


class RecordingGateway:
    """Stands in for RealtimeGateway; remembers what would have been pushed."""

    def __init__(self):
        self.published: List[Tuple[RealtimeMessagePayload, Optional[str]]] = []

    async def publish_message(self, payload, receiver_id=None):
        self.published.append((payload, receiver_id))


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def app(db_session, gateway):
    application = create_app(gateway=gateway)

    def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    # no context manager: the startup hook would touch the real database
    return TestClient(app)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(
        {"sub": user.id, "name": user.name, "email": user.email, "role": user.role}
    )
    return {"Authorization": f"Bearer {token}"}


def make_user(db, *, role: str, email: str, name: Optional[str] = None, **fields) -> User:
    obj_in = UserCreate(
        name=name or email.split("@")[0].title(),
        email=email,
        password=TEST_PASSWORD,
        role=role,
        **fields,
    )
    return user_service.create_user(db, obj_in=obj_in)


# ---- reference data ----

@pytest.fixture
def cs_department(db_session) -> Department:
    dept = Department(name="Computer Science")
    db_session.add(dept)
    db_session.commit()
    return dept


@pytest.fixture
def math_department(db_session) -> Department:
    dept = Department(name="Mathematics")
    db_session.add(dept)
    db_session.commit()
    return dept


@pytest.fixture
def fall_semester(db_session) -> Semester:
    semester = Semester(
        name="Fall 2024",
        year=2024,
        term="Fall",
        start_date=date(2024, 8, 26),
        end_date=date(2024, 12, 13),
    )
    db_session.add(semester)
    db_session.commit()
    return semester


@pytest.fixture
def cs_course(db_session, cs_department) -> Course:
    course = Course(
        course_code="CS101",
        course_name="Intro to Programming",
        department_id=cs_department.id,
        credits=3,
    )
    db_session.add(course)
    db_session.commit()
    return course


# ---- users ----

@pytest.fixture
def superuser(db_session) -> User:
    return make_user(db_session, role="superuser", email="root@example.com", name="Super User")


@pytest.fixture
def admin(db_session) -> User:
    return make_user(db_session, role="admin", email="admin@example.com", name="Admin User")


@pytest.fixture
def faculty(db_session, cs_department) -> User:
    return make_user(
        db_session,
        role="faculty",
        email="carol@example.com",
        name="Faculty Carol",
        department_id=cs_department.id,
        office_number="CS-101",
        specialization="AI",
    )


@pytest.fixture
def other_faculty(db_session, cs_department) -> User:
    return make_user(
        db_session,
        role="faculty",
        email="dave@example.com",
        name="Faculty Dave",
        department_id=cs_department.id,
    )


@pytest.fixture
def student(db_session, cs_department) -> User:
    return make_user(
        db_session,
        role="student",
        email="alice@example.com",
        name="Student Alice",
        department_id=cs_department.id,
        program="B.Tech",
        current_year_of_study=1,
    )


@pytest.fixture
def other_student(db_session) -> User:
    return make_user(db_session, role="student", email="bob@example.com", name="Student Bob")


@pytest.fixture
def section(db_session, cs_course, fall_semester, faculty) -> Section:
    db_obj = Section(
        section_code="CSF24A",
        course_id=cs_course.id,
        semester_id=fall_semester.id,
        faculty_user_id=faculty.id,
        room_number="CS-R1",
        max_capacity=60,
    )
    db_session.add(db_obj)
    db_session.commit()
    return db_obj


def enroll(db, student: User, section: Section) -> StudentSectionEnrollment:
    enrollment = StudentSectionEnrollment(student_user_id=student.id, section_id=section.id)
    db.add(enrollment)
    db.commit()
    return enrollment
