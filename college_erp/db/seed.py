# college_erp/db/seed.py
"""
Demo data for local development.

    python -m college_erp.db.seed

Every row is looked up by its natural key first, so running the script
again leaves existing data untouched.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict

from sqlalchemy.orm import Session

from college_erp.core.logging_config import setup_logging
from college_erp.db.init_db import init_db
from college_erp.db.session import SessionLocal
from college_erp.models.course import Course
from college_erp.models.message import Message
from college_erp.models.schedule import ScheduleItem
from college_erp.models.section import Section, StudentSectionEnrollment
from college_erp.models.semester import Semester
from college_erp.models.user import Department
from college_erp.schemas.user import UserCreate
from college_erp.services import user_service
from college_erp.utils.section_code import build_section_code

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEPARTMENTS = ["Computer Science", "Mathematics", "Physics", "History", "General Administration"]

USERS = [
    {
        "name": "Super User", "email": "superuser@example.com", "role": "superuser",
        "superuser_permissions": '{"canManageAll": true}',
    },
    {
        "name": "Admin User", "email": "admin@example.com", "role": "admin",
        "department": "General Administration", "permission_level": "full_access",
    },
    {
        "name": "Student Alice", "email": "student.alice@example.com", "role": "student",
        "department": "Computer Science",
        "program": "B.Tech", "branch": "Computer Science & Engineering",
        "expected_graduation_year": 2027, "current_year_of_study": 1,
        "academic_status": "Good Standing",
        "father_name": "John Doe", "mother_name": "Jane Doe",
        "date_of_birth": date(2005, 6, 15), "phone_number": "9876543210",
        "permanent_address": "123 Main St, Anytown, India",
        "current_address": "Room 101, Hostel A, College Campus",
    },
    {
        "name": "Student Bob", "email": "student.bob@example.com", "role": "student",
        "department": "Mathematics",
        "program": "B.Sc.", "branch": "Mathematics",
        "expected_graduation_year": 2026, "current_year_of_study": 2, "gpa": 3.8,
        "academic_status": "Good Standing",
        "father_name": "Robert Smith", "mother_name": "Susan Smith",
        "date_of_birth": date(2004, 2, 20), "phone_number": "8765432109",
        "permanent_address": "456 Oak Ave, Othercity, India",
        "current_address": "Room 202, Hostel B, College Campus",
    },
    {
        "name": "Faculty Carol", "email": "faculty.carol@example.com", "role": "faculty",
        "department": "Computer Science", "office_number": "CS-101", "specialization": "AI",
    },
    {
        "name": "Faculty David", "email": "faculty.david@example.com", "role": "faculty",
        "department": "Mathematics", "office_number": "MA-205", "specialization": "Algebra",
    },
]

SEMESTERS = [
    {"name": "Odd 2024", "year": 2024, "term": "Odd", "start_date": date(2024, 7, 15), "end_date": date(2024, 12, 5)},
    {"name": "Even 2025", "year": 2025, "term": "Even", "start_date": date(2025, 1, 10), "end_date": date(2025, 5, 30)},
]

COURSES = [
    {"course_code": "CS101", "course_name": "Intro to Programming", "department": "Computer Science", "credits": 3},
    {"course_code": "CS301", "course_name": "Advanced Algorithms", "department": "Computer Science", "credits": 3},
    {"course_code": "MA101", "course_name": "Calculus I", "department": "Mathematics", "credits": 4},
    {"course_code": "PY101", "course_name": "General Physics I", "department": "Physics", "credits": 4},
]

# (course, semester, letter, faculty, room)
SECTIONS = [
    ("CS101", "Odd 2024", "A", "Faculty Carol", "CS-R1"),
    ("CS101", "Odd 2024", "B", "Faculty Carol", "CS-R2"),
    ("MA101", "Odd 2024", "A", "Faculty David", "MA-R1"),
]


def _seed_departments(db: Session) -> Dict[str, Department]:
    departments = {}
    for name in DEPARTMENTS:
        dept = db.query(Department).filter(Department.name == name).first()
        if dept is None:
            dept = Department(name=name)
            db.add(dept)
            db.commit()
            logger.info(f"Department '{name}' inserted with ID {dept.id}")
        departments[name] = dept
    return departments


def _seed_users(db: Session, departments: Dict[str, Department]) -> Dict[str, str]:
    user_ids = {}
    for data in USERS:
        data = dict(data)
        existing = user_service.get_user_by_email(db, data["email"])
        if existing is not None:
            user_ids[data["name"]] = existing.id
            logger.info(f"User {data['email']} already exists, skipping")
            continue

        dept_name = data.pop("department", None)
        obj_in = UserCreate(
            password=DEMO_PASSWORD,
            department_id=departments[dept_name].id if dept_name else None,
            **data,
        )
        user = user_service.create_user(db, obj_in=obj_in)
        user_ids[user.name] = user.id
    return user_ids


def _seed_semesters(db: Session) -> Dict[str, Semester]:
    semesters = {}
    for data in SEMESTERS:
        sem = db.query(Semester).filter(Semester.name == data["name"]).first()
        if sem is None:
            sem = Semester(**data)
            db.add(sem)
            db.commit()
            logger.info(f"Semester '{sem.name}' inserted")
        semesters[sem.name] = sem
    return semesters


def _seed_courses(db: Session, departments: Dict[str, Department]) -> Dict[str, Course]:
    courses = {}
    for data in COURSES:
        course = db.query(Course).filter(Course.course_code == data["course_code"]).first()
        if course is None:
            course = Course(
                course_code=data["course_code"],
                course_name=data["course_name"],
                department_id=departments[data["department"]].id,
                credits=data["credits"],
            )
            db.add(course)
            db.commit()
            logger.info(f"Course '{course.course_code}' inserted")
        courses[course.course_code] = course
    return courses


def _seed_sections(db, courses, semesters, user_ids) -> Dict[str, Section]:
    sections = {}
    for course_code, semester_name, letter, faculty_name, room in SECTIONS:
        course = courses[course_code]
        semester = semesters[semester_name]
        code = build_section_code(course.department.name, semester.term, semester.year, letter)

        section = (
            db.query(Section)
            .filter(
                Section.course_id == course.id,
                Section.semester_id == semester.id,
                Section.section_code == code,
            )
            .first()
        )
        if section is None:
            section = Section(
                section_code=code,
                course_id=course.id,
                semester_id=semester.id,
                faculty_user_id=user_ids.get(faculty_name),
                room_number=room,
            )
            db.add(section)
            db.commit()
            logger.info(f"Section {code} inserted with ID {section.id}")
        sections[f"{course_code}-{semester_name}-{letter}"] = section
    return sections


def _seed_meetings(db: Session, section: Section, semester: Semester) -> None:
    if db.query(ScheduleItem).filter(ScheduleItem.section_id == section.id).first() is not None:
        return

    week_start = semester.start_date - timedelta(days=semester.start_date.weekday())
    for day_offset in (0, 2):  # Monday, Wednesday
        day = week_start + timedelta(days=day_offset)
        start = datetime(day.year, day.month, day.day, 9, 0, tzinfo=timezone.utc)
        db.add(
            ScheduleItem(
                section_id=section.id,
                start_time=start,
                end_time=start + timedelta(minutes=90),
                room_number="CS-R1A",
            )
        )
    db.commit()
    logger.info(f"Meetings for section {section.section_code} inserted")


def _seed_enrollment(db: Session, student_id: str, section: Section) -> None:
    exists = (
        db.query(StudentSectionEnrollment.id)
        .filter(
            StudentSectionEnrollment.student_user_id == student_id,
            StudentSectionEnrollment.section_id == section.id,
        )
        .first()
    )
    if exists is None:
        db.add(StudentSectionEnrollment(student_user_id=student_id, section_id=section.id))
        db.commit()
        logger.info(f"Student {student_id} enrolled in {section.section_code}")


def _seed_messages(db: Session, user_ids: Dict[str, str]) -> None:
    if db.query(Message.id).first() is not None:
        logger.info("Messages already present, skipping")
        return

    now = datetime.now(timezone.utc)
    messages = [
        Message(
            sender_id=user_ids["Super User"], subject="System Maintenance Alert",
            content="System will be down for maintenance tonight from 2 AM to 3 AM.",
            type="Broadcast", priority="Critical", timestamp=now,
        ),
        Message(
            sender_id=user_ids["Admin User"], subject="Welcome!",
            content="Welcome to the new ERP system.",
            type="Broadcast", priority="Normal", timestamp=now,
        ),
        Message(
            sender_id=user_ids["Faculty Carol"], receiver_id=user_ids["Student Alice"],
            subject="CS101 Assignment",
            content="Details for the first CS101 assignment are now available.",
            type="Direct", priority="Urgent", timestamp=now,
        ),
    ]
    db.add_all(messages)
    db.commit()
    logger.info("Sample messages inserted")


def seed(db: Session) -> None:
    logger.info("Starting database seeding...")
    departments = _seed_departments(db)
    user_ids = _seed_users(db, departments)
    semesters = _seed_semesters(db)
    courses = _seed_courses(db, departments)
    sections = _seed_sections(db, courses, semesters, user_ids)

    cs101_a = sections["CS101-Odd 2024-A"]
    _seed_meetings(db, cs101_a, semesters["Odd 2024"])
    _seed_enrollment(db, user_ids["Student Alice"], cs101_a)
    _seed_enrollment(db, user_ids["Student Alice"], sections["MA101-Odd 2024-A"])

    _seed_messages(db, user_ids)
    logger.info("Database seeding completed successfully.")


def main() -> None:
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
