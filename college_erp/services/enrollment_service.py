# college_erp/services/enrollment_service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from college_erp.core.exceptions import BadRequestError, ConflictError, NotFoundError
from college_erp.models.section import Section, StudentSectionEnrollment
from college_erp.models.user import User, UserRole

logger = logging.getLogger(__name__)


def list_enrollments(db: Session, *, section: Section) -> List[StudentSectionEnrollment]:
    return (
        db.query(StudentSectionEnrollment)
        .options(joinedload(StudentSectionEnrollment.student))
        .filter(StudentSectionEnrollment.section_id == section.id)
        .order_by(StudentSectionEnrollment.student_user_id.asc())
        .all()
    )


def enroll_student(db: Session, *, section: Section, student_user_id: str) -> StudentSectionEnrollment:
    student = db.get(User, student_user_id)
    if student is None:
        raise NotFoundError("Student not found.")
    if student.role != UserRole.STUDENT.value:
        raise BadRequestError(f"User {student_user_id} is not a student.")

    already = (
        db.query(StudentSectionEnrollment.id)
        .filter(
            StudentSectionEnrollment.section_id == section.id,
            StudentSectionEnrollment.student_user_id == student.id,
        )
        .first()
    )
    if already is not None:
        raise ConflictError("Student is already enrolled in this section.")

    enrolled = (
        db.query(StudentSectionEnrollment)
        .filter(StudentSectionEnrollment.section_id == section.id)
        .count()
    )
    if enrolled >= section.max_capacity:
        raise ConflictError(
            f"Section {section.section_code} is full ({section.max_capacity} students)."
        )

    db_obj = StudentSectionEnrollment(student_user_id=student.id, section_id=section.id)
    db.add(db_obj)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Student is already enrolled in this section.") from exc
    db.refresh(db_obj)

    logger.info(f"Student {student.id} enrolled in section {section.section_code}")
    return db_obj


def unenroll_student(db: Session, *, section: Section, student_user_id: str) -> None:
    db_obj = (
        db.query(StudentSectionEnrollment)
        .filter(
            StudentSectionEnrollment.section_id == section.id,
            StudentSectionEnrollment.student_user_id == student_user_id,
        )
        .first()
    )
    if db_obj is None:
        raise NotFoundError("Enrollment not found.")

    section_code = section.section_code
    db.delete(db_obj)
    db.commit()
    logger.info(f"Student {student_user_id} unenrolled from section {section_code}")
