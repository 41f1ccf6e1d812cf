# college_erp/services/section_service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from college_erp.core.config import settings
from college_erp.core.exceptions import BadRequestError, ConflictError, NotFoundError
from college_erp.models.course import Course
from college_erp.models.section import Section, StudentSectionEnrollment
from college_erp.models.user import User, UserRole
from college_erp.schemas.section import SectionBasicInfo, SectionCreate, SectionUpdate
from college_erp.services import course_service, semester_service
from college_erp.utils.section_code import build_section_code

logger = logging.getLogger(__name__)


def _section_query(db: Session):
    return db.query(Section).options(
        joinedload(Section.course),
        joinedload(Section.semester),
        joinedload(Section.faculty),
    )


def _validate_faculty(db: Session, faculty_user_id: str) -> User:
    faculty = db.get(User, faculty_user_id)
    if faculty is None or faculty.role != UserRole.FACULTY.value:
        raise BadRequestError(f"User {faculty_user_id} is not a faculty member.")
    return faculty


def get_section(db: Session, section_id: int) -> Optional[Section]:
    return _section_query(db).filter(Section.id == section_id).first()


def get_section_or_404(db: Session, section_id: int) -> Section:
    section = get_section(db, section_id)
    if section is None:
        raise NotFoundError("Section not found.")
    return section


def list_sections(db: Session, *, skip: int = 0, limit: int = 100) -> List[Section]:
    return (
        _section_query(db)
        .order_by(Section.semester_id.desc(), Section.section_code.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_sections_basic_info(db: Session) -> List[SectionBasicInfo]:
    sections = _section_query(db).order_by(Section.section_code.asc()).all()
    return [
        SectionBasicInfo(
            id=s.id,
            section_code=s.section_code,
            course_name=s.course.course_name,
            semester_name=s.semester.name,
            faculty_name=s.faculty.name if s.faculty else None,
        )
        for s in sections
    ]


def create_section(db: Session, *, obj_in: SectionCreate) -> Section:
    course: Optional[Course] = course_service.get_course(db, obj_in.course_id)
    if course is None:
        raise NotFoundError("Course not found.")
    semester = semester_service.get_semester(db, obj_in.semester_id)
    if semester is None:
        raise NotFoundError("Semester not found.")
    if obj_in.faculty_user_id:
        _validate_faculty(db, obj_in.faculty_user_id)

    department_name = course.department.name if course.department else None
    section_code = build_section_code(
        department_name, semester.term, semester.year, obj_in.section_letter
    )

    existing = (
        db.query(Section.id)
        .filter(
            Section.course_id == course.id,
            Section.semester_id == semester.id,
            Section.section_code == section_code,
        )
        .first()
    )
    conflict_message = (
        f"Section with code {section_code} for this course and semester already exists."
    )
    if existing is not None:
        raise ConflictError(conflict_message)

    db_obj = Section(
        section_code=section_code,
        course_id=course.id,
        semester_id=semester.id,
        faculty_user_id=obj_in.faculty_user_id or None,
        room_number=obj_in.room_number,
        max_capacity=obj_in.max_capacity or settings.DEFAULT_SECTION_CAPACITY,
    )
    db.add(db_obj)
    try:
        db.commit()
    except IntegrityError as exc:
        # lost a race against a concurrent insert of the same code
        db.rollback()
        raise ConflictError(conflict_message) from exc

    logger.info(f"Section {section_code} (id={db_obj.id}) created")
    return get_section_or_404(db, db_obj.id)


def update_section(db: Session, *, db_obj: Section, obj_in: SectionUpdate) -> Section:
    update_data = obj_in.model_dump(exclude_unset=True)

    if "faculty_user_id" in update_data:
        faculty_user_id = update_data["faculty_user_id"]
        if faculty_user_id:
            _validate_faculty(db, faculty_user_id)
        db_obj.faculty_user_id = faculty_user_id or None
    if "room_number" in update_data:
        db_obj.room_number = update_data["room_number"]
    if "max_capacity" in update_data:
        db_obj.max_capacity = update_data["max_capacity"] or settings.DEFAULT_SECTION_CAPACITY

    db.add(db_obj)
    db.commit()
    logger.info(f"Section {db_obj.section_code} (id={db_obj.id}) updated: {sorted(update_data)}")
    return get_section_or_404(db, db_obj.id)


def delete_section(db: Session, *, db_obj: Section) -> None:
    enrolled = (
        db.query(StudentSectionEnrollment)
        .filter(StudentSectionEnrollment.section_id == db_obj.id)
        .count()
    )
    if enrolled > 0:
        raise BadRequestError(
            f"Cannot delete section: {db_obj.section_code} as it has {enrolled} "
            f"student(s) enrolled. Please unenroll students first."
        )

    section_id, section_code = db_obj.id, db_obj.section_code
    db.delete(db_obj)
    db.commit()
    logger.info(f"Section {section_code} (id={section_id}) deleted")
