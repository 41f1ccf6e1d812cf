# college_erp/services/schedule_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from college_erp.core.exceptions import BadRequestError, NotFoundError
from college_erp.models.schedule import ScheduleItem
from college_erp.models.section import Section, StudentSectionEnrollment
from college_erp.models.user import User, UserRole
from college_erp.schemas.schedule import ScheduleItemCreate

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _schedule_query(db: Session):
    return db.query(ScheduleItem).options(
        joinedload(ScheduleItem.section).joinedload(Section.course),
        joinedload(ScheduleItem.section).joinedload(Section.semester),
        joinedload(ScheduleItem.section).joinedload(Section.faculty),
    )


def get_schedule_item(db: Session, schedule_id: int) -> Optional[ScheduleItem]:
    return _schedule_query(db).filter(ScheduleItem.id == schedule_id).first()


def list_my_schedules(db: Session, *, user: User) -> List[ScheduleItem]:
    """
    Meetings visible to ``user``:
    students -> sections they are enrolled in,
    faculty -> sections they teach,
    admin / superuser -> everything.
    """
    query = _schedule_query(db)

    if user.role == UserRole.STUDENT.value:
        enrolled_sections = (
            db.query(StudentSectionEnrollment.section_id)
            .filter(StudentSectionEnrollment.student_user_id == user.id)
        )
        query = query.filter(ScheduleItem.section_id.in_(enrolled_sections))
    elif user.role == UserRole.FACULTY.value:
        query = query.join(Section, ScheduleItem.section_id == Section.id).filter(
            Section.faculty_user_id == user.id
        )
    elif user.role not in (UserRole.ADMIN.value, UserRole.SUPERUSER.value):
        logger.warning(f"Schedule requested by user {user.id} with unknown role {user.role}")
        return []

    items = query.order_by(ScheduleItem.start_time.asc(), ScheduleItem.id.asc()).all()
    logger.debug(f"Found {len(items)} schedule items for user {user.id} ({user.role})")
    return items


def list_section_schedule(db: Session, *, section: Section) -> List[ScheduleItem]:
    return (
        _schedule_query(db)
        .filter(ScheduleItem.section_id == section.id)
        .order_by(ScheduleItem.start_time.asc())
        .all()
    )


def create_schedule_item(db: Session, *, obj_in: ScheduleItemCreate) -> ScheduleItem:
    if db.get(Section, obj_in.section_id) is None:
        raise NotFoundError("Section not found.")

    start_time = _as_utc(obj_in.start_time)
    end_time = _as_utc(obj_in.end_time)
    if end_time <= start_time:
        raise BadRequestError("End time must be after start time.")

    db_obj = ScheduleItem(
        section_id=obj_in.section_id,
        start_time=start_time,
        end_time=end_time,
        room_number=obj_in.room_number,
    )
    db.add(db_obj)
    db.commit()
    logger.info(f"Schedule item {db_obj.id} created for section {obj_in.section_id}")
    return get_schedule_item(db, db_obj.id)


def delete_schedule_item(db: Session, *, db_obj: ScheduleItem) -> None:
    schedule_id = db_obj.id
    db.delete(db_obj)
    db.commit()
    logger.info(f"Schedule item {schedule_id} deleted")
