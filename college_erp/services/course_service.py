# college_erp/services/course_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from college_erp.models.course import Course


def get_course(db: Session, course_id: int) -> Optional[Course]:
    return db.get(Course, course_id)


def list_courses_basic_info(db: Session) -> List[Course]:
    """
    id / code / name of every course, for dropdowns
    """
    return db.query(Course).order_by(Course.course_code.asc()).all()
