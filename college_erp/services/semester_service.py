# college_erp/services/semester_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from college_erp.models.semester import Semester


def get_semester(db: Session, semester_id: int) -> Optional[Semester]:
    return db.get(Semester, semester_id)


def list_semesters_basic_info(db: Session) -> List[Semester]:
    """
    newest year first
    """
    return (
        db.query(Semester)
        .order_by(Semester.year.desc(), Semester.name.asc())
        .all()
    )
