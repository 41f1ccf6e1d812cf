# college_erp/models/semester.py
from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.sql import func
from college_erp.db.base import Base


class Semester(Base):
    __tablename__ = "semesters"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)  # "Odd 2024"
    year = Column(Integer, nullable=False)
    term = Column(String(20), nullable=False)  # "Odd" / "Even" / "Fall" ...
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
