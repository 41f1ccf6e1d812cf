# college_erp/models/section.py
from datetime import date

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint, select
from sqlalchemy.orm import column_property, relationship
from sqlalchemy.sql import func
from college_erp.db.base import Base


class Section(Base):
    __tablename__ = "sections"
    __table_args__ = (
        UniqueConstraint("course_id", "semester_id", "section_code", name="uq_section_course_semester_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    section_code = Column(String(20), nullable=False)  # CSO24A
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=False, index=True)
    faculty_user_id = Column(
        String(20), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    room_number = Column(String(50), nullable=True)
    max_capacity = Column(Integer, nullable=False, default=60)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    course = relationship("Course")
    semester = relationship("Semester")
    faculty = relationship("User")
    enrollments = relationship("StudentSectionEnrollment", back_populates="section")
    meetings = relationship(
        "ScheduleItem",
        back_populates="section",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class StudentSectionEnrollment(Base):
    __tablename__ = "student_section_enrollments"
    __table_args__ = (
        UniqueConstraint("student_user_id", "section_id", name="uq_enrollment_student_section"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_user_id = Column(
        String(20), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # deletion of an enrolled section is refused by the service layer
    section_id = Column(
        Integer, ForeignKey("sections.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    enrollment_date = Column(Date, nullable=False, default=date.today)
    grade = Column(String(5), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    student = relationship("User")
    section = relationship("Section", back_populates="enrollments")


Section.enrolled_students_count = column_property(
    select(func.count(StudentSectionEnrollment.id))
    .where(StudentSectionEnrollment.section_id == Section.id)
    .correlate_except(StudentSectionEnrollment)
    .scalar_subquery()
)
