# college_erp/models/user.py
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Float, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from college_erp.db.base import Base


class UserRole(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"
    SUPERUSER = "superuser"


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class User(Base):
    __tablename__ = "users"

    # role-prefixed: 2025xxxxxx / Fxxxx / Axxxx / SUxxxx
    id = Column(String(20), primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    profile_picture_url = Column(String(500), nullable=True)
    department_id = Column(
        Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )
    role = Column(String(20), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    department = relationship("Department")
    student_detail = relationship(
        "StudentDetail", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    faculty_detail = relationship(
        "FacultyDetail", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    admin_detail = relationship(
        "AdminDetail", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    superuser_detail = relationship(
        "SuperuserDetail", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )


class StudentDetail(Base):
    __tablename__ = "students"

    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    enrollment_date = Column(Date, nullable=True)
    program = Column(String(100), nullable=True)
    branch = Column(String(100), nullable=True)
    expected_graduation_year = Column(Integer, nullable=True)
    current_year_of_study = Column(Integer, nullable=True)
    gpa = Column(Float, nullable=True)
    academic_status = Column(String(50), nullable=True)
    father_name = Column(String(100), nullable=True)
    mother_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    phone_number = Column(String(20), nullable=True)
    permanent_address = Column(Text, nullable=True)
    current_address = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class FacultyDetail(Base):
    __tablename__ = "faculty"

    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False)
    office_number = Column(String(50), nullable=True)
    specialization = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class AdminDetail(Base):
    __tablename__ = "admins"

    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    permission_level = Column(String(50), nullable=False, default="full_access")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class SuperuserDetail(Base):
    __tablename__ = "superusers"

    user_id = Column(String(20), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    permissions = Column(Text, nullable=False, default="{}")  # JSON text

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
