# college_erp/schemas/user.py
from typing import Literal

from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime

RoleName = Literal["student", "faculty", "admin", "superuser"]


class DepartmentPublic(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


# ---- role-specific fields (flat on create/update, nested on read) ----

class StudentFields(BaseModel):
    program: str | None = None
    branch: str | None = None
    expected_graduation_year: int | None = None
    current_year_of_study: int | None = Field(default=None, ge=1, le=10)
    gpa: float | None = Field(default=None, ge=0, le=10)
    academic_status: str | None = None
    father_name: str | None = None
    mother_name: str | None = None
    date_of_birth: date | None = None
    phone_number: str | None = Field(default=None, max_length=20)
    permanent_address: str | None = None
    current_address: str | None = None


class FacultyFields(BaseModel):
    office_number: str | None = Field(default=None, max_length=50)
    specialization: str | None = None


class AdminFields(BaseModel):
    permission_level: str | None = None


class SuperuserFields(BaseModel):
    superuser_permissions: str | None = None  # JSON text


STUDENT_FIELDS = tuple(StudentFields.model_fields)
FACULTY_FIELDS = tuple(FacultyFields.model_fields)


class UserCreate(StudentFields, FacultyFields, AdminFields, SuperuserFields):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    role: RoleName
    profile_picture_url: str | None = None
    department_id: int | None = None


class UserUpdate(StudentFields, FacultyFields, AdminFields, SuperuserFields):
    """Partial update; only fields present in the request body are applied."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    role: RoleName | None = None  # accepted only if unchanged
    profile_picture_url: str | None = None
    department_id: int | None = None


class StudentDetailPublic(StudentFields):
    enrollment_date: date | None = None

    model_config = {"from_attributes": True}


class FacultyDetailPublic(FacultyFields):
    department_id: int

    model_config = {"from_attributes": True}


class AdminDetailPublic(BaseModel):
    permission_level: str | None = None

    model_config = {"from_attributes": True}


class SuperuserDetailPublic(BaseModel):
    permissions: str | None = None

    model_config = {"from_attributes": True}


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    role: str
    profile_picture_url: str | None = None
    department_id: int | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserProfile(UserPublic):
    """Detailed profile; exactly one of the *_details blocks is set."""
    updated_at: datetime | None = None
    department: DepartmentPublic | None = None

    student_details: StudentDetailPublic | None = None
    faculty_details: FacultyDetailPublic | None = None
    admin_details: AdminDetailPublic | None = None
    superuser_details: SuperuserDetailPublic | None = None
