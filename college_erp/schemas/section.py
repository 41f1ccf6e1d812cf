# college_erp/schemas/section.py
from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime

from college_erp.schemas.course import CoursePublic
from college_erp.schemas.semester import SemesterPublic


class SectionCreate(BaseModel):
    course_id: int = Field(gt=0)
    semester_id: int = Field(gt=0)
    section_letter: str = Field(min_length=1, max_length=5)  # "A", "B", "01"
    faculty_user_id: str | None = None
    room_number: str | None = Field(default=None, max_length=50)
    max_capacity: int | None = Field(default=None, ge=1)  # None -> default capacity


class SectionUpdate(BaseModel):
    """course, semester and letter are fixed once the section exists.

    An explicit ``faculty_user_id: null`` unassigns the faculty and an explicit
    ``max_capacity: null`` resets the capacity to the default.
    """
    faculty_user_id: str | None = None
    room_number: str | None = Field(default=None, max_length=50)
    max_capacity: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        return self


class PersonSummary(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class SectionBasicInfo(BaseModel):
    id: int
    section_code: str
    course_name: str
    semester_name: str
    faculty_name: str | None = None


class SectionPublic(BaseModel):
    id: int
    section_code: str
    course_id: int
    semester_id: int
    faculty_user_id: str | None = None
    room_number: str | None = None
    max_capacity: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    course: CoursePublic | None = None
    semester: SemesterPublic | None = None
    faculty: PersonSummary | None = None
    enrolled_students_count: int = 0

    model_config = {"from_attributes": True}


class EnrollmentCreate(BaseModel):
    student_user_id: str = Field(min_length=1)


class EnrollmentPublic(BaseModel):
    id: int
    student_user_id: str
    section_id: int
    enrollment_date: date | None = None
    grade: str | None = None
    student: PersonSummary | None = None

    model_config = {"from_attributes": True}
