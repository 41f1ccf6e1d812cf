# college_erp/schemas/course.py
from pydantic import BaseModel
from datetime import datetime


class CourseBasicInfo(BaseModel):
    id: int
    course_code: str
    course_name: str

    model_config = {"from_attributes": True}


class CoursePublic(CourseBasicInfo):
    department_id: int
    credits: int | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
