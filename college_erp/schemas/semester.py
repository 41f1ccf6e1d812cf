# college_erp/schemas/semester.py
from pydantic import BaseModel
from datetime import date, datetime


class SemesterBasicInfo(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class SemesterPublic(SemesterBasicInfo):
    year: int
    term: str
    start_date: date | None = None
    end_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
