# college_erp/schemas/schedule.py
from pydantic import BaseModel, Field
from datetime import datetime

from college_erp.schemas.section import SectionPublic


class ScheduleItemCreate(BaseModel):
    section_id: int = Field(gt=0)
    start_time: datetime
    end_time: datetime
    room_number: str | None = Field(default=None, max_length=50)


class ScheduleItemPublic(BaseModel):
    id: int
    section_id: int
    start_time: datetime
    end_time: datetime
    room_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    section: SectionPublic | None = None

    model_config = {"from_attributes": True}
