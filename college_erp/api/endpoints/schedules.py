# college_erp/api/endpoints/schedules.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from college_erp.core.exceptions import NotFoundError
from college_erp.core.security import get_current_admin, get_current_user
from college_erp.db.session import get_db
from college_erp.models.user import User
from college_erp.schemas.common import APIResponse
from college_erp.schemas.schedule import ScheduleItemCreate, ScheduleItemPublic
from college_erp.services import schedule_service, section_service

router = APIRouter(tags=["schedules"])


@router.get("/my", response_model=APIResponse[List[ScheduleItemPublic]])
def list_my_schedules(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = schedule_service.list_my_schedules(db, user=current_user)
    return APIResponse[List[ScheduleItemPublic]](
        data=[ScheduleItemPublic.model_validate(i) for i in items]
    )


@router.get("/section/{section_id}", response_model=APIResponse[List[ScheduleItemPublic]])
def list_section_schedule(
    section_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    items = schedule_service.list_section_schedule(db, section=section)
    return APIResponse[List[ScheduleItemPublic]](
        data=[ScheduleItemPublic.model_validate(i) for i in items]
    )


@router.post("", response_model=APIResponse[ScheduleItemPublic], status_code=status.HTTP_201_CREATED)
def create_schedule_item(
    obj_in: ScheduleItemCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    item = schedule_service.create_schedule_item(db, obj_in=obj_in)
    return APIResponse[ScheduleItemPublic](
        data=ScheduleItemPublic.model_validate(item),
        message="Schedule item created successfully.",
    )


@router.delete("/{schedule_id}", response_model=APIResponse[None])
def delete_schedule_item(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    item = schedule_service.get_schedule_item(db, schedule_id)
    if item is None:
        raise NotFoundError("Schedule item not found.")

    schedule_service.delete_schedule_item(db, db_obj=item)
    return APIResponse[None](message="Schedule item deleted successfully.")
