# college_erp/api/endpoints/courses.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from college_erp.core.security import get_current_user
from college_erp.db.session import get_db
from college_erp.models.user import User
from college_erp.schemas.common import APIResponse
from college_erp.schemas.course import CourseBasicInfo
from college_erp.services import course_service

router = APIRouter(tags=["courses"])


@router.get("/basic", response_model=APIResponse[List[CourseBasicInfo]])
def list_courses_basic(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    courses = course_service.list_courses_basic_info(db)
    return APIResponse[List[CourseBasicInfo]](
        data=[CourseBasicInfo.model_validate(c) for c in courses]
    )
