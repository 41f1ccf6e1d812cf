# college_erp/api/endpoints/semesters.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from college_erp.core.security import get_current_user
from college_erp.db.session import get_db
from college_erp.models.user import User
from college_erp.schemas.common import APIResponse
from college_erp.schemas.semester import SemesterBasicInfo
from college_erp.services import semester_service

router = APIRouter(tags=["semesters"])


@router.get("/basic", response_model=APIResponse[List[SemesterBasicInfo]])
def list_semesters_basic(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    semesters = semester_service.list_semesters_basic_info(db)
    return APIResponse[List[SemesterBasicInfo]](
        data=[SemesterBasicInfo.model_validate(s) for s in semesters]
    )
