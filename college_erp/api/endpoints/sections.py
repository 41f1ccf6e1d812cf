# college_erp/api/endpoints/sections.py
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from college_erp.core.security import get_current_admin
from college_erp.db.session import get_db
from college_erp.models.user import User
from college_erp.schemas.common import APIResponse
from college_erp.schemas.section import (
    EnrollmentCreate,
    EnrollmentPublic,
    SectionBasicInfo,
    SectionCreate,
    SectionPublic,
    SectionUpdate,
)
from college_erp.services import enrollment_service, section_service

router = APIRouter(tags=["sections"])


@router.get("/basic", response_model=APIResponse[List[SectionBasicInfo]])
def list_sections_basic(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return APIResponse[List[SectionBasicInfo]](data=section_service.list_sections_basic_info(db))


@router.get("", response_model=APIResponse[List[SectionPublic]])
def list_sections(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    sections = section_service.list_sections(db, skip=skip, limit=limit)
    return APIResponse[List[SectionPublic]](
        data=[SectionPublic.model_validate(s) for s in sections]
    )


@router.post("", response_model=APIResponse[SectionPublic], status_code=status.HTTP_201_CREATED)
def create_section(
    obj_in: SectionCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.create_section(db, obj_in=obj_in)
    return APIResponse[SectionPublic](
        data=SectionPublic.model_validate(section),
        message="Section created successfully.",
    )


@router.get("/{section_id}", response_model=APIResponse[SectionPublic])
def get_section(
    section_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    return APIResponse[SectionPublic](data=SectionPublic.model_validate(section))


@router.put("/{section_id}", response_model=APIResponse[SectionPublic])
def update_section(
    section_id: int,
    obj_in: SectionUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    section = section_service.update_section(db, db_obj=section, obj_in=obj_in)
    return APIResponse[SectionPublic](
        data=SectionPublic.model_validate(section),
        message="Section updated successfully.",
    )


@router.delete("/{section_id}", response_model=APIResponse[None])
def delete_section(
    section_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    section_service.delete_section(db, db_obj=section)
    return APIResponse[None](message="Section deleted successfully.")


# ---- enrollments ----

@router.get("/{section_id}/enrollments", response_model=APIResponse[List[EnrollmentPublic]])
def list_enrollments(
    section_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    enrollments = enrollment_service.list_enrollments(db, section=section)
    return APIResponse[List[EnrollmentPublic]](
        data=[EnrollmentPublic.model_validate(e) for e in enrollments]
    )


@router.post(
    "/{section_id}/enrollments",
    response_model=APIResponse[EnrollmentPublic],
    status_code=status.HTTP_201_CREATED,
)
def enroll_student(
    section_id: int,
    obj_in: EnrollmentCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    enrollment = enrollment_service.enroll_student(
        db, section=section, student_user_id=obj_in.student_user_id
    )
    return APIResponse[EnrollmentPublic](
        data=EnrollmentPublic.model_validate(enrollment),
        message="Student enrolled successfully.",
    )


@router.delete("/{section_id}/enrollments/{student_user_id}", response_model=APIResponse[None])
def unenroll_student(
    section_id: int,
    student_user_id: str,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    section = section_service.get_section_or_404(db, section_id)
    enrollment_service.unenroll_student(db, section=section, student_user_id=student_user_id)
    return APIResponse[None](message="Student unenrolled successfully.")
