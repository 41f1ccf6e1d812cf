# college_erp/api/endpoints/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from college_erp.core.exceptions import NotFoundError
from college_erp.core.security import get_current_admin, get_current_staff, get_current_user
from college_erp.db.session import get_db
from college_erp.models.user import User
from college_erp.schemas.common import APIResponse
from college_erp.schemas.user import (
    DepartmentPublic,
    RoleName,
    UserCreate,
    UserProfile,
    UserPublic,
    UserUpdate,
)
from college_erp.services import user_service

router = APIRouter(tags=["users"])


@router.get("/me", response_model=APIResponse[UserProfile])
def read_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = user_service.get_user_profile(db, current_user.id)
    return APIResponse[UserProfile](data=profile)


@router.get("/departments", response_model=APIResponse[List[DepartmentPublic]])
def list_departments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    departments = user_service.list_departments(db)
    return APIResponse[List[DepartmentPublic]](
        data=[DepartmentPublic.model_validate(d) for d in departments]
    )


@router.get("", response_model=APIResponse[List[UserPublic]])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
    role: Optional[RoleName] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """
    Admins, superusers and faculty; ``role`` narrows the list.
    """
    users = user_service.list_users(db, role=role, skip=skip, limit=limit)
    return APIResponse[List[UserPublic]](data=[UserPublic.model_validate(u) for u in users])


@router.post("", response_model=APIResponse[UserProfile], status_code=status.HTTP_201_CREATED)
def create_user(
    obj_in: UserCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = user_service.create_user(db, obj_in=obj_in)
    profile = user_service.get_user_profile(db, user.id)
    return APIResponse[UserProfile](data=profile, message="User created successfully.")


@router.get("/{user_id}", response_model=APIResponse[UserProfile])
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    profile = user_service.get_user_profile(db, user_id)
    return APIResponse[UserProfile](data=profile)


@router.put("/{user_id}", response_model=APIResponse[UserProfile])
def update_user(
    user_id: str,
    obj_in: UserUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = user_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")

    user_service.update_user(db, db_obj=user, obj_in=obj_in)
    profile = user_service.get_user_profile(db, user_id)
    return APIResponse[UserProfile](data=profile, message="User updated successfully.")


@router.delete("/{user_id}", response_model=APIResponse[None])
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = user_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")

    user_service.delete_user(db, db_obj=user, acting_user=current_admin)
    return APIResponse[None](message="User deleted successfully.")
