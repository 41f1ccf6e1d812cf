# college_erp/api/endpoints/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from college_erp.db.session import get_db
from college_erp.schemas.auth import LoginRequest, LoginResponse
from college_erp.schemas.common import APIResponse
from college_erp.services import auth_service

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=APIResponse[LoginResponse])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Identifier is a student id, F/A/SU-prefixed staff id, or an email.
    """
    result = auth_service.login_user(db, payload.identifier, payload.password)
    return APIResponse[LoginResponse](data=result, message="Login successful.")
