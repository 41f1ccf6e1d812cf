# college_erp/schemas/auth.py
from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    # student registration id, employee id (F1234 / A1234 / SU1234) or email
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserPayload(BaseModel):
    """Identity embedded in tokens and returned on login."""

    id: str
    name: str
    email: str
    role: str
    profile_picture_url: str | None = None
    department_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserPayload
