# college_erp/services/auth_service.py
import logging
import re
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from college_erp.core.config import settings
from college_erp.core.exceptions import AuthenticationError
from college_erp.core.security import create_access_token, verify_password
from college_erp.models.user import User, UserRole
from college_erp.schemas.auth import LoginResponse, UserPayload
from college_erp.services import role_service, user_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid identifier or password."

# staff id format -> role whose table the id belongs to
STAFF_ID_PATTERNS: Tuple[Tuple[re.Pattern, UserRole], ...] = (
    (re.compile(r"^SU\d{4}$", re.IGNORECASE), UserRole.SUPERUSER),
    (re.compile(r"^F\d{4}$", re.IGNORECASE), UserRole.FACULTY),
    (re.compile(r"^A\d{4}$", re.IGNORECASE), UserRole.ADMIN),
)


def student_id_pattern() -> re.Pattern:
    """Student ids are STUDENT_ID_PREFIX-length digits plus the random suffix."""
    length = len(settings.STUDENT_ID_PREFIX) + settings.STUDENT_ID_SUFFIX_DIGITS
    return re.compile(rf"^\d{{{length}}}$")


def classify_identifier(identifier: str) -> Optional[Tuple[str, Optional[UserRole]]]:
    """
    Decide how a login identifier is looked up.

    Returns ("email", None) for email addresses, ("id", role) for
    role-prefixed ids, or None when the format is not recognised.
    """
    value = identifier.strip()
    if "@" in value:
        return "email", None
    if student_id_pattern().match(value):
        return "id", UserRole.STUDENT
    for pattern, role in STAFF_ID_PATTERNS:
        if pattern.match(value):
            return "id", role
    return None


def authenticate_user(db: Session, identifier: str, password: str) -> User:
    """
    Every failure (unknown format, unknown user, wrong password) raises the
    same AuthenticationError so callers cannot enumerate accounts.
    """
    strategy = classify_identifier(identifier)
    if strategy is None:
        logger.warning(f"Login failed: unrecognised identifier format '{identifier}'")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    lookup, expected_role = strategy
    value = identifier.strip()
    if lookup == "email":
        user = user_service.get_user_by_email(db, value)
    else:
        user = user_service.get_user(db, value.upper())

    if user is None:
        logger.warning(f"Login failed: user {value} not found")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: invalid password for user {value}")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    # email logins carry no role hint; the stored role is then the expectation
    role_service.ensure_role_consistent(db, user, expected_role or UserRole(user.role))
    return user


def login_user(db: Session, identifier: str, password: str) -> LoginResponse:
    logger.info(f"Attempting login for identifier: {identifier}")
    user = authenticate_user(db, identifier, password)

    token = create_access_token(
        data={
            "sub": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
        }
    )
    logger.info(f"User {user.id} logged in successfully as {user.role}")
    return LoginResponse(token=token, user=UserPayload.model_validate(user))
