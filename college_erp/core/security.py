# college_erp/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from college_erp.core.config import settings
from college_erp.core.exceptions import AuthenticationError, ForbiddenError
from college_erp.db.session import get_db
from college_erp.models.user import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# auto_error=False so a missing header produces our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERUSER)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        logger.warning("Authentication attempt without token or invalid format")
        raise AuthenticationError("Unauthorized: No token provided or invalid format.")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        logger.warning("Authentication attempt with invalid or expired token")
        raise AuthenticationError("Unauthorized: Invalid or expired token.")

    user = db.get(User, payload["sub"])
    if user is None:
        logger.warning(f"Token subject {payload['sub']} no longer exists")
        raise AuthenticationError("Unauthorized: Invalid or expired token.")

    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Allow-list dependency: the current user must hold one of ``roles``."""
    allowed = {r.value for r in roles}

    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"Authorization failed for user {current_user.id}. "
                f"Required roles: {', '.join(sorted(allowed))}, user role: {current_user.role}"
            )
            raise ForbiddenError()
        return current_user

    return _dependency


get_current_admin = require_roles(*ADMIN_ROLES)
get_current_staff = require_roles(UserRole.FACULTY, *ADMIN_ROLES)
