# college_erp/services/role_service.py
import logging
from typing import List, Tuple, Type

from sqlalchemy.orm import Session

from college_erp.core.exceptions import IntegrityCheckError, RoleNotConfiguredError
from college_erp.db.base import Base
from college_erp.models.user import (
    AdminDetail,
    FacultyDetail,
    StudentDetail,
    SuperuserDetail,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

# probe order decides the role when a user has rows in several tables
ROLE_DETAIL_TABLES: List[Tuple[UserRole, Type[Base]]] = [
    (UserRole.STUDENT, StudentDetail),
    (UserRole.FACULTY, FacultyDetail),
    (UserRole.ADMIN, AdminDetail),
    (UserRole.SUPERUSER, SuperuserDetail),
]


def resolve_role(db: Session, user_id: str) -> UserRole:
    """
    Derive a user's role from the role-detail tables.

    Returns the first table with a row for ``user_id``; raises
    RoleNotConfiguredError when none has one. Not cached.
    """
    for role, detail_model in ROLE_DETAIL_TABLES:
        found = (
            db.query(detail_model.user_id)
            .filter(detail_model.user_id == user_id)
            .first()
        )
        if found is not None:
            return role

    logger.error(f"No role detail row found for user {user_id}")
    raise RoleNotConfiguredError(user_id)


def ensure_role_consistent(db: Session, user: User, expected_role: UserRole) -> UserRole:
    """
    Check that the stored role column, the detail tables and the caller's
    expectation all agree. Disagreement is a data bug, so it fails closed
    with a 500 rather than an auth error.
    """
    resolved = resolve_role(db, user.id)
    if resolved != expected_role or user.role != expected_role.value:
        logger.error(
            f"Role mismatch for user {user.id}: expected={expected_role.value}, "
            f"stored={user.role}, resolved={resolved.value}"
        )
        raise IntegrityCheckError(
            "User role configuration is inconsistent.",
            details={"user_id": user.id},
        )
    return resolved
