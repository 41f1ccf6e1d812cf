"""
Typed errors for the domain services.

Services raise these instead of returning error codes; the API layer turns
them into the JSON error envelope in one place (see ``register_exception_handlers``).

Usage:
    from college_erp.core.exceptions import NotFoundError

    if section is None:
        raise NotFoundError("Section not found.")
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base error carrying an HTTP status and optional details."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized."):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403

    def __init__(self, message: str = "Forbidden: You do not have permission to access this resource."):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class IntegrityCheckError(AppError):
    """Stored data contradicts itself (e.g. role column vs. detail tables)."""

    status_code = 500


class RoleNotConfiguredError(IntegrityCheckError):
    def __init__(self, user_id: str):
        super().__init__(
            "User role is not configured.",
            details={"user_id": user_id},
        )
