# college_erp/api/errors.py
import logging
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from college_erp.core.exceptions import AppError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _validation_details(exc: RequestValidationError) -> Dict[str, List[str]]:
    details: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        field = ".".join(loc) or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {success: false, message, details?}."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details or ''}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.info(f"Validation failed for {request.method} {request.url.path}: {details}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed.", "details": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed."
        if exc.status_code == 404 and message == "Not Found":
            message = "Resource not found."
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "An unexpected error occurred."},
        )
