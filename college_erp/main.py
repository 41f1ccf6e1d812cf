# college_erp/main.py
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from college_erp.api.endpoints import (
    auth,
    courses,
    health,
    messages,
    schedules,
    sections,
    semesters,
    users,
)
from college_erp.api.errors import register_exception_handlers
from college_erp.core.config import settings
from college_erp.core.logging_config import setup_logging
from college_erp.db.init_db import init_db
from college_erp.realtime.gateway import RealtimeGateway

logger = logging.getLogger(__name__)


def create_app(gateway: Optional[RealtimeGateway] = None) -> FastAPI:
    """
    Build the HTTP app. The realtime gateway is optional; without one,
    messages are stored but not pushed.
    """
    setup_logging()

    app = FastAPI(title=settings.PROJECT_NAME)

    origins = [
        settings.FRONTEND_URL,
        "http://127.0.0.1:3000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)"
        )
        return response

    register_exception_handlers(app)

    app.state.gateway = gateway

    @app.on_event("startup")
    def on_startup():
        init_db()

    app.include_router(auth.router, prefix="/api/auth")
    app.include_router(users.router, prefix="/api/users")
    app.include_router(messages.router, prefix="/api/messages")
    app.include_router(sections.router, prefix="/api/sections")
    app.include_router(schedules.router, prefix="/api/schedules")
    app.include_router(courses.router, prefix="/api/courses")
    app.include_router(semesters.router, prefix="/api/semesters")
    app.include_router(health.router, prefix="/api/health")

    return app


gateway = RealtimeGateway()
app = create_app(gateway)

# uvicorn college_erp.main:asgi_app
asgi_app = gateway.asgi_app(app)
