# college_erp/core/config.py
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "College ERP"
    ENVIRONMENT: str = "development"  # development / production / test

    # Database
    # Single-file SQLite store; any SQLAlchemy URL works
    DATABASE_URL: str = "sqlite:///./college_erp.db"

    # JWT Authentication
    SECRET_KEY: str = "change-me-in-production-use-a-long-random-string"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Logging
    LOG_LEVEL: str = "INFO"

    # Frontend / realtime
    FRONTEND_URL: str = "http://localhost:3000"
    SOCKETIO_PATH: str = "socket.io"

    # Domain defaults
    DEFAULT_SECTION_CAPACITY: int = 60
    STUDENT_ID_PREFIX: str = "2025"  # intake year
    STUDENT_ID_SUFFIX_DIGITS: int = 6

    @field_validator("STUDENT_ID_PREFIX")
    @classmethod
    def _numeric_student_prefix(cls, value: str) -> str:
        # student ids are recognised at login as all-digit strings
        if not value.isdigit():
            raise ValueError("STUDENT_ID_PREFIX must contain digits only")
        return value

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
