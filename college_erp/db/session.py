# college_erp/db/session.py
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from college_erp.core.config import settings


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign keys switched on."""
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        # SQLite needs this when sessions cross FastAPI's threadpool
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    db_engine = create_engine(database_url, **kwargs)

    if is_sqlite:
        @event.listens_for(db_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
