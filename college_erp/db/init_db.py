# college_erp/db/init_db.py
import logging

from sqlalchemy.engine import Engine

from college_erp import models  # noqa: registers every table on Base.metadata
from college_erp.db.base import Base
from college_erp.db.session import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(bind: Engine | None = None) -> None:
    bind = bind or default_engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema initialized.")
