"""
Centralized logging configuration.

Every module logs through ``logging.getLogger(__name__)``; this module only
wires the root logger once at application start.
"""

import logging
import sys
from typing import Optional

from college_erp.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that are too chatty at INFO
_NOISY_LOGGERS = ("uvicorn.access", "engineio", "engineio.server", "socketio", "socketio.server")

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger with a console handler.

    Safe to call more than once; only the first call installs the handler.
    """
    global _configured

    log_level = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(log_level)

    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
        _configured = True

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
