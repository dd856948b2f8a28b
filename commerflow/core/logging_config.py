"""
Logging setup for the CommerFlow API and CLI.

Every module logs through ``get_logger(__name__)``, so logger names follow the
package tree: ``commerflow.server.middleware.request_logging`` writes one line
per HTTP request, ``commerflow.server.services.order_service`` records checkout,
status changes and cancellations, ``commerflow.core.cache`` reports catalogue
cache invalidation and ``commerflow.cli`` covers the admin commands.

``setup_logging`` is called once by the FastAPI lifespan and once by the CLI
entry point. It installs a single console handler on the root logger and,
when ``ENABLE_FILE_LOGGING`` is on, a DEBUG file handler writing
``<LOG_FILE_DIR>/commerflow.log``. ``LOG_FORMAT`` picks one of
``simple`` (CLI friendly), ``detailed`` (development) or ``json`` (one object
per line for log shippers in production).
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError


def _logging_settings() -> Dict[str, object]:
    """Read the logging fields of ``Settings``, or the raw environment if it does not validate."""
    try:
        from commerflow.server.core.config import settings
    except ValidationError:
        return {
            "log_level": os.getenv("COMMERFLOW_LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "detailed"),
            "log_file_dir": os.getenv("LOG_FILE_DIR", "logs"),
            "enable_file_logging": os.getenv("ENABLE_FILE_LOGGING", "false").lower() in ("true", "1", "yes"),
        }
    return {
        "log_level": settings.log_level.upper(),
        "log_format": settings.log_format,
        "log_file_dir": settings.log_file_dir,
        "enable_file_logging": settings.enable_file_logging,
    }


_settings = _logging_settings()
LOG_LEVEL = _settings["log_level"]
LOG_FORMAT = _settings["log_format"]
LOG_FILE_DIR = _settings["log_file_dir"]
ENABLE_FILE_LOGGING = _settings["enable_file_logging"]
LOG_FILE_NAME = "commerflow.log"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s"

JSON_FORMAT = (
    '{"time": "%(asctime)s", "service": "commerflow", "level": "%(levelname)s", '
    '"logger": "%(name)s", "line": %(lineno)d, "message": "%(message)s"}'
)

LOG_FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}

MODULE_LOG_LEVELS = {
    # Storefront
    "commerflow.core": "INFO",
    "commerflow.core.database": "INFO",
    "commerflow.core.cache": "INFO",
    "commerflow.core.security": "INFO",
    "commerflow.server": "INFO",
    "commerflow.server.api": "DEBUG",
    "commerflow.server.services": "DEBUG",
    "commerflow.server.middleware": "INFO",
    "commerflow.server.exception_handlers": "INFO",
    "commerflow.cli": "INFO",
    # Drivers and servers
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "asyncio": "WARNING",
    "httpx": "WARNING",
    "uvicorn": "INFO",
    # request lines come from the request logging middleware
    "uvicorn.access": "WARNING",
}


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger for the API process or a CLI run.

    Args:
        log_level: Console level, defaults to ``COMMERFLOW_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to ``detailed``
        enable_file: Allow the file handler; it is only added when ``ENABLE_FILE_LOGGING`` is also on
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(LOG_FORMATS.get(fmt, DETAILED_FORMAT), datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (pass ``__name__``)."""
    return logging.getLogger(name)
