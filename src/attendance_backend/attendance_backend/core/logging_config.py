from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings) -> None:
    """Configure the root logger from a settings module.

    Reads LOG_LEVEL, LOG_FILE_ENABLED, LOG_FILE_PATH, LOG_FILE_MAX_BYTES and
    LOG_FILE_BACKUPS. Safe to call more than once (handlers are replaced).
    """

    level_name = str(getattr(settings, "LOG_LEVEL", "INFO") or "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    file_path = None
    if bool(getattr(settings, "LOG_FILE_ENABLED", False)):
        file_path = Path(getattr(settings, "LOG_FILE_PATH", "./logs/app.log"))
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(getattr(settings, "LOG_FILE_MAX_BYTES", 10 * 1024 * 1024)),
                backupCount=int(getattr(settings, "LOG_FILE_BACKUPS", 5)),
                encoding="utf-8",
            )
        )

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured (level=%s)", logging.getLevelName(level))
    if file_path is not None:
        logger.info("File logging enabled at %s", file_path)
