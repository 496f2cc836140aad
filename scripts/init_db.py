from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "attendance_backend"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from attendance_backend.core.logging_config import configure_logging
from attendance_backend.database.bootstrap import (
    apply_schema,
    ensure_base_roles,
    ensure_database_exists,
    list_tables,
)

logger = logging.getLogger("scripts.init_db")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(settings)
    db_config = dict(settings.DB_CONFIG)

    ensure_database_exists(db_config)
    apply_schema(db_config)
    ensure_base_roles(db_config)

    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
