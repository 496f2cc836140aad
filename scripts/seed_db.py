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
from attendance_backend.database.bootstrap import ensure_admin_user, ensure_base_roles

logger = logging.getLogger("scripts.seed_db")


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    configure_logging(settings)
    db_config = dict(settings.DB_CONFIG)

    password = getattr(settings, "SEED_ADMIN_PASSWORD", "")
    if not password:
        logger.error("SEED_ADMIN_PASSWORD is not set; refusing to seed an admin without a password")
        return 1

    ensure_base_roles(db_config)
    ensure_admin_user(
        db_config,
        username=settings.SEED_ADMIN_USERNAME,
        password=password,
        email=settings.SEED_ADMIN_EMAIL,
    )
    logger.info("Seeded admin %r -> %s/%s", settings.SEED_ADMIN_USERNAME, db_config.get("host"), db_config.get("database"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
