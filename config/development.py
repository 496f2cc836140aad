from .config import *  # noqa: F401,F403
from .config import env_bool

JWT_SECRET = JWT_SECRET or "dev-jwt-secret"  # noqa: F405

DEBUG = True
LOG_LEVEL = "DEBUG"

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
# Optional: also seed the admin account on startup
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "0")
