from .config import *  # noqa: F401,F403
from .config import env_bool

# JWT_SECRET has no fallback here; the app refuses to start without it.
DEBUG = False

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "0")
