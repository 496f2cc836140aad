from .config import *  # noqa: F401,F403

JWT_SECRET = "test-secret"
JWT_TTL_HOURS = 1

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
