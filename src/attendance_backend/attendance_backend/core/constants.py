"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

DEFAULT_TOKEN_TTL_HOURS = 72
TOKEN_ALGORITHM = "HS256"
TOKEN_ISSUER = "attendance-backend"

MIN_PASSWORD_LENGTH = 6
USERNAME_LENGTH = (3, 100)
SHIFT_NAME_LENGTH = (3, 100)
ROLE_NAME_LENGTH = (3, 50)
