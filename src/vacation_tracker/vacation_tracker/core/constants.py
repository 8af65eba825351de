"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

API_PREFIX = "/api"
DEFAULT_TOKEN_MAX_AGE_SECONDS = 24 * 60 * 60
TOKEN_SALT = "vacation-tracker-auth"
MIN_PASSWORD_LENGTH = 6
