"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

USERS_COLLECTION = "users"
DUTIES_COLLECTION = "duties"

PHONE_COUNTRY_CODE = "+1"
PHONE_DIGITS = 10

DEFAULT_DUTY_CREDITS = 0
COMPLETE_CREDITS = 1
MISSING_CREDITS = 0

DEFAULT_TIMEZONE = "America/New_York"
