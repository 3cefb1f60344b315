SECRET_KEY = "test-secret"

FIREBASE_CREDENTIALS = ""
FIREBASE_PROJECT_ID = "duty-roster-test"

TWILIO_ACCOUNT_SID = ""
TWILIO_AUTH_TOKEN = ""
TWILIO_MESSAGING_SID = ""

TIMEZONE = "America/New_York"
DEFAULT_DUTY_CREDITS = 0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
LOG_JSON = False

ALLOW_NETID_LOGIN = True
