import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Path to the service-account JSON downloaded from the Firebase console
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "admin-config.json")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID") or None

TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_MESSAGING_SID = os.getenv("TWILIO_MESSAGING_SID", "")

TIMEZONE = os.getenv("TIMEZONE", "America/New_York")
DEFAULT_DUTY_CREDITS = float(os.getenv("DEFAULT_DUTY_CREDITS", "0"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = False

# Sign in by netid only; real deployments sit behind the university SSO
ALLOW_NETID_LOGIN = bool(int(os.getenv("ALLOW_NETID_LOGIN", "1")))
