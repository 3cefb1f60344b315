"""Cloud Functions deployment entry point (``firebase deploy --only functions``).

The ``predeploy`` hook in ``firebase.json`` copies ``src/duty_roster`` next to
this file, and ``requirements.txt`` holds its third-party dependencies.
"""
import os

# Deployed functions always run with production settings (no SMS logging fallback).
os.environ.setdefault("APP_ENV", "production")

from duty_roster.core.logging_config import setup_logging  # noqa: E402
from duty_roster.notifications.triggers import duty_created, duty_deleted, duty_updated  # noqa: E402

setup_logging(os.getenv("LOG_LEVEL", "INFO"), json_format=True)

__all__ = ["duty_created", "duty_updated", "duty_deleted"]
