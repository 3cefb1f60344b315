from __future__ import annotations

import importlib
from dataclasses import dataclass
from datetime import tzinfo
from types import ModuleType
from typing import Optional

from .common.datetime_utils import get_zone
from .config import get_settings_module
from .credits.service import CreditReportService
from .database.connection import FirebaseConfig, FirestoreConnection
from .duties.firestore_duty_repository import FirestoreDutyRepository
from .duties.repository import DutyRepository
from .duties.service import DutyService
from .notifications.service import NotificationService
from .notifications.sms import LoggingSmsSender, SmsSender, TwilioConfig, TwilioSmsSender
from .users.firestore_user_repository import FirestoreUserRepository
from .users.repository import UserRepository
from .users.service import AccessPolicy, AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    duties_repo: DutyRepository

    policy: AccessPolicy
    auth_service: AuthService
    user_service: UserService
    duty_service: DutyService
    credit_report_service: CreditReportService

    tz: tzinfo


def load_settings(settings_module: Optional[str] = None) -> ModuleType:
    return importlib.import_module(settings_module or get_settings_module())


def assemble(
    *,
    users_repo: UserRepository,
    duties_repo: DutyRepository,
    tz: tzinfo,
    default_credits: float = 0,
) -> Container:
    """Wire services around already-built repositories (tests pass fakes here)."""
    policy = AccessPolicy()
    return Container(
        users_repo=users_repo,
        duties_repo=duties_repo,
        policy=policy,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        duty_service=DutyService(duties_repo, users_repo, policy=policy, default_credits=default_credits),
        credit_report_service=CreditReportService(duties_repo, tz=tz),
        tz=tz,
    )


def _connection(settings: ModuleType) -> FirestoreConnection:
    return FirestoreConnection.get_instance(
        FirebaseConfig(
            credentials_path=str(getattr(settings, "FIREBASE_CREDENTIALS", "") or ""),
            project_id=getattr(settings, "FIREBASE_PROJECT_ID", None),
        )
    )


def build_container(settings: ModuleType) -> Container:
    conn = _connection(settings)
    return assemble(
        users_repo=FirestoreUserRepository(conn),
        duties_repo=FirestoreDutyRepository(conn),
        tz=get_zone(getattr(settings, "TIMEZONE", None)),
        default_credits=float(getattr(settings, "DEFAULT_DUTY_CREDITS", 0)),
    )


def build_sms_sender(settings: ModuleType) -> SmsSender:
    config = TwilioConfig(
        account_sid=getattr(settings, "TWILIO_ACCOUNT_SID", ""),
        auth_token=getattr(settings, "TWILIO_AUTH_TOKEN", ""),
        messaging_service_sid=getattr(settings, "TWILIO_MESSAGING_SID", ""),
    )
    # Only local runs may go without Twilio; elsewhere fail loudly.
    if not config.configured and getattr(settings, "DEBUG", False):
        return LoggingSmsSender()
    return TwilioSmsSender(config)


def build_notification_service(settings: Optional[ModuleType] = None) -> NotificationService:
    settings = settings or load_settings()
    return NotificationService(
        FirestoreUserRepository(_connection(settings)),
        build_sms_sender(settings),
        tz=get_zone(getattr(settings, "TIMEZONE", None)),
    )
