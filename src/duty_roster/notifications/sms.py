from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from ..core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class SmsSender(Protocol):
    def send(self, *, to: str, body: str) -> Optional[str]:
        """Send one text message; returns the provider's message id."""

        raise NotImplementedError


@dataclass(frozen=True)
class TwilioConfig:
    account_sid: str
    auth_token: str
    messaging_service_sid: str

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.messaging_service_sid)


class TwilioSmsSender(SmsSender):
    def __init__(self, config: TwilioConfig, *, client: Optional[Client] = None):
        if not config.configured and client is None:
            raise NotificationError("Twilio credentials are not configured")
        self._config = config
        self._client = client or Client(config.account_sid, config.auth_token)

    def send(self, *, to: str, body: str) -> Optional[str]:
        try:
            message = self._client.messages.create(
                to=to,
                body=body,
                messaging_service_sid=self._config.messaging_service_sid,
            )
        except TwilioRestException as e:
            raise NotificationError(f"Twilio rejected message to {to}: {e.msg}") from e

        logger.debug("Queued SMS %s to %s", message.sid, to)
        return message.sid


class LoggingSmsSender(SmsSender):
    """Used when Twilio is not configured (local runs); only logs the text."""

    def send(self, *, to: str, body: str) -> Optional[str]:
        logger.info("SMS to %s:\n%s", to, body)
        return None
