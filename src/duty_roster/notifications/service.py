from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Callable, List, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..duties.model import Duty
from ..users.model import User
from ..users.repository import UserRepository
from .messages import assignment_message, to_e164, unassignment_message
from .sms import SmsSender

logger = logging.getLogger(__name__)


class NotificationService:
    """Texts assignees when a duty document is created, updated or deleted.

    There is no retry or de-duplication here: if the platform re-runs a trigger,
    people get the message again.
    """

    def __init__(
        self,
        users: UserRepository,
        sms: SmsSender,
        *,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._users = users
        self._sms = sms
        self._tz = tz
        self._clock = clock

    def _is_past(self, duty: Duty) -> bool:
        return duty.time < self._clock()

    def _load(self, netids: Sequence[str]) -> List[Optional[User]]:
        found = self._users.get_many(netids)
        return [found.get(n) for n in netids]

    def duty_created(self, duty: Duty) -> int:
        # don't notify for duties scheduled in the past
        if self._is_past(duty):
            logger.info("Duty %s is in the past; no notifications", duty.duty_id)
            return 0

        sent = 0
        try:
            users = self._load(duty.assigned)
            for netid, user in zip(duty.assigned, users):
                if user is None:
                    logger.warning("User %s not found; skipping remaining notifications for duty %s", netid, duty.duty_id)
                    return sent

                body = assignment_message(user, duty, users, tz=self._tz)
                logger.debug(body)
                self._sms.send(to=to_e164(user.phone), body=body)
                sent += 1
        except Exception:
            logger.exception("Error notifying users on duty creation.")
            raise
        return sent

    def duty_deleted(self, duty: Duty) -> int:
        if self._is_past(duty):
            logger.info("Duty %s is in the past; no notifications", duty.duty_id)
            return 0

        sent = 0
        try:
            for netid, user in zip(duty.assigned, self._load(duty.assigned)):
                if user is None:
                    logger.warning("User %s not found; skipping remaining notifications for duty %s", netid, duty.duty_id)
                    return sent

                self._sms.send(to=to_e164(user.phone), body=unassignment_message(user, duty, tz=self._tz))
                sent += 1
        except Exception:
            logger.exception("Error notifying users on duty deletion.")
            raise
        return sent

    def duty_updated(self, before: Duty, after: Duty) -> int:
        """Tell people who were added or dropped; everyone else hears nothing."""
        if self._is_past(after):
            return 0

        added = [n for n in after.assigned if n not in before.assigned]
        removed = [n for n in before.assigned if n not in after.assigned]
        if not added and not removed:
            return 0

        sent = 0
        try:
            current = self._load(after.assigned)
            by_netid = dict(zip(after.assigned, current))
            for netid in added:
                user = by_netid.get(netid)
                if user is None:
                    logger.warning("User %s not found; skipping remaining notifications for duty %s", netid, after.duty_id)
                    return sent
                self._sms.send(to=to_e164(user.phone), body=assignment_message(user, after, current, tz=self._tz))
                sent += 1

            for netid, user in zip(removed, self._load(removed)):
                if user is None:
                    logger.warning("User %s not found; skipping remaining notifications for duty %s", netid, before.duty_id)
                    return sent
                self._sms.send(to=to_e164(user.phone), body=unassignment_message(user, before, tz=self._tz))
                sent += 1
        except Exception:
            logger.exception("Error notifying users on duty update.")
            raise
        return sent
