from __future__ import annotations

from datetime import tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import format_long_date
from ..core.constants import PHONE_COUNTRY_CODE
from ..duties.model import Duty
from ..users.model import User


def to_e164(phone: str) -> str:
    """Stored numbers are national (10 digits); the country code is always +1."""
    return f"{PHONE_COUNTRY_CODE}{phone}"


def assignment_message(
    user: User,
    duty: Duty,
    co_assignees: Sequence[Optional[User]] = (),
    *,
    tz: tzinfo | None = None,
) -> str:
    msg = f'Hi {user.first_name}, you have been assigned to "{duty.name}" on {format_long_date(duty.time, tz)}\n'

    others = [u.name for u in co_assignees if u is not None and u.netid != user.netid]
    msg += "\n".join(others)
    return msg


def unassignment_message(user: User, duty: Duty, *, tz: tzinfo | None = None) -> str:
    return f'Hi {user.first_name}, you have been unassigned from "{duty.name}" on {format_long_date(duty.time, tz)}'
