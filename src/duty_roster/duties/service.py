from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..common.validators import normalize_credits, parse_credits, require_duty_type, require_non_empty
from ..core.constants import DEFAULT_DUTY_CREDITS
from ..core.enums import CreditStatus, DutyType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from ..users.service import AccessPolicy
from .checklist import credit_status
from .model import Duty, NewDuty
from .repository import DutyRepository

logger = logging.getLogger(__name__)

CHECK_ERROR_MESSAGE = "Error checking off duty."


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a checklist write as the page should show it.

    ``value`` is always the last successfully written value: the new one on
    success, the previous one after a failed write.
    """

    success: bool
    value: object
    message: Optional[str] = None
    status: Optional[CreditStatus] = None


def empty_groups() -> Dict[DutyType, List[Duty]]:
    return {t: [] for t in DutyType}


class DutyService:
    def __init__(
        self,
        duties: DutyRepository,
        users: UserRepository,
        *,
        policy: Optional[AccessPolicy] = None,
        default_credits: float = DEFAULT_DUTY_CREDITS,
    ):
        self._duties = duties
        self._users = users
        self._policy = policy or AccessPolicy()
        self._default_credits = normalize_credits(default_credits)

    # ---------- reads ----------

    def get_duty(self, duty_id: str) -> Duty:
        duty = self._duties.get_by_id(duty_id)
        if not duty:
            raise NotFoundError(f"Duty {duty_id} not found")
        return duty

    def get_duties_by_user(self, netid: str) -> Tuple[User, Dict[DutyType, List[Duty]]]:
        user = self._users.get_by_netid(netid)
        if not user:
            raise NotFoundError(f"No user with netid {netid}")

        groups = empty_groups()
        for duty in self._duties.list_for_user(netid):
            groups[duty.type].append(duty)
        for items in groups.values():
            items.sort(key=lambda d: d.time)
        return user, groups

    def get_duties_by_type(self, duty_type: object) -> Sequence[Duty]:
        duty_type = require_duty_type(duty_type)
        return sorted(self._duties.list_by_type(duty_type), key=lambda d: d.time)

    # ---------- writes ----------

    def _resolve_assignees(self, assigned: Iterable[str]) -> Tuple[Tuple[str, ...], Dict[str, str]]:
        netids = tuple(dict.fromkeys(n.strip().lower() for n in assigned if n and n.strip()))
        if not netids:
            raise ValidationError("Assign at least one person")

        found = self._users.get_many(netids)
        missing = [n for n in netids if not found.get(n)]
        if missing:
            raise ValidationError(f"Unknown netid(s): {', '.join(missing)}")

        return netids, {n: found[n].name for n in netids}

    def create_duty(
        self,
        *,
        current: Optional[User],
        name: str,
        duty_type: object,
        time: datetime,
        assigned: Iterable[str],
        credits: Optional[float] = None,
    ) -> str:
        duty_type = require_duty_type(duty_type)
        self._policy.require_manage_type(current, duty_type)

        name = require_non_empty(name, "Duty name")
        if not isinstance(time, datetime):
            raise ValidationError("Duty time is required")

        netids, names = self._resolve_assignees(assigned)
        initial = self._default_credits if credits is None else normalize_credits(parse_credits(credits))

        duty_id = self._duties.create(
            NewDuty(
                name=name,
                type=duty_type,
                time=time,
                assigned=netids,
                assigned_names=names,
                credits={n: initial for n in netids},
            )
        )
        logger.info("Created %s duty %s (%s) for %s", duty_type.value, duty_id, name, ", ".join(netids))
        return duty_id

    def update_duty(
        self,
        *,
        current: Optional[User],
        duty_id: str,
        name: Optional[str] = None,
        time: Optional[datetime] = None,
        assigned: Optional[Iterable[str]] = None,
    ) -> Duty:
        duty = self.get_duty(duty_id)
        self._policy.require_manage_type(current, duty.type)

        changes: dict = {}
        if name is not None:
            changes["name"] = require_non_empty(name, "Duty name")
        if time is not None:
            changes["time"] = time
        if assigned is not None:
            netids, names = self._resolve_assignees(assigned)
            changes["assigned"] = netids
            changes["assigned_names"] = names
            # Keep what people already earned; newcomers start at the default.
            changes["credits"] = {n: duty.credits.get(n, self._default_credits) for n in netids}

        updated = replace(duty, **changes)
        if not self._duties.update(updated):
            raise NotFoundError(f"Duty {duty_id} not found")
        logger.info("Updated duty %s", duty_id)
        return updated

    def delete_duty(self, *, current: Optional[User], duty_id: str) -> None:
        duty = self.get_duty(duty_id)
        self._policy.require_manage_type(current, duty.type)
        if not self._duties.delete(duty_id):
            raise NotFoundError(f"Duty {duty_id} not found")
        logger.info("Deleted duty %s (%s)", duty_id, duty.name)

    def check_duty(self, *, current: Optional[User], duty_id: str, checked: bool) -> bool:
        duty = self.get_duty(duty_id)
        self._policy.require_manage_type(current, duty.type)
        if not self._duties.set_checked(duty_id, bool(checked)):
            raise NotFoundError(f"Duty {duty_id} not found")
        return bool(checked)

    def update_user_duty_credits(self, *, current: Optional[User], duty_id: str, netid: str, credits: object) -> float:
        value = normalize_credits(parse_credits(credits))
        duty = self.get_duty(duty_id)
        self._policy.require_manage_type(current, duty.type)
        if netid not in duty.assigned:
            raise ValidationError(f"{netid} is not assigned to {duty.name}")
        if not self._duties.set_credits(duty_id, netid, value):
            raise NotFoundError(f"Duty {duty_id} not found")
        return value

    # ---------- checklist toggles ----------

    def toggle_checked(self, *, current: Optional[User], duty_id: str, checked: bool, previous: bool) -> ToggleResult:
        """Write the flag and report the state to show; roll back on failure."""
        try:
            value = self.check_duty(current=current, duty_id=duty_id, checked=checked)
        except (AuthorizationError, ValidationError):
            raise
        except Exception:
            logger.exception("Failed to set checked=%s on duty %s", checked, duty_id)
            return ToggleResult(success=False, value=bool(previous), message=CHECK_ERROR_MESSAGE)
        return ToggleResult(success=True, value=value)

    def apply_credits(
        self,
        *,
        current: Optional[User],
        duty_id: str,
        netid: str,
        credits: object,
        previous: Optional[float],
    ) -> ToggleResult:
        try:
            value = self.update_user_duty_credits(current=current, duty_id=duty_id, netid=netid, credits=credits)
        except (AuthorizationError, ValidationError):
            raise
        except Exception:
            logger.exception("Failed to update credits of %s on duty %s", netid, duty_id)
            first = self._first_name(duty_id, netid)
            return ToggleResult(
                success=False,
                value=previous,
                message=f"Error updating {first}'s credits.",
                status=credit_status(previous),
            )
        return ToggleResult(success=True, value=value, status=credit_status(value))

    def _first_name(self, duty_id: str, netid: str) -> str:
        try:
            name = self.get_duty(duty_id).name_of(netid)
        except Exception:
            name = netid
        parts = name.split()
        return parts[0] if parts else netid
