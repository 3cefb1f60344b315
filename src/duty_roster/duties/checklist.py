"""View model for the duty checklist page.

The page lists every duty of one type. Checked-off duties are hidden unless the
"show checked" switch is on, and each assignee row shows a credit status icon.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, List, Optional

from ..common.datetime_utils import format_month_day
from ..common.validators import normalize_credits
from ..core.constants import COMPLETE_CREDITS, MISSING_CREDITS
from ..core.enums import CreditStatus
from .model import Duty


def credit_status(credits: Optional[float]) -> CreditStatus:
    if credits == COMPLETE_CREDITS:
        return CreditStatus.COMPLETE
    if credits == MISSING_CREDITS:
        return CreditStatus.MISSING
    return CreditStatus.CUSTOM


def is_visible(duty: Duty, show_checked: bool) -> bool:
    return show_checked or not duty.checked


def visible_duties(duties: Iterable[Duty], show_checked: bool) -> List[Duty]:
    return [d for d in duties if is_visible(d, show_checked)]


def needs_confirmation(current: Optional[float], target: float) -> bool:
    """Marking complete/missing when already in that state is a no-op."""
    return current != target


def complete_prompt(first_name: str) -> str:
    return f"Check off {first_name}'s duty? ({first_name} will receive 1 credit)"


def missing_prompt(first_name: str) -> str:
    return (
        f"Are you sure you would like to mark {first_name} as missing?\n"
        f"({first_name} will receive 0 credits)"
    )


@dataclass(frozen=True)
class ChecklistPerson:
    netid: str
    name: str
    first_name: str
    credits: Optional[float]
    status: CreditStatus
    needs_complete_confirm: bool = True
    needs_missing_confirm: bool = True

    @property
    def credits_label(self) -> str:
        if self.credits is None:
            return "-"
        return str(normalize_credits(self.credits))


@dataclass(frozen=True)
class ChecklistItem:
    duty_id: str
    title: str
    checked: bool
    hidden: bool
    people: List[ChecklistPerson]


def build_checklist(duties: Iterable[Duty], *, show_checked: bool, tz: tzinfo | None = None) -> List[ChecklistItem]:
    """Every duty is returned; ``hidden`` tells the page whether to collapse it.

    Hidden rows stay in the page so flipping the switch back does not need a
    reload.
    """
    duties = list(duties)
    shown = {d.duty_id for d in visible_duties(duties, show_checked)}

    items: List[ChecklistItem] = []
    for duty in duties:
        people = []
        for netid in duty.assigned:
            name = duty.name_of(netid)
            credits = duty.credits_of(netid)
            people.append(
                ChecklistPerson(
                    netid=netid,
                    name=name,
                    first_name=name.split()[0] if name.split() else name,
                    credits=credits,
                    status=credit_status(credits),
                    needs_complete_confirm=needs_confirmation(credits, COMPLETE_CREDITS),
                    needs_missing_confirm=needs_confirmation(credits, MISSING_CREDITS),
                )
            )

        items.append(
            ChecklistItem(
                duty_id=duty.duty_id,
                title=f"{format_month_day(duty.time, tz)}  {duty.name}",
                checked=duty.checked,
                hidden=duty.duty_id not in shown,
                people=people,
            )
        )
    return items
