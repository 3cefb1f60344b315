from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DutyType
from .model import Duty, NewDuty


class DutyRepository(Protocol):
    def get_by_id(self, duty_id: str) -> Optional[Duty]:
        raise NotImplementedError

    def list_by_type(self, duty_type: DutyType) -> Sequence[Duty]:
        """Duties of one type, earliest first."""

        raise NotImplementedError

    def list_for_user(self, netid: str) -> Sequence[Duty]:
        """Duties whose ``assigned`` list contains ``netid``."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Duty]:
        raise NotImplementedError

    def create(self, duty: NewDuty) -> str:
        """Returns the new document id."""

        raise NotImplementedError

    def update(self, duty: Duty) -> bool:
        raise NotImplementedError

    def delete(self, duty_id: str) -> bool:
        raise NotImplementedError

    def set_checked(self, duty_id: str, checked: bool) -> bool:
        raise NotImplementedError

    def set_credits(self, duty_id: str, netid: str, credits: float) -> bool:
        raise NotImplementedError
