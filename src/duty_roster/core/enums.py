from __future__ import annotations

from enum import Enum


class DutyType(str, Enum):
    """Loại duty. Thứ tự khai báo cũng là thứ tự hiển thị các cột."""

    WAITER = "waiter"
    CLEANING = "cleaning"
    SOCIAL = "social"

    @classmethod
    def parse(cls, value: object) -> "DutyType | None":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class CreditStatus(str, Enum):
    """Trạng thái hiển thị của số credit mà một người nhận cho một duty."""

    COMPLETE = "complete"
    MISSING = "missing"
    CUSTOM = "custom"
