from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..core.enums import DutyType


@dataclass(frozen=True)
class Duty:
    """Thực thể miền (domain): một duty đã lên lịch.

    ``credits`` lưu số credit mỗi người được giao nhận khi duty được check off.
    """

    duty_id: str
    name: str
    type: DutyType
    time: datetime
    assigned: Tuple[str, ...]
    assigned_names: Dict[str, str] = field(default_factory=dict)
    credits: Dict[str, float] = field(default_factory=dict)
    checked: bool = False

    def name_of(self, netid: str) -> str:
        return self.assigned_names.get(netid, netid)

    def credits_of(self, netid: str) -> Optional[float]:
        return self.credits.get(netid)


@dataclass(frozen=True)
class NewDuty:
    """Dữ liệu để tạo duty mới (chưa có id)."""

    name: str
    type: DutyType
    time: datetime
    assigned: Tuple[str, ...]
    assigned_names: Dict[str, str]
    credits: Dict[str, float]
    checked: bool = False
