from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..core.enums import DutyType


@dataclass(frozen=True)
class User:
    """Thực thể miền (domain): cư dân / nhân viên ký túc xá.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    ``netid`` cũng là id của document trong collection ``users``.
    """

    netid: str
    name: str
    phone: str
    admin: bool = False
    assigns: Tuple[DutyType, ...] = field(default_factory=tuple)

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else self.name

    @property
    def is_assigner(self) -> bool:
        return self.admin or bool(self.assigns)
