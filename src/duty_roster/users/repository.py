from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Giao diện repository cho User.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp Firestore.
    """

    def get_by_netid(self, netid: str) -> Optional[User]:
        raise NotImplementedError

    def get_many(self, netids: Iterable[str]) -> Dict[str, Optional[User]]:
        """Fetch several users at once; missing netids map to None."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def upsert(self, user: User) -> None:
        raise NotImplementedError

    def delete(self, netid: str) -> bool:
        raise NotImplementedError
