from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.validators import normalize_phone, require_duty_type, require_non_empty
from ..core.enums import DutyType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    netid: str
    name: str
    admin: bool
    assigns: tuple[str, ...]


class AccessPolicy:
    """Who may see which page.

    Only authorization lives here; proving that the visitor owns the netid is
    the job of whatever sits in front of the app.
    """

    @staticmethod
    def can_view_user_duties(viewer: Optional[User], netid: str) -> bool:
        if viewer is None:
            return False
        return viewer.netid == netid or viewer.is_assigner

    @staticmethod
    def can_manage_type(viewer: Optional[User], duty_type: DutyType) -> bool:
        if viewer is None:
            return False
        return viewer.admin or duty_type in viewer.assigns

    @staticmethod
    def can_administer(viewer: Optional[User]) -> bool:
        return viewer is not None and viewer.admin

    def require_manage_type(self, viewer: Optional[User], duty_type: DutyType) -> None:
        if not self.can_manage_type(viewer, duty_type):
            raise AuthorizationError(f"You cannot manage {duty_type.value} duties")


class AuthService:
    """Use case: sign in by netid (development only)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def login(self, netid: str) -> SessionUser:
        netid = require_non_empty(netid, "Netid").lower()
        user = self._users.get_by_netid(netid)
        if not user:
            raise NotFoundError(f"No user with netid {netid}")

        return SessionUser(
            netid=user.netid,
            name=user.name,
            admin=user.admin,
            assigns=tuple(t.value for t in user.assigns),
        )


class UserService:
    """Use case: read and manage resident records."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_user(self, netid: str) -> User:
        user = self._users.get_by_netid(netid)
        if not user:
            raise NotFoundError(f"No user with netid {netid}")
        return user

    def find_user(self, netid: Optional[str]) -> Optional[User]:
        if not netid:
            return None
        return self._users.get_by_netid(netid)

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def save_user(
        self,
        *,
        netid: str,
        name: str,
        phone: str,
        admin: bool = False,
        assigns: Iterable[object] = (),
    ) -> User:
        netid = require_non_empty(netid, "Netid").lower()
        if not netid.isalnum():
            raise ValidationError("Netid may only contain letters and digits")

        user = User(
            netid=netid,
            name=require_non_empty(name, "Name"),
            phone=normalize_phone(phone),
            admin=bool(admin),
            assigns=tuple(dict.fromkeys(require_duty_type(a) for a in assigns)),
        )
        self._users.upsert(user)
        logger.info("Saved user %s", netid)
        return user

    def delete_user(self, *, current: Optional[User], netid: str) -> None:
        if not AccessPolicy.can_administer(current):
            raise AuthorizationError("Only admins can delete users")
        if current is not None and current.netid == netid:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete(netid):
            raise NotFoundError(f"No user with netid {netid}")
        logger.info("Deleted user %s", netid)
