from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..core.constants import USERS_COLLECTION
from ..core.enums import DutyType
from ..database.connection import FirestoreConnection
from .model import User
from .repository import UserRepository


def user_from_document(netid: str, data: Mapping[str, Any]) -> User:
    assigns = []
    for raw in data.get("assigns") or []:
        duty_type = DutyType.parse(raw)
        if duty_type is not None:
            assigns.append(duty_type)

    return User(
        netid=str(data.get("netid") or netid),
        name=str(data.get("name") or ""),
        phone=str(data.get("phone") or ""),
        admin=bool(data.get("admin", False)),
        assigns=tuple(assigns),
    )


def user_to_document(user: User) -> Dict[str, Any]:
    return {
        "netid": user.netid,
        "name": user.name,
        "phone": user.phone,
        "admin": user.admin,
        "assigns": [t.value for t in user.assigns],
    }


class FirestoreUserRepository(UserRepository):
    def __init__(self, conn_factory: FirestoreConnection):
        self._conn_factory = conn_factory

    def _collection(self):
        return self._conn_factory.client().collection(USERS_COLLECTION)

    def get_by_netid(self, netid: str) -> Optional[User]:
        snap = self._collection().document(netid).get()
        if not snap.exists:
            return None
        return user_from_document(snap.id, snap.to_dict() or {})

    def get_many(self, netids: Iterable[str]) -> Dict[str, Optional[User]]:
        netids = list(dict.fromkeys(netids))
        out: Dict[str, Optional[User]] = {n: None for n in netids}
        if not netids:
            return out

        client = self._conn_factory.client()
        refs = [self._collection().document(n) for n in netids]
        for snap in client.get_all(refs):
            if snap.exists:
                out[snap.id] = user_from_document(snap.id, snap.to_dict() or {})
        return out

    def list_all(self) -> Sequence[User]:
        users = [user_from_document(s.id, s.to_dict() or {}) for s in self._collection().stream()]
        users.sort(key=lambda u: u.name.lower())
        return users

    def upsert(self, user: User) -> None:
        self._collection().document(user.netid).set(user_to_document(user))

    def delete(self, netid: str) -> bool:
        ref = self._collection().document(netid)
        if not ref.get().exists:
            return False
        ref.delete()
        return True
