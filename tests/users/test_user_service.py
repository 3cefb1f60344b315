from __future__ import annotations

from typing import Optional

import pytest

from duty_roster.core.enums import DutyType
from duty_roster.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from duty_roster.users.model import User
from duty_roster.users.service import AccessPolicy, AuthService, UserService


class InMemoryUsers:
    def __init__(self, *users: User):
        self.users = {u.netid: u for u in users}

    def get_by_netid(self, netid: str) -> Optional[User]:
        return self.users.get(netid)

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.name)

    def upsert(self, user: User) -> None:
        self.users[user.netid] = user

    def delete(self, netid: str) -> bool:
        return self.users.pop(netid, None) is not None


ADMIN = User(netid="admin1", name="Avery Admin", phone="5550000000", admin=True)
CLEAN_LEAD = User(netid="cl1", name="Casey Lead", phone="5550000001", assigns=(DutyType.CLEANING,))
ALICE = User(netid="ab12", name="Alice Brown", phone="5551234567")


def test_first_name():
    assert ALICE.first_name == "Alice"
    assert User(netid="x", name="Prince", phone="").first_name == "Prince"


def test_can_view_user_duties():
    policy = AccessPolicy()
    assert policy.can_view_user_duties(ALICE, "ab12")
    assert not policy.can_view_user_duties(ALICE, "bc34")
    assert policy.can_view_user_duties(CLEAN_LEAD, "ab12")
    assert policy.can_view_user_duties(ADMIN, "ab12")
    assert not policy.can_view_user_duties(None, "ab12")


def test_can_manage_type():
    policy = AccessPolicy()
    assert policy.can_manage_type(CLEAN_LEAD, DutyType.CLEANING)
    assert not policy.can_manage_type(CLEAN_LEAD, DutyType.WAITER)
    assert policy.can_manage_type(ADMIN, DutyType.SOCIAL)
    assert not policy.can_manage_type(ALICE, DutyType.CLEANING)


def test_save_user_normalizes_fields():
    repo = InMemoryUsers()
    user = UserService(repo).save_user(
        netid=" AB12 ", name="Alice Brown", phone="(555) 123-4567", assigns=["cleaning", "Cleaning", "social"]
    )

    assert user.netid == "ab12"
    assert user.phone == "5551234567"
    assert user.assigns == (DutyType.CLEANING, DutyType.SOCIAL)
    assert repo.users["ab12"] == user


def test_save_user_accepts_leading_country_code():
    user = UserService(InMemoryUsers()).save_user(netid="ab12", name="Alice", phone="+1 555 123 4567")
    assert user.phone == "5551234567"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"netid": "", "name": "A", "phone": "5551234567"},
        {"netid": "a.b", "name": "A", "phone": "5551234567"},
        {"netid": "ab12", "name": "  ", "phone": "5551234567"},
        {"netid": "ab12", "name": "A", "phone": "12345"},
        {"netid": "ab12", "name": "A", "phone": "5551234567", "assigns": ["laundry"]},
    ],
)
def test_save_user_rejects_invalid(kwargs):
    with pytest.raises(ValidationError):
        UserService(InMemoryUsers()).save_user(**kwargs)


def test_delete_user_rules():
    repo = InMemoryUsers(ADMIN, ALICE)
    svc = UserService(repo)

    with pytest.raises(AuthorizationError):
        svc.delete_user(current=ALICE, netid="admin1")
    with pytest.raises(ValidationError):
        svc.delete_user(current=ADMIN, netid="admin1")
    with pytest.raises(NotFoundError):
        svc.delete_user(current=ADMIN, netid="ghost")

    svc.delete_user(current=ADMIN, netid="ab12")
    assert "ab12" not in repo.users


def test_login_by_netid():
    auth = AuthService(InMemoryUsers(CLEAN_LEAD))

    s_user = auth.login(" CL1 ")
    assert s_user.netid == "cl1"
    assert s_user.assigns == ("cleaning",)

    with pytest.raises(NotFoundError):
        auth.login("ghost")
