from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Optional

import pytest

from duty_roster.core.enums import CreditStatus, DutyType
from duty_roster.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from duty_roster.duties.model import Duty, NewDuty
from duty_roster.duties.service import CHECK_ERROR_MESSAGE, DutyService
from duty_roster.users.model import User


class InMemoryUsers:
    def __init__(self, users: Iterable[User]):
        self.users = {u.netid: u for u in users}

    def get_by_netid(self, netid: str) -> Optional[User]:
        return self.users.get(netid)

    def get_many(self, netids):
        return {n: self.users.get(n) for n in netids}


class InMemoryDuties:
    def __init__(self):
        self.duties: dict[str, Duty] = {}
        self._id = 0
        self.fail_writes = False

    def get_by_id(self, duty_id):
        return self.duties.get(duty_id)

    def list_by_type(self, duty_type):
        return [d for d in self.duties.values() if d.type == duty_type]

    def list_for_user(self, netid):
        return [d for d in self.duties.values() if netid in d.assigned]

    def list_all(self):
        return list(self.duties.values())

    def create(self, duty: NewDuty) -> str:
        self._id += 1
        duty_id = f"d{self._id}"
        self.duties[duty_id] = Duty(duty_id=duty_id, **duty.__dict__)
        return duty_id

    def update(self, duty: Duty) -> bool:
        if duty.duty_id not in self.duties:
            return False
        self.duties[duty.duty_id] = duty
        return True

    def delete(self, duty_id) -> bool:
        return self.duties.pop(duty_id, None) is not None

    def set_checked(self, duty_id, checked) -> bool:
        if self.fail_writes:
            raise RuntimeError("firestore unavailable")
        if duty_id not in self.duties:
            return False
        self.duties[duty_id] = replace(self.duties[duty_id], checked=checked)
        return True

    def set_credits(self, duty_id, netid, credits) -> bool:
        if self.fail_writes:
            raise RuntimeError("firestore unavailable")
        d = self.duties[duty_id]
        self.duties[duty_id] = replace(d, credits={**d.credits, netid: credits})
        return True


ADMIN = User(netid="admin1", name="Avery Admin", phone="5550000000", admin=True)
WAITER_LEAD = User(netid="wl1", name="Wren Lead", phone="5550000001", assigns=(DutyType.WAITER,))
ALICE = User(netid="ab12", name="Alice Brown", phone="5551234567")
BEN = User(netid="bc34", name="Ben Carter", phone="5559876543")


def _t(day: int) -> datetime:
    return datetime(2025, 3, day, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    return InMemoryDuties()


@pytest.fixture
def svc(repo):
    return DutyService(repo, InMemoryUsers([ADMIN, WAITER_LEAD, ALICE, BEN]))


def test_create_resolves_names_and_default_credits(svc, repo):
    duty_id = svc.create_duty(
        current=WAITER_LEAD, name=" Dinner ", duty_type="waiter", time=_t(3), assigned=["AB12", "bc34", "ab12"]
    )

    duty = repo.duties[duty_id]
    assert duty.name == "Dinner"
    assert duty.assigned == ("ab12", "bc34")
    assert duty.assigned_names == {"ab12": "Alice Brown", "bc34": "Ben Carter"}
    assert duty.credits == {"ab12": 0, "bc34": 0}
    assert duty.checked is False


def test_create_rejects_unknown_assignee(svc):
    with pytest.raises(ValidationError):
        svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12", "nobody"])


def test_create_requires_assignee_and_valid_type(svc):
    with pytest.raises(ValidationError):
        svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=[])
    with pytest.raises(ValidationError):
        svc.create_duty(current=ADMIN, name="Dinner", duty_type="laundry", time=_t(3), assigned=["ab12"])


def test_create_checks_assign_permission(svc):
    with pytest.raises(AuthorizationError):
        svc.create_duty(current=WAITER_LEAD, name="Sweep", duty_type="cleaning", time=_t(3), assigned=["ab12"])
    with pytest.raises(AuthorizationError):
        svc.create_duty(current=ALICE, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])


def test_duties_by_user_groups_all_types_sorted(svc):
    svc.create_duty(current=ADMIN, name="Late", duty_type="waiter", time=_t(9), assigned=["ab12"])
    svc.create_duty(current=ADMIN, name="Early", duty_type="waiter", time=_t(2), assigned=["ab12", "bc34"])
    svc.create_duty(current=ADMIN, name="Party", duty_type="social", time=_t(5), assigned=["ab12"])
    svc.create_duty(current=ADMIN, name="Not mine", duty_type="cleaning", time=_t(5), assigned=["bc34"])

    user, groups = svc.get_duties_by_user("ab12")

    assert user == ALICE
    assert set(groups) == set(DutyType)
    assert [d.name for d in groups[DutyType.WAITER]] == ["Early", "Late"]
    assert [d.name for d in groups[DutyType.SOCIAL]] == ["Party"]
    assert groups[DutyType.CLEANING] == []


def test_duties_by_user_missing_user(svc):
    with pytest.raises(NotFoundError):
        svc.get_duties_by_user("ghost")


def test_duties_by_type_rejects_unknown_type(svc):
    with pytest.raises(ValidationError):
        svc.get_duties_by_type("laundry")


def test_update_keeps_credits_of_remaining_assignees(svc, repo):
    duty_id = svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])
    svc.update_user_duty_credits(current=ADMIN, duty_id=duty_id, netid="ab12", credits=1)

    updated = svc.update_duty(current=ADMIN, duty_id=duty_id, assigned=["ab12", "bc34"])

    assert updated.credits == {"ab12": 1, "bc34": 0}
    assert repo.duties[duty_id].assigned_names["bc34"] == "Ben Carter"


def test_delete(svc, repo):
    duty_id = svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])
    svc.delete_duty(current=WAITER_LEAD, duty_id=duty_id)

    assert duty_id not in repo.duties
    with pytest.raises(NotFoundError):
        svc.delete_duty(current=ADMIN, duty_id=duty_id)


def test_update_credits_validation(svc):
    duty_id = svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])

    assert svc.update_user_duty_credits(current=ADMIN, duty_id=duty_id, netid="ab12", credits=" 0.5 ") == 0.5
    assert svc.update_user_duty_credits(current=ADMIN, duty_id=duty_id, netid="ab12", credits="2") == 2
    for bad in ("1/2", "abc", "", "nan", "inf", None, True):
        with pytest.raises(ValidationError):
            svc.update_user_duty_credits(current=ADMIN, duty_id=duty_id, netid="ab12", credits=bad)
    with pytest.raises(ValidationError):
        svc.update_user_duty_credits(current=ADMIN, duty_id=duty_id, netid="bc34", credits=1)


def test_toggle_checked_reflects_last_successful_write(svc, repo):
    duty_id = svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])

    ok = svc.toggle_checked(current=ADMIN, duty_id=duty_id, checked=True, previous=False)
    assert ok.success and ok.value is True
    assert repo.duties[duty_id].checked is True

    repo.fail_writes = True
    failed = svc.toggle_checked(current=ADMIN, duty_id=duty_id, checked=False, previous=True)
    assert not failed.success
    assert failed.value is True
    assert failed.message == CHECK_ERROR_MESSAGE
    assert repo.duties[duty_id].checked is True


def test_apply_credits_rolls_back_on_failure(svc, repo):
    duty_id = svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])

    ok = svc.apply_credits(current=ADMIN, duty_id=duty_id, netid="ab12", credits=1, previous=0)
    assert ok.success and ok.value == 1 and ok.status == CreditStatus.COMPLETE

    repo.fail_writes = True
    failed = svc.apply_credits(current=ADMIN, duty_id=duty_id, netid="ab12", credits=0, previous=1)
    assert not failed.success
    assert failed.value == 1
    assert failed.status == CreditStatus.COMPLETE
    assert failed.message == "Error updating Alice's credits."


def test_toggle_requires_permission(svc):
    duty_id = svc.create_duty(current=ADMIN, name="Dinner", duty_type="waiter", time=_t(3), assigned=["ab12"])
    with pytest.raises(AuthorizationError):
        svc.toggle_checked(current=ALICE, duty_id=duty_id, checked=True, previous=False)
