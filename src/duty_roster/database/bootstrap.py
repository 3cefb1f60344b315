from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..core.enums import DutyType
from ..duties.model import NewDuty
from ..duties.repository import DutyRepository
from ..users.model import User
from ..users.repository import UserRepository

DEMO_USERS = (
    User(netid="admin1", name="Avery Admin", phone="5550100001", admin=True),
    User(netid="wt101", name="Wren Taylor", phone="5550100002", assigns=(DutyType.WAITER,)),
    User(netid="jd202", name="Jordan Diaz", phone="5550100003"),
    User(netid="ks303", name="Kai Singh", phone="5550100004"),
    User(netid="ml404", name="Morgan Lee", phone="5550100005", assigns=(DutyType.CLEANING, DutyType.SOCIAL)),
)


def ensure_demo_users(users: UserRepository) -> int:
    for user in DEMO_USERS:
        users.upsert(user)
    return len(DEMO_USERS)


def ensure_demo_duties(duties: DutyRepository, *, now: Optional[datetime] = None) -> int:
    """Create a week of sample duties unless some already exist."""
    if duties.list_all():
        return 0

    now = (now or datetime.now(timezone.utc)).replace(minute=0, second=0, microsecond=0)
    names = {u.netid: u.name for u in DEMO_USERS}

    plan = [
        ("Dinner Waiter", DutyType.WAITER, 1, ("jd202", "ks303")),
        ("Kitchen Clean", DutyType.CLEANING, 2, ("jd202",)),
        ("Bathroom Clean", DutyType.CLEANING, -3, ("ks303",)),
        ("Movie Night Setup", DutyType.SOCIAL, 4, ("jd202", "ks303", "wt101")),
    ]

    for name, duty_type, days, assigned in plan:
        duties.create(
            NewDuty(
                name=name,
                type=duty_type,
                time=now + timedelta(days=days),
                assigned=assigned,
                assigned_names={n: names[n] for n in assigned},
                credits={n: 0 for n in assigned},
            )
        )
    return len(plan)
