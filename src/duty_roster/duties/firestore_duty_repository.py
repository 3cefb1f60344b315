from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from ..core.constants import DUTIES_COLLECTION
from ..core.enums import DutyType
from ..database.connection import FirestoreConnection
from .model import Duty, NewDuty
from .repository import DutyRepository

_TIME_FIELD = "date.time"


def _as_datetime(value: Any) -> datetime:
    # Firestore returns DatetimeWithNanoseconds (a datetime subclass); JSON
    # fixtures and older documents may hold ISO strings.
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        dt = datetime.fromisoformat(value)
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    raise TypeError(f"Unsupported duty time value: {value!r}")


def duty_from_document(duty_id: str, data: Mapping[str, Any]) -> Duty:
    date_field = data.get("date") or {}
    raw_time = date_field.get("time") if isinstance(date_field, Mapping) else date_field

    duty_type = DutyType.parse(data.get("type"))
    if duty_type is None:
        raise ValueError(f"Duty {duty_id} has unknown type {data.get('type')!r}")

    return Duty(
        duty_id=duty_id,
        name=str(data.get("name") or ""),
        type=duty_type,
        time=_as_datetime(raw_time),
        assigned=tuple(data.get("assigned") or ()),
        assigned_names=dict(data.get("assigned_names") or {}),
        credits={k: v for k, v in (data.get("credits") or {}).items()},
        checked=bool(data.get("checked", False)),
    )


def duty_to_document(duty: Duty | NewDuty) -> Dict[str, Any]:
    return {
        "name": duty.name,
        "type": duty.type.value,
        "date": {"time": duty.time},
        "assigned": list(duty.assigned),
        "assigned_names": dict(duty.assigned_names),
        "credits": dict(duty.credits),
        "checked": bool(duty.checked),
    }


def _sorted_by_time(snapshots: Iterable[Any]) -> List[Duty]:
    duties = [duty_from_document(s.id, s.to_dict() or {}) for s in snapshots]
    duties.sort(key=lambda d: d.time)
    return duties


class FirestoreDutyRepository(DutyRepository):
    def __init__(self, conn_factory: FirestoreConnection):
        self._conn_factory = conn_factory

    def _collection(self):
        return self._conn_factory.client().collection(DUTIES_COLLECTION)

    def get_by_id(self, duty_id: str) -> Optional[Duty]:
        snap = self._collection().document(duty_id).get()
        if not snap.exists:
            return None
        return duty_from_document(snap.id, snap.to_dict() or {})

    def list_by_type(self, duty_type: DutyType) -> Sequence[Duty]:
        # A filter plus order_by on another field needs a composite index; sort in memory instead.
        query = self._collection().where(filter=FieldFilter("type", "==", duty_type.value))
        return _sorted_by_time(query.stream())

    def list_for_user(self, netid: str) -> Sequence[Duty]:
        query = self._collection().where(filter=FieldFilter("assigned", "array_contains", netid))
        return _sorted_by_time(query.stream())

    def list_all(self) -> Sequence[Duty]:
        return [duty_from_document(s.id, s.to_dict() or {}) for s in self._collection().order_by(_TIME_FIELD).stream()]

    def create(self, duty: NewDuty) -> str:
        ref = self._collection().document()
        ref.set(duty_to_document(duty))
        return ref.id

    def update(self, duty: Duty) -> bool:
        try:
            self._collection().document(duty.duty_id).update(duty_to_document(duty))
        except NotFound:
            return False
        return True

    def delete(self, duty_id: str) -> bool:
        ref = self._collection().document(duty_id)
        if not ref.get().exists:
            return False
        ref.delete()
        return True

    def set_checked(self, duty_id: str, checked: bool) -> bool:
        try:
            self._collection().document(duty_id).update({"checked": bool(checked)})
        except NotFound:
            return False
        return True

    def set_credits(self, duty_id: str, netid: str, credits: float) -> bool:
        # FieldPath quotes the netid so it is always a single path segment.
        field = FieldPath("credits", netid).to_api_repr()
        try:
            self._collection().document(duty_id).update({field: credits})
        except NotFound:
            return False
        return True
