"""Cloud Functions entry points for ``duties/{dutyID}`` document events.

Deployed from ``functions/main.py``. The ``handle_*`` functions hold the
snapshot-to-Duty mapping so they can be exercised without the emulator.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from firebase_functions import firestore_fn

from ..duties.firestore_duty_repository import duty_from_document
from .service import NotificationService

logger = logging.getLogger(__name__)

_service: Optional[NotificationService] = None


def get_service() -> NotificationService:
    global _service
    if _service is None:
        from ..container import build_notification_service

        _service = build_notification_service()
    return _service


def handle_created(service: NotificationService, duty_id: str, data: Optional[Mapping[str, Any]]) -> int:
    if not data:
        return 0
    return service.duty_created(duty_from_document(duty_id, data))


def handle_updated(
    service: NotificationService,
    duty_id: str,
    before: Optional[Mapping[str, Any]],
    after: Optional[Mapping[str, Any]],
) -> int:
    if not before or not after:
        return 0
    return service.duty_updated(duty_from_document(duty_id, before), duty_from_document(duty_id, after))


def handle_deleted(service: NotificationService, duty_id: str, data: Optional[Mapping[str, Any]]) -> int:
    if not data:
        return 0
    return service.duty_deleted(duty_from_document(duty_id, data))


def _data(snapshot) -> Optional[dict]:
    return snapshot.to_dict() if snapshot is not None else None


@firestore_fn.on_document_created(document="duties/{dutyID}")
def duty_created(event: firestore_fn.Event[firestore_fn.DocumentSnapshot | None]) -> None:
    duty_id = event.params["dutyID"]
    sent = handle_created(get_service(), duty_id, _data(event.data))
    logger.info("dutyCreated %s: %d message(s) sent", duty_id, sent)


@firestore_fn.on_document_updated(document="duties/{dutyID}")
def duty_updated(event: firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot | None]]) -> None:
    duty_id = event.params["dutyID"]
    sent = handle_updated(get_service(), duty_id, _data(event.data.before), _data(event.data.after))
    logger.info("dutyUpdated %s: %d message(s) sent", duty_id, sent)


@firestore_fn.on_document_deleted(document="duties/{dutyID}")
def duty_deleted(event: firestore_fn.Event[firestore_fn.DocumentSnapshot | None]) -> None:
    duty_id = event.params["dutyID"]
    sent = handle_deleted(get_service(), duty_id, _data(event.data))
    logger.info("dutyDeleted %s: %d message(s) sent", duty_id, sent)
