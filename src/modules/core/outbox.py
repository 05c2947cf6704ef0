"""Helpers that move aggregate domain events into the outbox table."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

import structlog
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


def store_domain_events(entity: DomainEventMixin, topic: str) -> int:
    """Persist and clear the events collected on *entity*.

    Must run inside the transaction that saved the entity.  A relay is
    scheduled for after commit, so rolled back work never publishes.
    """
    events = entity.domain_events
    for event in events:
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=serialize_event_payload(event),
            topic=topic,
        )
    entity.clear_domain_events()
    if events:
        transaction.on_commit(_schedule_relay)
    return len(events)


def _schedule_relay() -> None:
    from modules.core.tasks import relay_outbox_events

    relay_outbox_events.delay()


def serialize_event_payload(event: Any) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
