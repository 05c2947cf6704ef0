"""Background tasks shared by every module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_MAX_RETRIES = 5
OUTBOX_BATCH_SIZE = 100


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Publish pending outbox events to the in-process event bus.

    Each row is locked and handled in its own transaction; a failing
    handler marks that row failed and the relay moves on.
    """
    published = failed = 0
    candidates = list(
        OutboxEvent.objects.deliverable(OUTBOX_MAX_RETRIES).values_list(
            "id", flat=True
        )[:batch_size]
    )
    for event_id in candidates:
        with transaction.atomic():
            row = (
                OutboxEvent.objects.select_for_update()
                .deliverable(OUTBOX_MAX_RETRIES)
                .filter(id=event_id)
                .first()
            )
            if row is None:
                continue
            log = logger.bind(outbox_id=str(row.id), event_type=row.event_type)
            try:
                event_bus.publish(DomainEvent.from_payload(row.payload))
            except Exception as exc:
                log.exception("outbox.relay_failed")
                row.mark_as_failed(str(exc))
                failed += 1
            else:
                row.mark_as_published()
                published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
