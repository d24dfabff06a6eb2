"""Asynchronous tasks of the core module."""

from typing import Dict

import structlog
from celery import shared_task
from django.db import models, transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100
OUTBOX_MAX_ATTEMPTS = 3


def claim_outbox_batch(batch_size: int) -> models.QuerySet:
    """Rows due for delivery, locked so concurrent relays skip them.

    Must be evaluated inside ``transaction.atomic``.
    """
    due = models.Q(status=EventStatus.PENDING) | models.Q(
        status=EventStatus.FAILED, retry_count__lt=OUTBOX_MAX_ATTEMPTS
    )
    return (
        OutboxEvent.objects.select_for_update(skip_locked=True)
        .filter(due)
        .order_by("created_at")[:batch_size]
    )


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> Dict[str, int]:
    """Relay due outbox rows to the in-process event bus.

    Each row is marked ``PUBLISHED`` once its handlers ran, or ``FAILED``
    with the error message when rebuilding or handling the event raised.
    Failed rows are retried on later runs until ``OUTBOX_MAX_ATTEMPTS``.
    """
    published = 0
    failed = 0

    with transaction.atomic():
        for record in claim_outbox_batch(batch_size):
            log = logger.bind(outbox_id=str(record.id), event_type=record.event_type)
            try:
                with transaction.atomic():
                    event = DomainEvent.from_payload(record.event_type, record.payload)
                    event_bus.publish(event)
            except Exception as exc:
                record.mark_as_failed(repr(exc))
                log.exception("outbox.publish_failed", attempt=record.retry_count)
                failed += 1
                continue
            record.mark_as_published()
            published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
