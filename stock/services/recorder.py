# stock/services/recorder.py

"""
MOVEMENT RECORDER

- Persists the immutable StockMovement row (number already allocated)
- Flips the batch "opened" state on the first OUT/TRANSFER that touches it

The opened flip is a conditional UPDATE (opened_at IS NULL), so under
concurrency exactly one movement stamps opened_at/opened_by.
"""

from __future__ import annotations

from datetime import datetime

from django.db.models import F
from django.utils import timezone

from batches.models import Batch

from stock.models import StockMovement
from stock.services.sequence import SequenceNumber

OPENING_TYPES = (StockMovement.MovementType.OUT, StockMovement.MovementType.TRANSFER)


def record_movement(
    *,
    command,
    sequence: SequenceNumber,
    year: int,
    at: datetime,
) -> StockMovement:
    return StockMovement.objects.create(
        tenant_id=command.tenant_id,
        number=sequence.number,
        number_year=year,
        sequence_value=sequence.value,
        type=command.type,
        product_id=command.product_id,
        batch_id=command.batch_id,
        from_location_id=command.from_location_id,
        to_location_id=command.to_location_id,
        quantity=command.quantity,
        presentation_id=command.presentation_id,
        presentation_quantity=command.presentation_quantity,
        reference_type=command.reference_type,
        reference_id=command.reference_id,
        note=command.note,
        created_at=at,
        created_by=command.user_id,
    )


def mark_batch_opened(*, tenant_id, batch_id, user_id, at: datetime) -> bool:
    """Returns True only for the call that actually opened the batch."""
    updated = Batch.objects.filter(
        id=batch_id,
        tenant_id=tenant_id,
        opened_at__isnull=True,
    ).update(
        opened_at=at,
        opened_by=user_id,
        version=F("version") + 1,
        updated_at=timezone.now(),
    )
    return updated == 1


def opens_batch(command) -> bool:
    return bool(command.batch_id) and command.type in OPENING_TYPES
