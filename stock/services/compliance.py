# stock/services/compliance.py

"""
BATCH COMPLIANCE GATE

Blocks any movement that would DECREASE stock tied to a non-compliant batch.

Rules (decreasing movements only):
- batch must be RELEASED           -> BatchQuarantineError (409)
- batch must not be expired        -> BatchExpiredError (409)
  expired = expires_at strictly before today 00:00 UTC (+ policy margin),
  where "today" comes from the movement's effective timestamp.
  A batch expiring today is still usable.

The batch row is read with SELECT ... FOR UPDATE inside the movement
transaction, so a concurrent quarantine cannot slip between the check and
the balance write.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from django.core.exceptions import ValidationError as DjangoValidationError

from batches.models import Batch

from stock.services.clock import start_of_day_utc
from stock.services.exceptions import (
    BatchExpiredError,
    BatchQuarantineError,
    NotFoundError,
)
from stock.services.policy import MovementPolicy

logger = logging.getLogger(__name__)


def resolve_batch(*, tenant_id, product_id, batch_id, lock: bool = False) -> Batch:
    """Load a batch scoped to (tenant, product); NotFoundError otherwise."""
    qs = Batch.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        batch = qs.filter(id=batch_id, tenant_id=tenant_id, product_id=product_id).first()
    except (DjangoValidationError, ValueError):
        batch = None
    if batch is None:
        raise NotFoundError("Batch not found", meta={"batchId": str(batch_id)})
    return batch


def expiry_threshold(*, at: datetime, policy: MovementPolicy) -> datetime:
    return start_of_day_utc(at) + timedelta(days=int(policy.expiry_margin_days or 0))


def check_batch_compliance(*, batch: Batch, at: datetime, policy: MovementPolicy) -> None:
    if policy.enforce_quarantine and batch.status != Batch.Status.RELEASED:
        logger.warning(
            "Stock decrease blocked by batch status",
            extra={"batch_id": str(batch.id), "status": batch.status},
        )
        raise BatchQuarantineError(
            "Batch is not released",
            meta={
                "batchId": str(batch.id),
                "batchNumber": batch.batch_number,
                "status": batch.status,
            },
        )

    if policy.enforce_expiry and batch.expires_at is not None:
        if batch.expires_at < expiry_threshold(at=at, policy=policy):
            logger.warning(
                "Stock decrease blocked by batch expiry",
                extra={"batch_id": str(batch.id), "expires_at": batch.expires_at.isoformat()},
            )
            raise BatchExpiredError(
                "Batch is expired",
                meta={
                    "batchId": str(batch.id),
                    "batchNumber": batch.batch_number,
                    "expiresAt": batch.expires_at.isoformat(),
                },
            )
