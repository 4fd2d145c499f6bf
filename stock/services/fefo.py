# stock/services/fefo.py

"""
FEFO SUGGESTIONS (FIRST-EXPIRED, FIRST-OUT)

Read-only helper for callers that must pick a batch before issuing stock.
The engine itself never chooses a batch.

Candidates:
- balances of the product with quantity > 0
- batch RELEASED and not expired (same threshold as the compliance gate)
- scoped to one location, or to every location of one warehouse

Order: expires_at ascending (no expiry last), then balance id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.db.models import F, Q

from batches.models import Batch

from stock.models import InventoryBalance
from stock.services.clock import effective_timestamp
from stock.services.compliance import expiry_threshold
from stock.services.exceptions import ValidationError
from stock.services.policy import MovementPolicy, get_movement_policy


@dataclass(frozen=True)
class FefoSuggestion:
    balance_id: object
    batch_id: object
    batch_number: str
    expires_at: Optional[datetime]
    location_id: object
    quantity: Decimal


def suggest_fefo_batches(
    *,
    tenant_id,
    product_id,
    location_id=None,
    warehouse_id=None,
    at: Optional[datetime] = None,
    limit: Optional[int] = None,
    policy: Optional[MovementPolicy] = None,
) -> list[FefoSuggestion]:
    if not product_id:
        raise ValidationError("product_id is required", meta={"field": "product_id"})
    if not location_id and not warehouse_id:
        raise ValidationError("location_id or warehouse_id is required")

    policy = policy or get_movement_policy(tenant_id)
    at = effective_timestamp(at)
    if limit is None:
        limit = policy.fefo_suggestion_limit

    qs = InventoryBalance.objects.select_related("batch").filter(
        tenant_id=tenant_id,
        product_id=product_id,
        quantity__gt=0,
        batch__isnull=False,
        batch__status=Batch.Status.RELEASED,
    )

    if location_id:
        qs = qs.filter(location_id=location_id)
    if warehouse_id:
        qs = qs.filter(location__warehouse_id=warehouse_id)

    if policy.enforce_expiry:
        qs = qs.filter(
            Q(batch__expires_at__isnull=True)
            | Q(batch__expires_at__gte=expiry_threshold(at=at, policy=policy))
        )

    qs = qs.order_by(F("batch__expires_at").asc(nulls_last=True), "id")

    return [
        FefoSuggestion(
            balance_id=balance.id,
            batch_id=balance.batch_id,
            batch_number=balance.batch.batch_number,
            expires_at=balance.batch.expires_at,
            location_id=balance.location_id,
            quantity=balance.quantity,
        )
        for balance in qs[: max(int(limit), 0)]
    ]
