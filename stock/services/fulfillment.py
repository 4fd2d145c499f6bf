# stock/services/fulfillment.py

"""
PENDING-REQUEST FULFILLMENT MATCHER

Runs after a successful IN movement into a destination location.

Steps:
1) Resolve the destination warehouse city (blank city => nothing to do)
2) Find OPEN requests for that city (case-insensitive, trimmed) that still
   have remaining quantity for the received product; oldest first, row-locked
3) Per request: sum remaining quantity of the matching items; if it fits in
   the received quantity, zero those items and mark the request FULFILLED

Best effort:
- Runs in a savepoint; any failure is logged and swallowed.
  A matcher bug must never roll back a legitimate receipt.

Matching budget (policy.fulfillment_consumes_quantity):
- False (default): every request is compared against the FULL received
  quantity, independently. Several requests may close off one receipt.
- True: quantity matched by earlier requests is deducted from the budget.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models.functions import Lower, Trim
from django.utils import timezone

from warehouses.models import Location

from stock.models import MovementRequest, MovementRequestItem
from stock.services.policy import MovementPolicy

logger = logging.getLogger(__name__)


def _destination_city(*, tenant_id, location_id) -> str:
    location = (
        Location.objects.select_related("warehouse")
        .filter(id=location_id, tenant_id=tenant_id)
        .first()
    )
    if location is None or location.warehouse is None:
        return ""
    return (location.warehouse.city or "").strip()


def _open_requests_for(*, tenant_id, product_id, city: str):
    pending_request_ids = MovementRequestItem.objects.filter(
        tenant_id=tenant_id,
        product_id=product_id,
        remaining_quantity__gt=0,
    ).values("request_id")

    return (
        MovementRequest.objects.select_for_update()
        .annotate(city_key=Lower(Trim("requested_city")))
        .filter(
            tenant_id=tenant_id,
            status=MovementRequest.Status.OPEN,
            city_key=city.lower(),
            id__in=pending_request_ids,
        )
        .order_by("created_at", "id")
    )


def _match_requests(
    *,
    tenant_id,
    product_id,
    to_location_id,
    quantity: Decimal,
    user_id,
    policy: MovementPolicy,
) -> list[MovementRequest]:
    city = _destination_city(tenant_id=tenant_id, location_id=to_location_id)
    if not city:
        return []

    budget = Decimal(quantity)
    now = timezone.now()
    fulfilled: list[MovementRequest] = []

    for request in _open_requests_for(tenant_id=tenant_id, product_id=product_id, city=city):
        items = list(
            request.items.select_for_update().filter(
                tenant_id=tenant_id,
                product_id=product_id,
                remaining_quantity__gt=0,
            )
        )
        needed = sum((item.remaining_quantity for item in items), Decimal("0"))
        if needed <= 0:
            continue

        available = budget if policy.fulfillment_consumes_quantity else Decimal(quantity)
        if needed > available:
            continue

        for item in items:
            item.remaining_quantity = Decimal("0")
            item.save(update_fields=["remaining_quantity", "updated_at"])

        request.status = MovementRequest.Status.FULFILLED
        request.fulfilled_at = now
        request.fulfilled_by = user_id
        request.save(update_fields=["status", "fulfilled_at", "fulfilled_by", "updated_at"])

        if policy.fulfillment_consumes_quantity:
            budget -= needed

        fulfilled.append(request)

    if fulfilled:
        logger.info(
            "Movement requests fulfilled by receipt",
            extra={
                "tenant_id": str(tenant_id),
                "product_id": str(product_id),
                "request_ids": [str(r.id) for r in fulfilled],
            },
        )

    return fulfilled


def fulfill_pending_requests(
    *,
    tenant_id,
    product_id,
    to_location_id,
    quantity: Decimal,
    user_id,
    policy: MovementPolicy,
) -> list[MovementRequest]:
    """
    Close pending requests covered by an incoming receipt.

    Never raises: returns [] when matching fails (savepoint rolled back).
    """
    try:
        with transaction.atomic():
            return _match_requests(
                tenant_id=tenant_id,
                product_id=product_id,
                to_location_id=to_location_id,
                quantity=quantity,
                user_id=user_id,
                policy=policy,
            )
    except Exception:
        logger.exception(
            "Movement request fulfillment failed; receipt kept",
            extra={
                "tenant_id": str(tenant_id),
                "product_id": str(product_id),
                "to_location_id": str(to_location_id),
            },
        )
        return []
