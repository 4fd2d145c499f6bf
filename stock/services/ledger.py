# stock/services/ledger.py

"""
BALANCE LEDGER (LOCK + UPSERT)

The ONLY write path for InventoryBalance.

For each balance key touched by a movement:
1) lock the existing row (SELECT ... FOR UPDATE); a missing row needs no lock
2) read current quantity (0 when missing)
3) next = current + delta
4) next < 0 -> InsufficientStockError (the whole movement rolls back)
5) create the row with quantity=next, or update quantity=next, version += 1

Lock order:
- All keys of one movement are locked up-front in a canonical order (sorted
  by location id), never "from then to". Two opposite-direction transfers
  therefore request the same rows in the same order and cannot deadlock.

Lazy creation race:
- Two transactions may both see "no row" for a fresh key. The insert runs in
  a savepoint; the loser catches IntegrityError, locks the winner's row and
  applies its delta on top.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction

from stock.models import InventoryBalance, StockMovement
from stock.services.exceptions import InsufficientStockError

MovementType = StockMovement.MovementType

LEG_FROM = "from"
LEG_TO = "to"


@dataclass(frozen=True)
class BalanceLeg:
    role: str
    location_id: object
    delta: Decimal


def movement_legs(command) -> list[BalanceLeg]:
    """
    Expand a validated command into signed balance legs.

    IN          -> +qty at destination
    OUT         -> -qty at source
    TRANSFER    -> -qty at source, +qty at destination
    ADJUSTMENT  -> +qty at destination if given, else -qty at source
    """
    qty = command.quantity

    if command.type == MovementType.IN:
        return [BalanceLeg(LEG_TO, command.to_location_id, qty)]

    if command.type == MovementType.OUT:
        return [BalanceLeg(LEG_FROM, command.from_location_id, -qty)]

    if command.type == MovementType.TRANSFER:
        return [
            BalanceLeg(LEG_FROM, command.from_location_id, -qty),
            BalanceLeg(LEG_TO, command.to_location_id, qty),
        ]

    if command.to_location_id:
        return [BalanceLeg(LEG_TO, command.to_location_id, qty)]
    return [BalanceLeg(LEG_FROM, command.from_location_id, -qty)]


def _balance_filter(*, tenant_id, location_id, product_id, batch_id) -> dict:
    lookup = {
        "tenant_id": tenant_id,
        "location_id": location_id,
        "product_id": product_id,
    }
    if batch_id is None:
        lookup["batch__isnull"] = True
    else:
        lookup["batch_id"] = batch_id
    return lookup


def lock_balance(*, tenant_id, location_id, product_id, batch_id) -> Optional[InventoryBalance]:
    return (
        InventoryBalance.objects.select_for_update()
        .filter(
            **_balance_filter(
                tenant_id=tenant_id,
                location_id=location_id,
                product_id=product_id,
                batch_id=batch_id,
            )
        )
        .first()
    )


def _write_balance(
    *,
    row: Optional[InventoryBalance],
    tenant_id,
    location_id,
    product_id,
    batch_id,
    delta: Decimal,
    user_id,
) -> InventoryBalance:
    current = row.quantity if row is not None else Decimal("0")
    next_qty = current + delta

    if next_qty < 0:
        raise InsufficientStockError(
            "Insufficient stock",
            meta={
                "locationId": str(location_id),
                "productId": str(product_id),
                "batchId": str(batch_id) if batch_id else None,
                "available": str(current),
                "requested": str(-delta),
            },
        )

    if row is None:
        try:
            with transaction.atomic():
                return InventoryBalance.objects.create(
                    tenant_id=tenant_id,
                    location_id=location_id,
                    product_id=product_id,
                    batch_id=batch_id,
                    quantity=next_qty,
                    created_by=user_id,
                )
        except IntegrityError:
            # Another transaction created this key first; apply on top of it.
            row = lock_balance(
                tenant_id=tenant_id,
                location_id=location_id,
                product_id=product_id,
                batch_id=batch_id,
            )
            if row is None:
                raise
            return _write_balance(
                row=row,
                tenant_id=tenant_id,
                location_id=location_id,
                product_id=product_id,
                batch_id=batch_id,
                delta=delta,
                user_id=user_id,
            )

    row.quantity = next_qty
    row.version = int(row.version or 0) + 1
    row.created_by = user_id
    row.save(update_fields=["quantity", "version", "created_by", "updated_at"])
    return row


def _location_key(location_id) -> uuid.UUID:
    if isinstance(location_id, uuid.UUID):
        return location_id
    return uuid.UUID(str(location_id))


def apply_legs(
    *,
    tenant_id,
    product_id,
    batch_id,
    legs: list[BalanceLeg],
    user_id,
) -> dict[str, Optional[InventoryBalance]]:
    """
    Lock every key in canonical order, then apply the legs in movement order
    (source before destination). Legs that land on the same key are netted;
    a net-zero key is left untouched.

    Returns {role: post-update InventoryBalance or None}.
    """
    net_by_location: dict[uuid.UUID, Decimal] = {}
    for leg in legs:
        k = _location_key(leg.location_id)
        net_by_location[k] = net_by_location.get(k, Decimal("0")) + leg.delta

    locked: dict[uuid.UUID, Optional[InventoryBalance]] = {}
    for k in sorted(net_by_location, key=str):
        locked[k] = lock_balance(
            tenant_id=tenant_id,
            location_id=k,
            product_id=product_id,
            batch_id=batch_id,
        )

    written: dict[uuid.UUID, Optional[InventoryBalance]] = {}
    result: dict[str, Optional[InventoryBalance]] = {LEG_FROM: None, LEG_TO: None}

    for leg in legs:
        k = _location_key(leg.location_id)
        if k not in written:
            delta = net_by_location[k]
            if delta == 0:
                written[k] = locked[k]
            else:
                written[k] = _write_balance(
                    row=locked[k],
                    tenant_id=tenant_id,
                    location_id=k,
                    product_id=product_id,
                    batch_id=batch_id,
                    delta=delta,
                    user_id=user_id,
                )
        result[leg.role] = written[k]

    return result
