# stock/services/movements.py

"""
STOCK MOVEMENT ENGINE

Single entry point for every inventory-changing operation:
IN (receipt), OUT (issue), TRANSFER, ADJUSTMENT.

FLOW (one transaction.atomic):
1) Validate command shape (no I/O)
2) Product gate (tenant + active)
3) Location gate (source may be inactive, destination must be active)
4) Batch compliance gate (decreasing movements with a batch; batch row locked)
5) Balance ledger (keys locked in canonical order, no-negative upsert)
6) Sequence number (MS{year}-{n}, year of the effective timestamp)
7) Record immutable movement + flip batch opened state (OUT/TRANSFER)
8) Fulfil pending requests (IN only; savepoint, failures swallowed)

LOCK ORDER (global, every movement):
batch -> balances (sorted by location id) -> sequence -> requests

Any StockServiceError aborts the whole unit: no balance change, no
movement row, no sequence increment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.db import connection, transaction

from stock.models import InventoryBalance, MovementRequest, StockMovement, TenantSequence
from stock.services.clock import current_year_utc, effective_timestamp
from stock.services.compliance import check_batch_compliance, resolve_batch
from stock.services.fulfillment import fulfill_pending_requests
from stock.services.ledger import LEG_FROM, LEG_TO, apply_legs, movement_legs
from stock.services.policy import MovementPolicy, get_movement_policy
from stock.services.recorder import mark_batch_opened, opens_batch, record_movement
from stock.services.references import (
    require_active_product,
    require_destination_location,
    require_source_location,
)
from stock.services.sequence import next_sequence
from stock.services.validation import (
    MovementCommand,
    decreases_stock,
    validate_movement_command,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovementResult:
    movement: StockMovement
    from_balance: Optional[InventoryBalance] = None
    to_balance: Optional[InventoryBalance] = None
    fulfilled_requests: list[MovementRequest] = field(default_factory=list)


# ============================================================
# HELPERS
# ============================================================

def _apply_lock_timeout(lock_timeout_ms: int) -> None:
    # SET LOCAL only lasts until the end of the current transaction.
    if connection.vendor != "postgresql" or not lock_timeout_ms:
        return
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {int(lock_timeout_ms)}")


def _balance_snapshot(balance: Optional[InventoryBalance]) -> Optional[dict]:
    if balance is None:
        return None
    return {
        "id": str(balance.id),
        "location_id": str(balance.location_id),
        "product_id": str(balance.product_id),
        "batch_id": str(balance.batch_id) if balance.batch_id else None,
        "quantity": str(balance.quantity),
        "version": balance.version,
    }


def _publish_balance_changes(*, tenant_id, movement_number: str, balances: list[dict]) -> None:
    for snapshot in balances:
        logger.info(
            "Stock balance changed",
            extra={
                "event": "stock.balance.changed",
                "tenant_id": str(tenant_id),
                "movement_number": movement_number,
                "balance": snapshot,
            },
        )


def _check_references(command: MovementCommand, policy: MovementPolicy) -> None:
    require_active_product(tenant_id=command.tenant_id, product_id=command.product_id)

    if command.from_location_id:
        require_source_location(
            tenant_id=command.tenant_id,
            location_id=command.from_location_id,
            policy=policy,
        )
    if command.to_location_id:
        require_destination_location(
            tenant_id=command.tenant_id,
            location_id=command.to_location_id,
        )


# ============================================================
# ENGINE
# ============================================================

@transaction.atomic
def create_stock_movement(
    command: MovementCommand,
    *,
    policy: Optional[MovementPolicy] = None,
) -> MovementResult:
    command = validate_movement_command(command)
    policy = policy or get_movement_policy(command.tenant_id)
    at = effective_timestamp(command.created_at)

    _apply_lock_timeout(policy.lock_timeout_ms)

    _check_references(command, policy)

    decreasing = decreases_stock(command)

    if command.batch_id:
        batch = resolve_batch(
            tenant_id=command.tenant_id,
            product_id=command.product_id,
            batch_id=command.batch_id,
            lock=decreasing,
        )
        if decreasing:
            check_batch_compliance(batch=batch, at=at, policy=policy)

    balances = apply_legs(
        tenant_id=command.tenant_id,
        product_id=command.product_id,
        batch_id=command.batch_id,
        legs=movement_legs(command),
        user_id=command.user_id,
    )

    year = current_year_utc(at)
    sequence = next_sequence(
        tenant_id=command.tenant_id,
        year=year,
        key=TenantSequence.Key.MOVEMENT,
    )

    movement = record_movement(command=command, sequence=sequence, year=year, at=at)

    if opens_batch(command):
        mark_batch_opened(
            tenant_id=command.tenant_id,
            batch_id=command.batch_id,
            user_id=command.user_id,
            at=at,
        )

    fulfilled: list[MovementRequest] = []
    if command.type == StockMovement.MovementType.IN and policy.auto_fulfill_requests:
        fulfilled = fulfill_pending_requests(
            tenant_id=command.tenant_id,
            product_id=command.product_id,
            to_location_id=command.to_location_id,
            quantity=command.quantity,
            user_id=command.user_id,
            policy=policy,
        )

    from_balance = balances[LEG_FROM]
    to_balance = balances[LEG_TO]

    snapshots = [s for s in (_balance_snapshot(from_balance), _balance_snapshot(to_balance)) if s]
    transaction.on_commit(
        lambda: _publish_balance_changes(
            tenant_id=command.tenant_id,
            movement_number=movement.number,
            balances=snapshots,
        )
    )

    logger.info(
        "Stock movement recorded",
        extra={
            "tenant_id": str(command.tenant_id),
            "movement_id": str(movement.id),
            "number": movement.number,
            "type": movement.type,
            "quantity": str(movement.quantity),
        },
    )

    return MovementResult(
        movement=movement,
        from_balance=from_balance,
        to_balance=to_balance,
        fulfilled_requests=fulfilled,
    )
