# stock/services/validation.py

"""
MOVEMENT VALIDATOR

Structural checks on a movement command, BEFORE any database I/O.

Rules:
- quantity must be a finite decimal > 0 (base units)
- IN requires to_location_id
- OUT requires from_location_id
- TRANSFER requires both locations, and they must differ
- ADJUSTMENT requires at least one location
  (to_location_id => increase, only from_location_id => decrease)
- presentation_quantity, when given, must be > 0
- ids are coerced to uuid.UUID; a malformed reference id reads as missing

No side effects: validate_movement_command() returns a normalized copy.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
import uuid
from typing import Optional

from stock.models import StockMovement
from stock.services.exceptions import NotFoundError, ValidationError

MovementType = StockMovement.MovementType

# Matches StockMovement.quantity / InventoryBalance.quantity (max_digits=20, decimal_places=6).
QUANTITY_DECIMAL_PLACES = 6
QUANTITY_INTEGER_DIGITS = 14


@dataclass(frozen=True)
class MovementCommand:
    tenant_id: object
    user_id: object
    type: str
    product_id: object
    quantity: object
    batch_id: Optional[object] = None
    from_location_id: Optional[object] = None
    to_location_id: Optional[object] = None
    presentation_id: Optional[object] = None
    presentation_quantity: Optional[object] = None
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


def _to_decimal(value, *, field_name: str) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required", meta={"field": field_name})
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(
            f"{field_name} must be a valid decimal", meta={"field": field_name}
        ) from exc
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a valid decimal", meta={"field": field_name})
    return result


def _require_positive(value, *, field_name: str) -> Decimal:
    qty = _to_decimal(value, field_name=field_name)
    if qty <= 0:
        raise ValidationError(f"{field_name} must be greater than zero", meta={"field": field_name})
    if qty.normalize().as_tuple().exponent < -QUANTITY_DECIMAL_PLACES:
        raise ValidationError(
            f"{field_name} supports at most {QUANTITY_DECIMAL_PLACES} decimal places",
            meta={"field": field_name},
        )
    if qty.adjusted() >= QUANTITY_INTEGER_DIGITS:
        raise ValidationError(
            f"{field_name} supports at most {QUANTITY_INTEGER_DIGITS} integer digits",
            meta={"field": field_name},
        )
    return qty


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _to_uuid(value, *, field_name: str, label: str) -> Optional[uuid.UUID]:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise NotFoundError(f"{label} not found", meta={field_name: str(value)}) from None


def decreases_stock(command: MovementCommand) -> bool:
    """OUT, TRANSFER, or an ADJUSTMENT without a destination (removal)."""
    if command.type in (MovementType.OUT, MovementType.TRANSFER):
        return True
    return command.type == MovementType.ADJUSTMENT and not command.to_location_id


def validate_movement_command(command: MovementCommand) -> MovementCommand:
    movement_type = str(command.type or "").strip().upper()
    if movement_type not in MovementType.values:
        raise ValidationError(
            f"type must be one of {', '.join(MovementType.values)}", meta={"field": "type"}
        )

    if not command.tenant_id:
        raise ValidationError("tenant_id is required", meta={"field": "tenant_id"})
    if not command.product_id:
        raise ValidationError("product_id is required", meta={"field": "product_id"})

    try:
        tenant_id = _to_uuid(command.tenant_id, field_name="tenantId", label="Tenant")
    except NotFoundError:
        raise ValidationError("tenant_id must be a valid UUID", meta={"field": "tenant_id"}) from None

    quantity = _require_positive(command.quantity, field_name="quantity")

    presentation_quantity = _blank_to_none(command.presentation_quantity)
    if presentation_quantity is not None:
        presentation_quantity = _require_positive(
            presentation_quantity, field_name="presentation_quantity"
        )

    from_location_id = _to_uuid(
        _blank_to_none(command.from_location_id), field_name="locationId", label="Location"
    )
    to_location_id = _to_uuid(
        _blank_to_none(command.to_location_id), field_name="locationId", label="Location"
    )

    if movement_type == MovementType.IN and not to_location_id:
        raise ValidationError("to_location_id is required", meta={"field": "to_location_id"})

    if movement_type == MovementType.OUT and not from_location_id:
        raise ValidationError("from_location_id is required", meta={"field": "from_location_id"})

    if movement_type == MovementType.TRANSFER:
        if not from_location_id or not to_location_id:
            raise ValidationError("from_location_id and to_location_id are required")
        if from_location_id == to_location_id:
            raise ValidationError("from_location_id and to_location_id must differ")

    if movement_type == MovementType.ADJUSTMENT and not (from_location_id or to_location_id):
        raise ValidationError("from_location_id or to_location_id is required")

    product_id = _to_uuid(command.product_id, field_name="productId", label="Product")
    batch_id = _to_uuid(_blank_to_none(command.batch_id), field_name="batchId", label="Batch")

    return replace(
        command,
        type=movement_type,
        tenant_id=tenant_id,
        product_id=product_id,
        quantity=quantity,
        batch_id=batch_id,
        from_location_id=from_location_id,
        to_location_id=to_location_id,
        presentation_quantity=presentation_quantity,
    )
