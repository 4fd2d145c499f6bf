# stock/services/references.py

"""
TENANT-BOUND REFERENCE CHECKS (PRODUCT + LOCATION GATE)

Rules:
- product must exist, belong to the tenant and be active
- every referenced location must belong to the tenant (else NotFoundError)
- source locations MAY be inactive (draining a decommissioned location)
- destination locations MUST be active (InactiveLocationError)
"""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError

from products.models import Product
from warehouses.models import Location

from stock.services.exceptions import InactiveLocationError, NotFoundError
from stock.services.policy import MovementPolicy


def _get_or_none(qs, **lookup):
    # Malformed ids (e.g. not a UUID) read as "missing", not as a crash.
    try:
        return qs.filter(**lookup).first()
    except (DjangoValidationError, ValueError):
        return None


def require_active_product(*, tenant_id, product_id) -> Product:
    product = _get_or_none(
        Product.objects.all(), id=product_id, tenant_id=tenant_id, is_active=True
    )
    if product is None:
        raise NotFoundError("Product not found", meta={"productId": str(product_id)})
    return product


def _require_location(*, tenant_id, location_id) -> Location:
    location = _get_or_none(
        Location.objects.select_related("warehouse"), id=location_id, tenant_id=tenant_id
    )
    if location is None:
        raise NotFoundError("Location not found", meta={"locationId": str(location_id)})
    return location


def require_source_location(*, tenant_id, location_id, policy: MovementPolicy) -> Location:
    location = _require_location(tenant_id=tenant_id, location_id=location_id)
    if not location.is_active and not policy.allow_inactive_source:
        raise InactiveLocationError(
            "Source location is inactive", meta={"locationId": str(location.id)}
        )
    return location


def require_destination_location(*, tenant_id, location_id) -> Location:
    location = _require_location(tenant_id=tenant_id, location_id=location_id)
    if not location.is_active:
        raise InactiveLocationError(
            "Destination location is inactive", meta={"locationId": str(location.id)}
        )
    return location
