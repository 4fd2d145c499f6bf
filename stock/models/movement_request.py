# stock/models/movement_request.py

"""
MOVEMENT REQUESTS (INTER-WAREHOUSE STOCK REQUESTS)

An open request for stock raised by a branch/city. Created and managed
outside the movement engine; the engine only reads OPEN requests and closes
them (FULFILLED) when an incoming receipt covers them.
"""

import uuid
from decimal import Decimal

from django.db import models

from products.models import Product
from warehouses.models import Warehouse


class MovementRequest(models.Model):
    class Status(models.TextChoices):
        OPEN = "OPEN", "Open"
        FULFILLED = "FULFILLED", "Fulfilled"
        CANCELLED = "CANCELLED", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.OPEN,
    )

    requested_city = models.CharField(max_length=120)
    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="movement_requests",
    )

    requested_by = models.UUIDField()
    fulfilled_at = models.DateTimeField(null=True, blank=True)
    fulfilled_by = models.UUIDField(null=True, blank=True)

    note = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "status"], name="request_tenant_status_idx"),
            models.Index(fields=["tenant_id", "requested_city", "status"], name="request_tenant_city_idx"),
        ]

    def __str__(self):
        return f"{self.requested_city} | {self.status}"


class MovementRequestItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    request = models.ForeignKey(
        MovementRequest,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="movement_request_items",
    )

    requested_quantity = models.DecimalField(max_digits=20, decimal_places=6)
    remaining_quantity = models.DecimalField(
        max_digits=20,
        decimal_places=6,
        default=Decimal("0"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "product", "remaining_quantity"], name="request_item_open_idx"),
        ]

    def __str__(self):
        return f"{self.product} | remaining {self.remaining_quantity}"
