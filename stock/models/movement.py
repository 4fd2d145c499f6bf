# stock/models/movement.py

"""
CANONICAL INVENTORY LEDGER

Immutable stock movement entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- Created ONCE by the movement engine, never edited
- number is a tenant+year scoped sequence (e.g. MS2025-42), unique per tenant
- quantity is strictly positive, in base units; direction comes from
  type + from/to locations
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from products.models import Product
from batches.models import Batch
from warehouses.models import Location


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"
        TRANSFER = "TRANSFER", "Transfer"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    number = models.CharField(max_length=32)
    number_year = models.PositiveIntegerField()
    sequence_value = models.PositiveIntegerField()

    type = models.CharField(max_length=16, choices=MovementType.choices)

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )
    batch = models.ForeignKey(
        Batch,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    from_location = models.ForeignKey(
        Location,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="outgoing_movements",
    )
    to_location = models.ForeignKey(
        Location,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="incoming_movements",
    )

    quantity = models.DecimalField(max_digits=20, decimal_places=6)

    # Presentation metadata (e.g. "box of 30") kept for traceability only.
    presentation_id = models.UUIDField(null=True, blank=True)
    presentation_quantity = models.DecimalField(
        max_digits=20,
        decimal_places=6,
        null=True,
        blank=True,
    )

    reference_type = models.CharField(max_length=64, null=True, blank=True)
    reference_id = models.CharField(max_length=128, null=True, blank=True)
    note = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    created_by = models.UUIDField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "created_at"], name="movement_tenant_created_idx"),
            models.Index(fields=["tenant_id", "product", "created_at"], name="movement_tenant_product_idx"),
            models.Index(fields=["batch", "created_at"], name="movement_batch_created_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="movement_reference_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "number"],
                name="uniq_movement_number_per_tenant",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_movement_quantity_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    def __str__(self):
        return f"{self.number} | {self.type} | {self.quantity}"
