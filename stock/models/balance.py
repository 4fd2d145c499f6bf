# stock/models/balance.py

"""
INVENTORY BALANCE (CURRENT QUANTITY PER KEY)

One row per (tenant, location, product, batch|NULL), created lazily by the
first movement that touches the key.

GUARANTEES:
- quantity is never negative (service check + DB check constraint)
- one row per key (two partial unique constraints, because NULL batch
  values are distinct in a plain unique index)
- version increments on every update (read-side optimistic signal only)
- written ONLY by stock.services.ledger
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q

from products.models import Product
from batches.models import Batch
from warehouses.models import Location


class InventoryBalance(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    location = models.ForeignKey(
        Location,
        on_delete=models.PROTECT,
        related_name="balances",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="balances",
    )
    batch = models.ForeignKey(
        Batch,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="balances",
    )

    quantity = models.DecimalField(
        max_digits=20,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Base units on hand (service-managed only)",
    )

    version = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.UUIDField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["tenant_id", "product"], name="balance_tenant_product_idx"),
            models.Index(fields=["tenant_id", "location"], name="balance_tenant_location_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "location", "product", "batch"],
                condition=Q(batch__isnull=False),
                name="uniq_balance_key_with_batch",
            ),
            models.UniqueConstraint(
                fields=["tenant_id", "location", "product"],
                condition=Q(batch__isnull=True),
                name="uniq_balance_key_without_batch",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="chk_balance_quantity_gte_zero",
            ),
        ]

    def __str__(self):
        batch_number = getattr(self.batch, "batch_number", "-")
        return f"{self.location} | {self.product} | {batch_number} = {self.quantity}"
