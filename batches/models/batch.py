# batches/models/batch.py

"""
BATCH / LOT

One manufactured lot of a product (shared batch number + expiry).

LIFECYCLE:
- Created and released/quarantined by batch management (outside the engine)
- status gates any stock decrease: only RELEASED batches may leave a location
- opened_at/opened_by are stamped exactly ONCE, by the first OUT/TRANSFER
  movement that references the batch (conditional update, see
  stock.services.recorder)

The movement engine only reads status/expires_at and flips the opened state.
"""

import uuid

from django.db import models


class Batch(models.Model):
    class Status(models.TextChoices):
        RELEASED = "RELEASED", "Released"
        QUARANTINE = "QUARANTINE", "Quarantine"
        REJECTED = "REJECTED", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="batches",
    )

    batch_number = models.CharField(max_length=128)

    manufacturing_date = models.DateField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.RELEASED,
    )

    opened_at = models.DateTimeField(null=True, blank=True)
    opened_by = models.UUIDField(null=True, blank=True)

    version = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.UUIDField(null=True, blank=True)

    class Meta:
        ordering = ["expires_at", "created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "product", "expires_at"], name="batch_tenant_product_exp_idx"),
            models.Index(fields=["tenant_id", "status"], name="batch_tenant_status_idx"),
            models.Index(fields=["opened_at"], name="batch_opened_at_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "product", "batch_number"],
                name="unique_batch_per_tenant_product",
            ),
        ]

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | {self.batch_number}"

    @property
    def is_released(self) -> bool:
        return self.status == self.Status.RELEASED

    @property
    def is_opened(self) -> bool:
        return self.opened_at is not None
