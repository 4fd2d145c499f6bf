# warehouses/models/warehouse.py

import uuid

from django.db import models
from django.db.models import Q


class Warehouse(models.Model):
    """
    Represents a physical warehouse / branch.

    Guarantees:
    - Warehouses are stable master data (managed outside the movement engine)
    - code is unique per tenant
    - city drives pending-request matching (case-insensitive)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    code = models.CharField(max_length=50)
    name = models.CharField(max_length=255)
    city = models.CharField(max_length=120, null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant_id", "city"], name="warehouse_tenant_city_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "code"],
                condition=~Q(code=""),
                name="uniq_warehouse_code_per_tenant",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"
