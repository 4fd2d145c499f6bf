# warehouses/models/location.py

import uuid

from django.db import models

from .warehouse import Warehouse


class Location(models.Model):
    """
    A stock-holding place inside a warehouse (bin, shelf, floor area).

    Movement rules (enforced by stock.services.references):
    - Source locations may be inactive (draining a decommissioned location)
    - Destination locations must be active
    """

    class LocationType(models.TextChoices):
        BIN = "BIN", "Bin"
        SHELF = "SHELF", "Shelf"
        FLOOR = "FLOOR", "Floor"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.PROTECT,
        related_name="locations",
    )

    code = models.CharField(max_length=50)
    type = models.CharField(
        max_length=10,
        choices=LocationType.choices,
        default=LocationType.BIN,
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["warehouse", "code"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "warehouse", "code"],
                name="uniq_location_code_per_warehouse",
            ),
        ]

    def __str__(self):
        warehouse_code = getattr(self.warehouse, "code", "WH")
        return f"{warehouse_code}/{self.code}"
