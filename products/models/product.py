# products/models/product.py

"""
PRODUCT (TENANT-SCOPED CATALOG ENTRY)

Represents a stockable pharmaceutical product.

STOCK MODEL (IMPORTANT):
- Product itself does NOT store stock
- Stock lives in stock.InventoryBalance, keyed by (tenant, location, product, batch)
- Every change is an immutable stock.StockMovement

Catalog CRUD lives outside this service. The movement engine only reads
products (existence + is_active, scoped to the tenant).
"""

import uuid

from django.db import models


class Product(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    sku = models.CharField(max_length=128, db_index=True)
    name = models.CharField(max_length=255, db_index=True)
    generic_name = models.CharField(max_length=255, null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.UUIDField(null=True, blank=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant_id", "is_active"], name="product_tenant_active_idx"),
        ]
        constraints = [
            # Multi-tenant safe uniqueness: the same SKU can exist in two tenants.
            models.UniqueConstraint(
                fields=["tenant_id", "sku"],
                name="unique_product_sku_per_tenant",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"
