# stock/tests/helpers.py

"""
Shared fixtures for stock engine tests.

One tenant with:
- warehouse "MAIN" (city Lima) holding locations A and B
- one active product
Helpers create extra batches / locations and read balances back.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from batches.models import Batch
from products.models import Product
from stock.models import InventoryBalance
from stock.services import MovementCommand
from warehouses.models import Location, Warehouse


class StockFixturesMixin:
    def setUp(self):
        super().setUp()
        self.tenant_id = uuid.uuid4()
        self.user_id = uuid.uuid4()

        self.product = Product.objects.create(
            tenant_id=self.tenant_id,
            sku="PARA-500",
            name="Paracetamol 500mg",
        )
        self.warehouse = self.make_warehouse(code="MAIN", city="Lima")
        self.loc_a = self.make_location(code="A-01")
        self.loc_b = self.make_location(code="B-01")

    # -----------------------------
    # builders
    # -----------------------------
    def make_warehouse(self, *, code, city=None, tenant_id=None):
        return Warehouse.objects.create(
            tenant_id=tenant_id or self.tenant_id,
            code=code,
            name=f"Warehouse {code}",
            city=city,
        )

    def make_location(self, *, code, warehouse=None, is_active=True, tenant_id=None):
        warehouse = warehouse or self.warehouse
        return Location.objects.create(
            tenant_id=tenant_id or warehouse.tenant_id,
            warehouse=warehouse,
            code=code,
            is_active=is_active,
        )

    def make_batch(self, *, number="LOT-1", status=Batch.Status.RELEASED, expires_in_days=365, expires_at=None):
        if expires_at is None and expires_in_days is not None:
            expires_at = timezone.now() + timedelta(days=expires_in_days)
        return Batch.objects.create(
            tenant_id=self.tenant_id,
            product=self.product,
            batch_number=number,
            status=status,
            expires_at=expires_at,
        )

    def command(self, type, quantity, **kwargs):
        kwargs.setdefault("tenant_id", self.tenant_id)
        kwargs.setdefault("user_id", self.user_id)
        kwargs.setdefault("product_id", self.product.id)
        return MovementCommand(type=type, quantity=quantity, **kwargs)

    # -----------------------------
    # readers
    # -----------------------------
    def balance_qty(self, location, batch=None) -> Decimal:
        lookup = {
            "tenant_id": self.tenant_id,
            "location": location,
            "product": self.product,
        }
        if batch is None:
            lookup["batch__isnull"] = True
        else:
            lookup["batch"] = batch
        row = InventoryBalance.objects.filter(**lookup).first()
        return row.quantity if row else Decimal("0")
