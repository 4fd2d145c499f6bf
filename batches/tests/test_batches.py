# batches/tests/test_batches.py

import uuid
from datetime import datetime, timezone as dt_timezone

from django.db import IntegrityError
from django.test import TestCase

from batches.models import Batch
from batches.services import allocate_lot_number
from products.models import Product


class BatchModelTests(TestCase):
    """
    GUARANTEES:
    - New batches are RELEASED and unopened
    - Batch numbers are unique per (tenant, product)
    """

    def setUp(self):
        self.tenant_id = uuid.uuid4()
        self.product = Product.objects.create(tenant_id=self.tenant_id, sku="AMX-500", name="Amoxicillin 500mg")

    def test_defaults(self):
        batch = Batch.objects.create(tenant_id=self.tenant_id, product=self.product, batch_number="L-1")
        self.assertTrue(batch.is_released)
        self.assertFalse(batch.is_opened)
        self.assertEqual(batch.version, 1)

    def test_batch_number_unique_per_product(self):
        Batch.objects.create(tenant_id=self.tenant_id, product=self.product, batch_number="L-1")
        with self.assertRaises(IntegrityError):
            Batch.objects.create(tenant_id=self.tenant_id, product=self.product, batch_number="L-1")


class LotNumberAllocationTests(TestCase):
    def test_lot_numbers_are_sequential_per_tenant_and_year(self):
        tenant_id = uuid.uuid4()
        at = datetime(2025, 6, 1, tzinfo=dt_timezone.utc)

        self.assertEqual(allocate_lot_number(tenant_id, at), "LOT-2025001")
        self.assertEqual(allocate_lot_number(tenant_id, at), "LOT-2025002")
        self.assertEqual(allocate_lot_number(uuid.uuid4(), at), "LOT-2025001")
        self.assertEqual(
            allocate_lot_number(tenant_id, datetime(2026, 1, 1, tzinfo=dt_timezone.utc)),
            "LOT-2026001",
        )
