# warehouses/tests/test_warehouses.py

import uuid

from django.db import IntegrityError
from django.test import TestCase

from warehouses.models import Location, Warehouse


class WarehouseLocationTests(TestCase):
    """
    GUARANTEES:
    - Warehouse codes are unique per tenant
    - Location codes are unique per warehouse
    - Locations are active BIN locations by default
    """

    def setUp(self):
        self.tenant_id = uuid.uuid4()
        self.warehouse = Warehouse.objects.create(tenant_id=self.tenant_id, code="MAIN", name="Main", city="Lima")

    def test_location_defaults(self):
        location = Location.objects.create(tenant_id=self.tenant_id, warehouse=self.warehouse, code="A-01")
        self.assertTrue(location.is_active)
        self.assertEqual(location.type, Location.LocationType.BIN)
        self.assertEqual(str(location), "MAIN/A-01")

    def test_warehouse_code_unique_per_tenant(self):
        Warehouse.objects.create(tenant_id=uuid.uuid4(), code="MAIN", name="Other tenant")
        with self.assertRaises(IntegrityError):
            Warehouse.objects.create(tenant_id=self.tenant_id, code="MAIN", name="Duplicate")

    def test_location_code_unique_per_warehouse(self):
        Location.objects.create(tenant_id=self.tenant_id, warehouse=self.warehouse, code="A-01")
        other = Warehouse.objects.create(tenant_id=self.tenant_id, code="NORTH", name="North")
        Location.objects.create(tenant_id=self.tenant_id, warehouse=other, code="A-01")

        with self.assertRaises(IntegrityError):
            Location.objects.create(tenant_id=self.tenant_id, warehouse=self.warehouse, code="A-01")
