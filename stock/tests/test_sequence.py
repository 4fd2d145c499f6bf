# stock/tests/test_sequence.py

import uuid
from unittest import mock

from django.test import TestCase

from stock.models import TenantSequence
from stock.services import ValidationError, format_sequence_number, next_sequence
from stock.services import sequence as sequence_service


class SequenceGeneratorTests(TestCase):
    """
    Tenant sequence tests.

    GUARANTEES:
    - First issue for a (tenant, year, key) triple is 1
    - Values are strictly increasing, without duplicates
    - Counters are isolated per tenant, per year and per key
    - Numbers use the documented formats
    """

    def setUp(self):
        self.tenant_id = uuid.uuid4()

    def test_first_value_is_one(self):
        seq = next_sequence(tenant_id=self.tenant_id, year=2025)
        self.assertEqual(seq.value, 1)
        self.assertEqual(seq.number, "MS2025-1")

    def test_values_are_monotonic_and_unique(self):
        values = [next_sequence(tenant_id=self.tenant_id, year=2025).value for _ in range(5)]
        self.assertEqual(values, [1, 2, 3, 4, 5])

        row = TenantSequence.objects.get(tenant_id=self.tenant_id, year=2025, key="MS")
        self.assertEqual(row.current_value, 5)

    def test_isolated_per_tenant_year_and_key(self):
        next_sequence(tenant_id=self.tenant_id, year=2025)
        next_sequence(tenant_id=self.tenant_id, year=2025)

        self.assertEqual(next_sequence(tenant_id=uuid.uuid4(), year=2025).value, 1)
        self.assertEqual(next_sequence(tenant_id=self.tenant_id, year=2026).value, 1)
        self.assertEqual(next_sequence(tenant_id=self.tenant_id, year=2025, key="OV").value, 1)

        self.assertEqual(next_sequence(tenant_id=self.tenant_id, year=2025).value, 3)

    def test_lot_format(self):
        seq = next_sequence(tenant_id=self.tenant_id, year=2025, key="LOT")
        self.assertEqual(seq.number, "LOT-2025001")
        self.assertEqual(format_sequence_number(key="LOT", year=2025, value=42), "LOT-2025042")
        self.assertEqual(format_sequence_number(key="OP", year=2024, value=7), "OP2024-7")

    def test_unknown_key_rejected(self):
        with self.assertRaises(ValidationError):
            next_sequence(tenant_id=self.tenant_id, year=2025, key="XX")
        self.assertFalse(TenantSequence.objects.exists())

    def test_lost_creation_race_continues_from_existing_row(self):
        for _ in range(3):
            next_sequence(tenant_id=self.tenant_id, year=2025)
        real_lock = sequence_service._lock_sequence
        calls = []

        def stale_then_real(lookup):
            # First read misses the row, as if another transaction created it meanwhile.
            calls.append(lookup)
            return None if len(calls) == 1 else real_lock(lookup)

        with mock.patch("stock.services.sequence._lock_sequence", side_effect=stale_then_real):
            seq = next_sequence(tenant_id=self.tenant_id, year=2025)

        self.assertEqual(len(calls), 2)
        self.assertEqual(seq.value, 4)
        self.assertEqual(seq.number, "MS2025-4")
        self.assertEqual(TenantSequence.objects.filter(tenant_id=self.tenant_id).count(), 1)
        self.assertEqual(next_sequence(tenant_id=self.tenant_id, year=2025).value, 5)
