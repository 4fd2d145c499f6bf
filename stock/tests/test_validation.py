# stock/tests/test_validation.py

import uuid
from dataclasses import replace
from decimal import Decimal

from django.test import SimpleTestCase

from stock.services import (
    MovementCommand,
    NotFoundError,
    ValidationError,
    decreases_stock,
    validate_movement_command,
)


def _cmd(type, quantity="5", **kwargs):
    return MovementCommand(
        tenant_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        type=type,
        product_id=uuid.uuid4(),
        quantity=quantity,
        **kwargs,
    )


class MovementValidatorTests(SimpleTestCase):
    """
    Structural validation (no database access).

    GUARANTEES:
    - quantity must be a finite decimal > 0
    - each type requires its locations
    - TRANSFER source and destination must differ
    - the returned command is normalized (type upper-cased, Decimal quantity)
    """

    def setUp(self):
        self.a = uuid.uuid4()
        self.b = uuid.uuid4()

    def test_zero_and_negative_quantity_rejected(self):
        for qty in ("0", "-1", 0, Decimal("-0.5")):
            with self.subTest(qty=qty), self.assertRaises(ValidationError):
                validate_movement_command(_cmd("IN", qty, to_location_id=self.a))

    def test_non_numeric_and_non_finite_quantity_rejected(self):
        for qty in ("abc", None, "", "NaN", "Infinity"):
            with self.subTest(qty=qty), self.assertRaises(ValidationError):
                validate_movement_command(_cmd("IN", qty, to_location_id=self.a))

    def test_too_many_decimal_places_rejected(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(_cmd("IN", "1.0000001", to_location_id=self.a))

    def test_too_many_integer_digits_rejected(self):
        validate_movement_command(_cmd("IN", "99999999999999.999999", to_location_id=self.a))
        for qty in ("100000000000000", "1e15"):
            with self.subTest(qty=qty), self.assertRaises(ValidationError):
                validate_movement_command(_cmd("IN", qty, to_location_id=self.a))

    def test_unknown_type_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_movement_command(_cmd("MOVE", to_location_id=self.a))
        self.assertEqual(ctx.exception.code, "VALIDATION_ERROR")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_in_requires_destination(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(_cmd("IN", from_location_id=self.a))

    def test_out_requires_source(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(_cmd("OUT", to_location_id=self.a))

    def test_transfer_requires_both_locations(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(_cmd("TRANSFER", from_location_id=self.a))
        with self.assertRaises(ValidationError):
            validate_movement_command(_cmd("TRANSFER", to_location_id=self.a))

    def test_transfer_to_same_location_rejected(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(
                _cmd("TRANSFER", from_location_id=self.a, to_location_id=str(self.a))
            )

    def test_transfer_to_same_location_spelled_differently_rejected(self):
        for to_location_id in (self.a.hex, str(self.a).upper(), f"  {self.a}  "):
            with self.subTest(to_location_id=to_location_id), self.assertRaises(ValidationError):
                validate_movement_command(
                    _cmd("TRANSFER", from_location_id=str(self.a), to_location_id=to_location_id)
                )

    def test_ids_are_coerced_to_uuid(self):
        cmd = validate_movement_command(
            _cmd("TRANSFER", from_location_id=self.a.hex, to_location_id=str(self.b).upper(), batch_id=str(self.b))
        )
        self.assertEqual(cmd.from_location_id, self.a)
        self.assertEqual(cmd.to_location_id, self.b)
        self.assertEqual(cmd.batch_id, self.b)
        self.assertIsInstance(cmd.tenant_id, uuid.UUID)
        self.assertIsInstance(cmd.product_id, uuid.UUID)

    def test_malformed_reference_id_reads_as_missing(self):
        with self.assertRaises(NotFoundError):
            validate_movement_command(_cmd("IN", to_location_id="not-a-uuid"))
        with self.assertRaises(NotFoundError):
            validate_movement_command(_cmd("IN", to_location_id=self.a, batch_id="lot-7"))

    def test_malformed_tenant_rejected(self):
        cmd = replace(_cmd("IN", to_location_id=self.a), tenant_id="tenant-1")
        with self.assertRaises(ValidationError):
            validate_movement_command(cmd)

    def test_adjustment_requires_a_location(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(_cmd("ADJUSTMENT"))

    def test_presentation_quantity_must_be_positive(self):
        with self.assertRaises(ValidationError):
            validate_movement_command(
                _cmd("IN", to_location_id=self.a, presentation_quantity="0")
            )

    def test_normalizes_command(self):
        cmd = validate_movement_command(
            _cmd("in", "2.5", to_location_id=self.a, batch_id="  ", presentation_quantity="")
        )
        self.assertEqual(cmd.type, "IN")
        self.assertEqual(cmd.quantity, Decimal("2.5"))
        self.assertIsNone(cmd.batch_id)
        self.assertIsNone(cmd.presentation_quantity)


class DecreasesStockTests(SimpleTestCase):
    def test_direction_per_type(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        self.assertFalse(decreases_stock(_cmd("IN", to_location_id=a)))
        self.assertTrue(decreases_stock(_cmd("OUT", from_location_id=a)))
        self.assertTrue(decreases_stock(_cmd("TRANSFER", from_location_id=a, to_location_id=b)))
        self.assertFalse(decreases_stock(_cmd("ADJUSTMENT", to_location_id=a)))
        self.assertTrue(decreases_stock(_cmd("ADJUSTMENT", from_location_id=a)))
