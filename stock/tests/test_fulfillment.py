# stock/tests/test_fulfillment.py

from __future__ import annotations

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from products.models import Product
from stock.models import MovementRequest, MovementRequestItem, StockMovement
from stock.services import MovementPolicy, create_stock_movement
from stock.tests.helpers import StockFixturesMixin


class FulfillmentMatcherTests(StockFixturesMixin, TestCase):
    """
    Pending-request fulfillment after receipts.

    GUARANTEES:
    - An IN into a warehouse whose city matches an OPEN request that fits
      in the received quantity closes it (FULFILLED, items zeroed)
    - City matching is case-insensitive and trimmed
    - Requests that do not fit, other cities and non-IN movements are untouched
    - Matcher failures never roll back the receipt
    """

    def make_request(self, *, city="Lima", quantities=("15",), product=None, status=MovementRequest.Status.OPEN):
        request = MovementRequest.objects.create(
            tenant_id=self.tenant_id,
            requested_city=city,
            requested_by=uuid.uuid4(),
            status=status,
        )
        for qty in quantities:
            MovementRequestItem.objects.create(
                tenant_id=self.tenant_id,
                request=request,
                product=product or self.product,
                requested_quantity=Decimal(qty),
                remaining_quantity=Decimal(qty),
            )
        return request

    def receive(self, qty, *, policy=None, location=None):
        return create_stock_movement(
            self.command("IN", qty, to_location_id=(location or self.loc_a).id),
            policy=policy,
        )

    def test_scenario_e_request_fulfilled(self):
        request = self.make_request(city="  lima ", quantities=("10", "5"))

        result = self.receive("20")

        request.refresh_from_db()
        self.assertEqual(request.status, MovementRequest.Status.FULFILLED)
        self.assertEqual(request.fulfilled_by, self.user_id)
        self.assertIsNotNone(request.fulfilled_at)
        self.assertEqual(
            set(request.items.values_list("remaining_quantity", flat=True)),
            {Decimal("0")},
        )
        self.assertEqual([r.id for r in result.fulfilled_requests], [request.id])

    def test_request_needing_more_than_received_stays_open(self):
        request = self.make_request(quantities=("25",))

        result = self.receive("20")

        request.refresh_from_db()
        self.assertEqual(request.status, MovementRequest.Status.OPEN)
        self.assertEqual(request.items.get().remaining_quantity, Decimal("25"))
        self.assertEqual(result.fulfilled_requests, [])

    def test_other_city_untouched(self):
        request = self.make_request(city="Cusco")
        self.receive("20")

        request.refresh_from_db()
        self.assertEqual(request.status, MovementRequest.Status.OPEN)

    def test_blank_warehouse_city_matches_nothing(self):
        request = self.make_request(city="Lima")
        no_city = self.make_warehouse(code="NOCITY", city="  ")
        location = self.make_location(code="N-01", warehouse=no_city)

        self.receive("20", location=location)

        request.refresh_from_db()
        self.assertEqual(request.status, MovementRequest.Status.OPEN)

    def test_cancelled_and_other_product_requests_ignored(self):
        cancelled = self.make_request(status=MovementRequest.Status.CANCELLED)
        other_product = Product.objects.create(tenant_id=self.tenant_id, sku="IBU-200", name="Ibuprofen")
        other = self.make_request(product=other_product, quantities=("1",))

        result = self.receive("20")

        cancelled.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(cancelled.status, MovementRequest.Status.CANCELLED)
        self.assertEqual(other.status, MovementRequest.Status.OPEN)
        self.assertEqual(result.fulfilled_requests, [])

    def test_only_receipts_trigger_matching(self):
        request = self.make_request(quantities=("5",))
        create_stock_movement(
            self.command("IN", "20", to_location_id=self.loc_a.id),
            policy=MovementPolicy(auto_fulfill_requests=False),
        )
        create_stock_movement(
            self.command("TRANSFER", "10", from_location_id=self.loc_a.id, to_location_id=self.loc_b.id)
        )

        request.refresh_from_db()
        self.assertEqual(request.status, MovementRequest.Status.OPEN)

    def test_default_compares_each_request_to_full_quantity(self):
        first = self.make_request(quantities=("15",))
        second = self.make_request(quantities=("15",))

        result = self.receive("20")

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.status, MovementRequest.Status.FULFILLED)
        self.assertEqual(second.status, MovementRequest.Status.FULFILLED)
        self.assertEqual(len(result.fulfilled_requests), 2)

    def test_consuming_policy_deducts_matched_quantity_oldest_first(self):
        newer = self.make_request(quantities=("15",))
        older = self.make_request(quantities=("15",))
        MovementRequest.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        result = self.receive("20", policy=MovementPolicy(fulfillment_consumes_quantity=True))

        newer.refresh_from_db()
        older.refresh_from_db()
        self.assertEqual(older.status, MovementRequest.Status.FULFILLED)
        self.assertEqual(newer.status, MovementRequest.Status.OPEN)
        self.assertEqual([r.id for r in result.fulfilled_requests], [older.id])

    def test_matcher_failure_keeps_receipt(self):
        request = self.make_request(quantities=("5",))

        with mock.patch(
            "stock.services.fulfillment._match_requests",
            side_effect=RuntimeError("matcher bug"),
        ), self.assertLogs("stock.services.fulfillment", level="ERROR"):
            result = self.receive("20")

        self.assertEqual(result.fulfilled_requests, [])
        self.assertEqual(self.balance_qty(self.loc_a), Decimal("20"))
        self.assertEqual(StockMovement.objects.count(), 1)
        request.refresh_from_db()
        self.assertEqual(request.status, MovementRequest.Status.OPEN)

    def test_partial_matcher_writes_rolled_back_on_failure(self):
        request = self.make_request(quantities=("5",))

        with mock.patch.object(
            MovementRequest,
            "save",
            side_effect=RuntimeError("write failed"),
        ), self.assertLogs("stock.services.fulfillment", level="ERROR"):
            result = self.receive("20")

        self.assertEqual(result.fulfilled_requests, [])
        self.assertEqual(request.items.get().remaining_quantity, Decimal("5"))
        self.assertEqual(self.balance_qty(self.loc_a), Decimal("20"))
