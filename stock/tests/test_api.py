# stock/tests/test_api.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from batches.models import Batch
from stock.models import MovementRequest, MovementRequestItem, StockMovement
from stock.tests.helpers import StockFixturesMixin


def _token(*, user_id, tenant_id=None) -> str:
    token = AccessToken()
    token["user_id"] = str(user_id)
    if tenant_id is not None:
        token["tenant_id"] = str(tenant_id)
    return str(token)


class StockMovementApiTests(StockFixturesMixin, APITestCase):
    """
    HTTP boundary for the movement engine.

    GUARANTEES:
    - JWT required; tenant comes from the token claim
    - Success returns 201 with movement + balances
    - Domain errors map to {detail, code, meta} with their status code
    - Audit events are logged on "stock.audit"
    """

    def setUp(self):
        super().setUp()
        self.url = reverse("stock-movement-create")
        self.client.credentials(
            HTTP_AUTHORIZATION=f"Bearer {_token(user_id=self.user_id, tenant_id=self.tenant_id)}"
        )

    def post(self, payload):
        return self.client.post(self.url, payload, format="json")

    def receive(self, qty="10", **extra):
        payload = {
            "type": "IN",
            "productId": str(self.product.id),
            "toLocationId": str(self.loc_a.id),
            "quantity": qty,
        }
        payload.update(extra)
        return self.post(payload)

    def test_requires_authentication(self):
        self.client.credentials()
        res = self.receive()
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_requires_tenant_claim(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {_token(user_id=self.user_id)}")
        res = self.receive()
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_receipt_created(self):
        with self.assertLogs("stock.audit", level="INFO") as logs:
            res = self.receive("10", referenceType="PURCHASE", referenceId="PO-1")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertTrue(res.data["movement"]["number"].startswith("MS"))
        self.assertEqual(res.data["movement"]["type"], "IN")
        self.assertEqual(res.data["movement"]["reference_id"], "PO-1")
        self.assertIsNone(res.data["fromBalance"])
        self.assertEqual(Decimal(res.data["toBalance"]["quantity"]), Decimal("10"))
        self.assertEqual(res.data["fulfilledRequestIds"], [])
        self.assertIn("stock.movement.create", logs.output[0])

        movement = StockMovement.objects.get()
        self.assertEqual(movement.tenant_id, self.tenant_id)
        self.assertEqual(movement.created_by, self.user_id)

    def test_receipt_reports_fulfilled_requests(self):
        request = MovementRequest.objects.create(
            tenant_id=self.tenant_id,
            requested_city="LIMA",
            requested_by=uuid.uuid4(),
        )
        MovementRequestItem.objects.create(
            tenant_id=self.tenant_id,
            request=request,
            product=self.product,
            requested_quantity=Decimal("4"),
            remaining_quantity=Decimal("4"),
        )

        res = self.receive("4")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["fulfilledRequestIds"], [str(request.id)])

    def test_insufficient_stock_maps_to_409(self):
        res = self.post(
            {
                "type": "OUT",
                "productId": str(self.product.id),
                "fromLocationId": str(self.loc_a.id),
                "quantity": "1",
            }
        )

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["meta"]["locationId"], str(self.loc_a.id))

    def test_quarantine_maps_to_409_and_is_audited(self):
        batch = self.make_batch(number="Q-1")
        self.receive("5", batchId=str(batch.id))
        Batch.objects.filter(pk=batch.pk).update(status=Batch.Status.QUARANTINE)

        with self.assertLogs("stock.audit", level="WARNING") as logs:
            res = self.post(
                {
                    "type": "OUT",
                    "productId": str(self.product.id),
                    "fromLocationId": str(self.loc_a.id),
                    "batchId": str(batch.id),
                    "quantity": "1",
                }
            )

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["code"], "BATCH_QUARANTINE")
        self.assertEqual(res.data["meta"]["batchNumber"], "Q-1")
        self.assertIn("stock.movement.blocked.quarantine", logs.output[0])

    def test_invalid_payload_maps_to_400(self):
        res = self.post({"type": "IN", "quantity": "1"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")
        self.assertIn("productId", res.data["meta"]["fields"])

    def test_transfer_to_same_location_maps_to_400(self):
        res = self.post(
            {
                "type": "TRANSFER",
                "productId": str(self.product.id),
                "fromLocationId": str(self.loc_a.id),
                "toLocationId": str(self.loc_a.id),
                "quantity": "1",
            }
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")

    def test_other_tenant_location_maps_to_404(self):
        other_tenant = uuid.uuid4()
        wh = self.make_warehouse(code="OTHER", tenant_id=other_tenant)
        foreign = self.make_location(code="O-1", warehouse=wh)

        res = self.receive("1", toLocationId=str(foreign.id))

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["code"], "NOT_FOUND")


class FefoSuggestionApiTests(StockFixturesMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("stock-fefo-suggestions")
        self.client.credentials(
            HTTP_AUTHORIZATION=f"Bearer {_token(user_id=self.user_id, tenant_id=self.tenant_id)}"
        )

    def test_lists_suggestions(self):
        batch = self.make_batch(number="F-1", expires_in_days=15)
        self.client.post(
            reverse("stock-movement-create"),
            {
                "type": "IN",
                "productId": str(self.product.id),
                "toLocationId": str(self.loc_a.id),
                "batchId": str(batch.id),
                "quantity": "8",
            },
            format="json",
        )

        res = self.client.get(self.url, {"productId": str(self.product.id), "locationId": str(self.loc_a.id)})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data), 1)
        self.assertEqual(res.data[0]["batch_number"], "F-1")
        self.assertEqual(Decimal(res.data[0]["quantity"]), Decimal("8"))

    def test_requires_scope(self):
        res = self.client.get(self.url, {"productId": str(self.product.id)})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "VALIDATION_ERROR")
