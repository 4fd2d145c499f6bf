# stock/api/views.py

"""
STOCK API

Endpoints:
- POST /api/stock/movements/         execute one movement (engine)
- GET  /api/stock/fefo-suggestions/  batches by soonest expiry

Scope:
- tenant from the JWT "tenant_id" claim, user from "user_id"
- errors are raised, not returned; stock_exception_handler renders them

Audit (logger "stock.audit"):
- stock.movement.create
- stock.movement.blocked.quarantine
- stock.movement.blocked.expired
"""

from __future__ import annotations

import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from stock.api.permissions import HasTenantClaim, tenant_id_from_request, user_id_from_request
from stock.api.serializers import (
    FefoQuerySerializer,
    FefoSuggestionSerializer,
    InventoryBalanceSerializer,
    StockMovementCreateSerializer,
    StockMovementSerializer,
)
from stock.services import (
    BatchExpiredError,
    BatchQuarantineError,
    MovementCommand,
    create_stock_movement,
    suggest_fefo_batches,
)

audit_logger = logging.getLogger("stock.audit")


def _audit(event: str, *, tenant_id, user_id, level=logging.INFO, **fields) -> None:
    audit_logger.log(
        level,
        event,
        extra={
            "event": event,
            "tenant_id": str(tenant_id),
            "actor_user_id": str(user_id) if user_id else None,
            **fields,
        },
    )


class StockMovementCreateView(APIView):
    """
    STOCK MOVEMENT ENDPOINT (AUTHORITATIVE)

    GUARANTEES:
    - One atomic movement per request
    - Balances never go negative
    - Quarantined / expired batches never leave a location
    """

    permission_classes = [IsAuthenticated, HasTenantClaim]

    @extend_schema(
        tags=["stock"],
        request=StockMovementCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
        description="Execute an IN / OUT / TRANSFER / ADJUSTMENT movement",
    )
    def post(self, request):
        serializer = StockMovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tenant_id = tenant_id_from_request(request)
        user_id = user_id_from_request(request)

        command = MovementCommand(
            tenant_id=tenant_id,
            user_id=user_id,
            type=data["type"],
            product_id=data["product_id"],
            quantity=data["quantity"],
            batch_id=data.get("batch_id"),
            from_location_id=data.get("from_location_id"),
            to_location_id=data.get("to_location_id"),
            presentation_id=data.get("presentation_id"),
            presentation_quantity=data.get("presentation_quantity"),
            reference_type=data.get("reference_type"),
            reference_id=data.get("reference_id"),
            note=data.get("note"),
        )

        try:
            result = create_stock_movement(command)
        except BatchQuarantineError as exc:
            _audit(
                "stock.movement.blocked.quarantine",
                tenant_id=tenant_id,
                user_id=user_id,
                level=logging.WARNING,
                meta=exc.meta,
            )
            raise
        except BatchExpiredError as exc:
            _audit(
                "stock.movement.blocked.expired",
                tenant_id=tenant_id,
                user_id=user_id,
                level=logging.WARNING,
                meta=exc.meta,
            )
            raise

        movement_data = StockMovementSerializer(result.movement).data
        from_balance = (
            InventoryBalanceSerializer(result.from_balance).data if result.from_balance else None
        )
        to_balance = (
            InventoryBalanceSerializer(result.to_balance).data if result.to_balance else None
        )

        _audit(
            "stock.movement.create",
            tenant_id=tenant_id,
            user_id=user_id,
            entity_type="StockMovement",
            entity_id=str(result.movement.id),
            after={"movement": movement_data, "fromBalance": from_balance, "toBalance": to_balance},
        )

        return Response(
            {
                "movement": movement_data,
                "fromBalance": from_balance,
                "toBalance": to_balance,
                "fulfilledRequestIds": [str(r.id) for r in result.fulfilled_requests],
            },
            status=status.HTTP_201_CREATED,
        )


class FefoSuggestionView(APIView):
    permission_classes = [IsAuthenticated, HasTenantClaim]

    @extend_schema(
        tags=["stock"],
        parameters=[
            OpenApiParameter("productId", str, required=True),
            OpenApiParameter("locationId", str, required=False),
            OpenApiParameter("warehouseId", str, required=False),
            OpenApiParameter("limit", int, required=False),
        ],
        responses={200: FefoSuggestionSerializer(many=True)},
        description="Released, non-expired batches with stock, soonest expiry first",
    )
    def get(self, request):
        query = FefoQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        suggestions = suggest_fefo_batches(
            tenant_id=tenant_id_from_request(request),
            product_id=params["product_id"],
            location_id=params.get("location_id"),
            warehouse_id=params.get("warehouse_id"),
            limit=params.get("limit"),
        )
        return Response(
            FefoSuggestionSerializer(suggestions, many=True).data,
            status=status.HTTP_200_OK,
        )
