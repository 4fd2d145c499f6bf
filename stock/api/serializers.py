# stock/api/serializers.py

"""
STOCK API SERIALIZERS

Input:
- camelCase keys (frontend contract) mapped onto snake_case via source=
- Only shape checks here; business rules live in stock.services
  (so the API and library callers share one set of error codes)

Output:
- Read-only ModelSerializers for movements/balances/requests
"""

from __future__ import annotations

from rest_framework import serializers

from stock.models import InventoryBalance, StockMovement


# ============================================================
# INPUT
# ============================================================

class StockMovementCreateSerializer(serializers.Serializer):
    type = serializers.CharField(help_text="IN | OUT | TRANSFER | ADJUSTMENT")
    productId = serializers.UUIDField(source="product_id")
    batchId = serializers.UUIDField(source="batch_id", required=False, allow_null=True)
    fromLocationId = serializers.UUIDField(
        source="from_location_id", required=False, allow_null=True
    )
    toLocationId = serializers.UUIDField(
        source="to_location_id", required=False, allow_null=True
    )
    quantity = serializers.CharField(help_text="Positive decimal, base units")

    presentationId = serializers.UUIDField(
        source="presentation_id", required=False, allow_null=True
    )
    presentationQuantity = serializers.CharField(
        source="presentation_quantity", required=False, allow_null=True, allow_blank=True
    )

    referenceType = serializers.CharField(
        source="reference_type", required=False, allow_null=True, allow_blank=True, max_length=64
    )
    referenceId = serializers.CharField(
        source="reference_id", required=False, allow_null=True, allow_blank=True, max_length=128
    )
    note = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class FefoQuerySerializer(serializers.Serializer):
    productId = serializers.UUIDField(source="product_id")
    locationId = serializers.UUIDField(source="location_id", required=False)
    warehouseId = serializers.UUIDField(source="warehouse_id", required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)

    def validate(self, attrs):
        if not attrs.get("location_id") and not attrs.get("warehouse_id"):
            raise serializers.ValidationError(
                {"locationId": "locationId or warehouseId is required"}
            )
        return attrs


# ============================================================
# OUTPUT
# ============================================================

class StockMovementSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    batch_id = serializers.UUIDField(read_only=True, allow_null=True)
    from_location_id = serializers.UUIDField(read_only=True, allow_null=True)
    to_location_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "tenant_id",
            "number",
            "number_year",
            "sequence_value",
            "type",
            "product_id",
            "batch_id",
            "from_location_id",
            "to_location_id",
            "quantity",
            "presentation_id",
            "presentation_quantity",
            "reference_type",
            "reference_id",
            "note",
            "created_at",
            "created_by",
        ]
        read_only_fields = fields


class InventoryBalanceSerializer(serializers.ModelSerializer):
    location_id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)
    batch_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = InventoryBalance
        fields = [
            "id",
            "tenant_id",
            "location_id",
            "product_id",
            "batch_id",
            "quantity",
            "version",
            "updated_at",
        ]
        read_only_fields = fields


class FefoSuggestionSerializer(serializers.Serializer):
    balance_id = serializers.UUIDField()
    batch_id = serializers.UUIDField()
    batch_number = serializers.CharField()
    expires_at = serializers.DateTimeField(allow_null=True)
    location_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=20, decimal_places=6)
