# stock/admin.py

"""
Admin rules:
- Movements and balances are READ-ONLY here; the movement engine is the
  only writer (no add / change / delete from the admin).
- Sequences are visible for support, never edited by hand.
- Movement requests are managed outside the engine and stay editable.
"""

from django.contrib import admin

from stock.models import (
    InventoryBalance,
    MovementRequest,
    MovementRequestItem,
    StockMovement,
    TenantSequence,
)


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdmin):
    list_display = ("number", "type", "product", "batch", "from_location", "to_location", "quantity", "created_at")
    list_filter = ("type",)
    search_fields = ("number", "reference_id", "product__name", "batch__batch_number")
    date_hierarchy = "created_at"


@admin.register(InventoryBalance)
class InventoryBalanceAdmin(ReadOnlyAdmin):
    list_display = ("location", "product", "batch", "quantity", "version", "updated_at")
    search_fields = ("product__name", "batch__batch_number", "location__code")


@admin.register(TenantSequence)
class TenantSequenceAdmin(ReadOnlyAdmin):
    list_display = ("tenant_id", "key", "year", "current_value", "updated_at")
    list_filter = ("key", "year")


class MovementRequestItemInline(admin.TabularInline):
    model = MovementRequestItem
    extra = 0


@admin.register(MovementRequest)
class MovementRequestAdmin(admin.ModelAdmin):
    list_display = ("requested_city", "status", "warehouse", "created_at", "fulfilled_at")
    list_filter = ("status",)
    search_fields = ("requested_city",)
    inlines = [MovementRequestItemInline]
