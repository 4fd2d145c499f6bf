from django.contrib import admin

from warehouses.models import Location, Warehouse


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "city", "tenant_id", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "code", "city")


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("code", "warehouse", "type", "is_active")
    list_filter = ("type", "is_active")
    search_fields = ("code", "warehouse__name")
