# products/admin.py

"""
Admin rules:
- Products are catalog master data; stock is never edited here.
- Quantities live in stock.InventoryBalance and change only through the
  movement engine.
"""

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "tenant_id", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "sku", "generic_name")
