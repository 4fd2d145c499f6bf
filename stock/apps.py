# stock/apps.py

"""
STOCK APP CONFIG

Stock movement transaction engine:
- Immutable movement ledger + current balances
- Tenant/year scoped document sequences
- Pending inter-warehouse request fulfillment
"""

from django.apps import AppConfig


class StockConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "stock"
    verbose_name = "Stock Movements"
