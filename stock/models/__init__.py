# stock/models/__init__.py

from .balance import InventoryBalance
from .movement import StockMovement
from .sequence import TenantSequence
from .movement_request import MovementRequest, MovementRequestItem

__all__ = [
    "InventoryBalance",
    "StockMovement",
    "TenantSequence",
    "MovementRequest",
    "MovementRequestItem",
]
