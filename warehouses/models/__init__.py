# warehouses/models/__init__.py

from .warehouse import Warehouse
from .location import Location

__all__ = ["Warehouse", "Location"]
