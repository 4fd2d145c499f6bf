from .numbering import allocate_lot_number

__all__ = ["allocate_lot_number"]
