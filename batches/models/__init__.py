# batches/models/__init__.py

from .batch import Batch as Batch

__all__ = ["Batch"]
