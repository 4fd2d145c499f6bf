from .exceptions import (
    BatchExpiredError,
    BatchQuarantineError,
    InactiveLocationError,
    InsufficientStockError,
    NotFoundError,
    StockServiceError,
    ValidationError,
)
from .fefo import FefoSuggestion, suggest_fefo_batches
from .movements import MovementResult, create_stock_movement
from .policy import MovementPolicy, get_movement_policy
from .sequence import SequenceNumber, format_sequence_number, next_sequence
from .validation import MovementCommand, decreases_stock, validate_movement_command

__all__ = [
    "BatchExpiredError",
    "BatchQuarantineError",
    "FefoSuggestion",
    "InactiveLocationError",
    "InsufficientStockError",
    "MovementCommand",
    "MovementPolicy",
    "MovementResult",
    "NotFoundError",
    "SequenceNumber",
    "StockServiceError",
    "ValidationError",
    "create_stock_movement",
    "decreases_stock",
    "format_sequence_number",
    "get_movement_policy",
    "next_sequence",
    "suggest_fefo_batches",
    "validate_movement_command",
]
