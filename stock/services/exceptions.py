# stock/services/exceptions.py

"""
STOCK SERVICE ERRORS

Centralized domain errors for the movement engine.

Every error carries:
- code: machine-readable identifier (UI display + audit)
- status_code: HTTP-equivalent status used by the API boundary
- meta: structured details (batch ids, quantities, ...)

All of them abort the movement transaction; nothing is persisted.
"""


class StockServiceError(Exception):
    """Base exception for all stock movement failures."""

    code = "STOCK_ERROR"
    status_code = 400

    def __init__(self, message="", *, code=None, meta=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.meta = dict(meta or {})

    def as_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "meta": self.meta}


class ValidationError(StockServiceError):
    """Structural misuse of the movement command. Never retried."""

    code = "VALIDATION_ERROR"
    status_code = 400


class InactiveLocationError(ValidationError):
    """Destination location is inactive."""

    code = "LOCATION_INACTIVE"


class NotFoundError(StockServiceError):
    """Referenced product/batch/location missing or owned by another tenant."""

    code = "NOT_FOUND"
    status_code = 404


class BatchQuarantineError(StockServiceError):
    """Stock decrease blocked: batch is not RELEASED."""

    code = "BATCH_QUARANTINE"
    status_code = 409


class BatchExpiredError(StockServiceError):
    """Stock decrease blocked: batch expired before today (UTC)."""

    code = "BATCH_EXPIRED"
    status_code = 409


class InsufficientStockError(StockServiceError):
    """Movement would drive a balance below zero."""

    code = "INSUFFICIENT_STOCK"
    status_code = 409
