# stock/api/exceptions.py

"""
API ERROR MAPPING

Single error envelope for stock endpoints:

    {"detail": str, "code": str, "meta": {...}}

- StockServiceError -> its own status_code / code / meta
- DRF ValidationError (serializer input) -> 400 VALIDATION_ERROR, field
  errors under meta.fields
- anything else -> DRF default handling
"""

from __future__ import annotations

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from stock.services.exceptions import StockServiceError


def stock_exception_handler(exc, context):
    if isinstance(exc, StockServiceError):
        return Response(exc.as_dict(), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is not None and isinstance(exc, exceptions.ValidationError):
        response.data = {
            "detail": "Invalid input.",
            "code": "VALIDATION_ERROR",
            "meta": {"fields": response.data},
        }
        response.status_code = status.HTTP_400_BAD_REQUEST

    return response
