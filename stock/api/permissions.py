# stock/api/permissions.py

"""
TENANT SCOPE (JWT CLAIM)

Authentication is stateless JWT (no user table lookup):
- request.user.id   -> "user_id" claim
- request.auth      -> validated token; must carry a "tenant_id" claim

Every stock endpoint is tenant-scoped; a token without a valid tenant
claim is rejected with 403.
"""

from __future__ import annotations

import uuid

from rest_framework.permissions import BasePermission

TENANT_CLAIM = "tenant_id"


def tenant_id_from_request(request):
    """Return the tenant UUID carried by the access token, or None."""
    token = getattr(request, "auth", None)
    if token is None:
        return None
    try:
        raw = token.get(TENANT_CLAIM)
    except AttributeError:
        return None
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def user_id_from_request(request):
    user_id = getattr(getattr(request, "user", None), "id", None)
    if not user_id:
        return None
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


class HasTenantClaim(BasePermission):
    message = "Access token has no valid tenant_id claim."

    def has_permission(self, request, view):
        return tenant_id_from_request(request) is not None
