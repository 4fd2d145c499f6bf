# stock/services/policy.py

"""
MOVEMENT POLICY (SOFT BUSINESS-RULE TOGGLES)

Compliance rules and side-effect switches are configuration, not literals:
- Defaults come from settings.STOCK_MOVEMENT_POLICY (env-driven, see settings)
- Per-tenant overrides come from settings.STOCK_MOVEMENT_POLICY_OVERRIDES,
  keyed by tenant id string
- Callers (tests, batch jobs) may inject a MovementPolicy directly
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from django.conf import settings


@dataclass(frozen=True)
class MovementPolicy:
    enforce_quarantine: bool = True
    enforce_expiry: bool = True
    # Block batches expiring within N days of today (0 = only already expired).
    expiry_margin_days: int = 0
    allow_inactive_source: bool = True
    auto_fulfill_requests: bool = True
    # False keeps the original matching: every pending request is compared
    # against the full received quantity. True deducts matched quantity.
    fulfillment_consumes_quantity: bool = False
    lock_timeout_ms: int = 5000
    fefo_suggestion_limit: int = 10


_FIELD_NAMES = {f.name for f in fields(MovementPolicy)}


def _clean_overrides(raw) -> dict:
    if not raw:
        return {}
    unknown = set(raw) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown stock policy keys: {sorted(unknown)}")
    return dict(raw)


def get_movement_policy(tenant_id=None) -> MovementPolicy:
    """
    Resolve the effective policy for a tenant.

    Priority:
    1) STOCK_MOVEMENT_POLICY_OVERRIDES[str(tenant_id)]
    2) STOCK_MOVEMENT_POLICY
    3) dataclass defaults
    """
    policy = MovementPolicy(**_clean_overrides(getattr(settings, "STOCK_MOVEMENT_POLICY", None)))

    if tenant_id is not None:
        per_tenant = getattr(settings, "STOCK_MOVEMENT_POLICY_OVERRIDES", None) or {}
        overrides = _clean_overrides(per_tenant.get(str(tenant_id)))
        if overrides:
            policy = replace(policy, **overrides)

    return policy
