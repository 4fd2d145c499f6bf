# stock/services/sequence.py

"""
TENANT SEQUENCE GENERATOR

Human-readable, tenant-scoped, year-scoped document numbers.

Guarantees:
- One durable counter row per (tenant_id, year, key)
- First issue for a triple returns 1
- Row-locked increment: concurrent callers never receive the same value
- Never cached in memory; an aborted transaction may leave a gap, never a duplicate

Formats:
- "{key}{year}-{value}"     e.g. MS2025-42
- LOT: "LOT-{year}{value:03d}" e.g. LOT-2025007
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import F

from stock.models import TenantSequence
from stock.services.exceptions import ValidationError


@dataclass(frozen=True)
class SequenceNumber:
    value: int
    number: str


def format_sequence_number(*, key: str, year: int, value: int) -> str:
    if key == TenantSequence.Key.LOT:
        return f"LOT-{year}{value:03d}"
    return f"{key}{year}-{value}"


def _normalize_key(key) -> str:
    normalized = str(key or "").strip().upper()
    if normalized not in TenantSequence.Key.values:
        raise ValidationError(
            f"Unknown sequence key: {key!r}", meta={"field": "key", "allowed": TenantSequence.Key.values}
        )
    return normalized


def _lock_sequence(lookup: dict) -> Optional[TenantSequence]:
    return TenantSequence.objects.select_for_update().filter(**lookup).first()


@transaction.atomic
def next_sequence(*, tenant_id, year: int, key: str = TenantSequence.Key.MOVEMENT) -> SequenceNumber:
    key = _normalize_key(key)
    year = int(year)

    lookup = {"tenant_id": tenant_id, "year": year, "key": key}

    row = _lock_sequence(lookup)

    if row is None:
        try:
            with transaction.atomic():
                row = TenantSequence.objects.create(**lookup, current_value=1)
            return SequenceNumber(
                value=1,
                number=format_sequence_number(key=key, year=year, value=1),
            )
        except IntegrityError:
            # Lost the creation race; the winner's row exists now.
            row = _lock_sequence(lookup)
            if row is None:
                raise

    TenantSequence.objects.filter(pk=row.pk).update(current_value=F("current_value") + 1)
    row.refresh_from_db(fields=["current_value"])

    value = int(row.current_value)
    return SequenceNumber(value=value, number=format_sequence_number(key=key, year=year, value=value))
