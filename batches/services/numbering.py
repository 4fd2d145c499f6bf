# batches/services/numbering.py

"""
LOT NUMBER ALLOCATION

Batches received without a supplier lot number get a tenant-scoped one
from the shared sequence table (reserved key LOT):

    LOT-{year}{nnn}   e.g. LOT-2025007

The year comes from the allocation timestamp (UTC).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from stock.models import TenantSequence
from stock.services.clock import current_year_utc
from stock.services.sequence import next_sequence


def allocate_lot_number(tenant_id, at: Optional[datetime] = None) -> str:
    sequence = next_sequence(
        tenant_id=tenant_id,
        year=current_year_utc(at),
        key=TenantSequence.Key.LOT,
    )
    return sequence.number
