# stock/services/clock.py

"""
UTC day/year helpers shared by the compliance gate, FEFO and sequences.
"""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.utils import timezone


def effective_timestamp(at: datetime | None = None) -> datetime:
    if at is None:
        return timezone.now()
    if timezone.is_naive(at):
        return timezone.make_aware(at, dt_timezone.utc)
    return at


def start_of_day_utc(at: datetime | None = None) -> datetime:
    at = effective_timestamp(at).astimezone(dt_timezone.utc)
    return at.replace(hour=0, minute=0, second=0, microsecond=0)


def current_year_utc(at: datetime | None = None) -> int:
    return effective_timestamp(at).astimezone(dt_timezone.utc).year
