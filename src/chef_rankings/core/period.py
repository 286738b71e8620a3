"""Snapshot month helpers."""

from __future__ import annotations

import re
from datetime import UTC, datetime

from chef_rankings.core.errors import ValidationError

MONTH_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}")


def validate_month(month: str | None) -> str:
    """Check a snapshot month key.

    Months are zero-padded ``YYYY-MM`` strings, so plain string comparison
    orders them chronologically.

    Raises:
        ValidationError: If the value does not match ``YYYY-MM``.
    """
    if not month or not MONTH_PATTERN.fullmatch(month):
        raise ValidationError("month", f"Expected YYYY-MM, got {month!r}")
    return month


def current_month(now: datetime | None = None) -> str:
    """Return the ``YYYY-MM`` key for ``now`` (defaults to the current UTC time)."""
    now = now or datetime.now(UTC)
    return f"{now.year:04d}-{now.month:02d}"
