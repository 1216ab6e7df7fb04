# Overview: UTC clock and ISO-8601 helpers shared by models, procedures and DTOs.

"""
Timestamps in OrderHub are stored UTC-naive (SQLite has no zone support)
and leave the process as ISO-8601 strings with a trailing 'Z'.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Audit clock: current UTC time without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def stamp(dt: Optional[datetime] = None) -> str:
    """Compact sortable stamp used in order numbers, e.g. 20261019143005."""
    return f"{dt or utcnow():%Y%m%d%H%M%S}"


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Read a wire timestamp back into the stored form.

    Blank input yields None. A zone suffix ('Z' or an offset) is folded
    into UTC; a value without one is taken as UTC already.
    """
    text = (value or "").strip()
    if not text:
        return None
    parsed = datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    # Microseconds are kept: audit stamps written in the same second must still order
    if dt is None:
        return None
    aware = dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)
    return aware.isoformat().replace("+00:00", "Z")
