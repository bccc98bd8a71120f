from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional


def as_aware(dt: Optional[datetime], zone: tzinfo) -> Optional[datetime]:
    """Attach ``zone`` to naive timestamps; aware ones are returned unchanged."""
    if dt is None:
        return None
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=zone)
    return dt


def local_date(dt: Optional[datetime], zone: tzinfo) -> Optional[date]:
    """Calendar date of ``dt`` as seen in ``zone``."""
    if dt is None:
        return None
    return as_aware(dt, zone).astimezone(zone).date()
