"""Shared column helpers for the SQLModel tables."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_column() -> Column:
    """Timezone-aware timestamp column. Every table needs its own Column object."""
    return Column(DateTime(timezone=True), nullable=False)
