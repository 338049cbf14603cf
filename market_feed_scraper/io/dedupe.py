"""Utilities for deduplicating schedule rows."""

from __future__ import annotations

from typing import Iterable, List

from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parse_utils import clean_text


def record_key(record: ScheduleRecord) -> str:
    """Normalised ``date|time|country|indicator`` identity of a record."""
    parts = (record.date, record.time, record.country, record.indicator)
    return "|".join(clean_text(part).casefold() for part in parts)


def dedupe_records(records: Iterable[ScheduleRecord]) -> List[ScheduleRecord]:
    """Drop later records sharing an identity key; order is preserved."""
    seen: set[str] = set()
    unique_records: List[ScheduleRecord] = []
    for record in records:
        key = record_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique_records.append(record)
    return unique_records

