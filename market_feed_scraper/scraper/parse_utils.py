"""Parsing helpers shared by the schedule extraction strategies."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from market_feed_scraper import config
from market_feed_scraper.scraper.models import Importance, ScheduleRecord

DATE_PATTERN = re.compile(r"^\d{2}/\d{2}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

# Hangul, digits, whitespace, basic punctuation and the importance glyph
_ALLOWED_CHARS = re.compile(
    r"[가-힣0-9\s.,!?:;()\[\]\-+*/%=&|~^$@#" + re.escape(config.IMPORTANCE_GLYPH) + r"]+"
)
_SEPARATOR_RUN = re.compile(r"-{3,}")
_TAG = re.compile(r"<[^>]+>")


def clean_text(value: Optional[str]) -> str:
    """Normalize whitespace and strip strings."""
    if not value:
        return ""
    return " ".join(value.split()).strip()


def decode_entities(value: Optional[str]) -> str:
    """Decode HTML entities (``&amp;``, ``&nbsp;`` ...) and tidy whitespace."""
    return clean_text(html.unescape(value or ""))


def extract_allowed_text(value: Optional[str]) -> str:
    """Keep only the characters a schedule cell can legitimately hold.

    Falls back to the decoded text when nothing matches.
    """
    text = _TAG.sub("", decode_entities(value))
    matches = _ALLOWED_CHARS.findall(text)
    if not matches:
        return text
    return clean_text("".join(matches))


def count_glyphs(text: Optional[str], glyph: str = config.IMPORTANCE_GLYPH) -> int:
    return (text or "").count(glyph)


def parse_importance(text: Optional[str]) -> Importance:
    """Map a star cell to an importance level by glyph count."""
    stars = count_glyphs((text or "").strip())
    if stars >= 3:
        return Importance.HIGH
    if stars == 2:
        return Importance.MEDIUM
    return Importance.LOW


def is_placeholder_date(value: str) -> bool:
    return any(token in value for token in config.DATE_PLACEHOLDER_TOKENS)


def is_accepted_date(value: str) -> bool:
    """True for ``MM/DD``, a placeholder token, the sentinel, or blank."""
    value = value.strip()
    return (
        not value
        or bool(DATE_PATTERN.match(value))
        or is_placeholder_date(value)
        or value == config.DATE_UNSPECIFIED
    )


def is_header_or_separator(first_cell: str) -> bool:
    """Detect table header rows and ``| --- |`` separator rows."""
    if _SEPARATOR_RUN.search(first_cell):
        return True
    if first_cell.strip() == config.DATE_UNSPECIFIED or is_placeholder_date(first_cell):
        return False
    return any(keyword in first_cell for keyword in config.HEADER_KEYWORDS)


def to_source_url(url: str) -> str:
    """Drop the markdown extension so links point at the rendered page."""
    return re.sub(r"\.md(?=$|[?#])", "", url, count=1)


@dataclass(frozen=True)
class RecordContext:
    """Provenance stamped on every record produced by one parse call."""

    source_url: str
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source_label: str = config.SCHEDULE_SOURCE_LABEL
    language: str = config.SCHEDULE_LANGUAGE
    category: str = config.SCHEDULE_CATEGORY
    default_country: str = config.DEFAULT_COUNTRY

    @classmethod
    def for_url(
        cls,
        base_url: str,
        captured_at: Optional[datetime] = None,
        default_country: Optional[str] = None,
    ) -> "RecordContext":
        kwargs = {"source_url": to_source_url(base_url)}
        if captured_at is not None:
            kwargs["captured_at"] = captured_at
        if default_country:
            kwargs["default_country"] = default_country
        return cls(**kwargs)


def make_record(
    context: RecordContext,
    date: str,
    time: str,
    country: str,
    indicator: str,
    importance_text: str,
) -> ScheduleRecord:
    """Build a record, replacing blank cells with sentinel defaults."""
    date = decode_entities(date)
    time = decode_entities(time)
    country = decode_entities(country)
    return ScheduleRecord(
        date=date or config.DATE_UNSPECIFIED,
        time=time or config.TIME_UNSPECIFIED,
        country=country or context.default_country,
        indicator=decode_entities(indicator),
        importance=parse_importance(importance_text),
        source_label=context.source_label,
        source_url=context.source_url,
        captured_at=context.captured_at,
        language=context.language,
        category=context.category,
    )
