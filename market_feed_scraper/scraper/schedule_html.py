"""HTML-table strategy for the economic schedule."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import reduce
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from market_feed_scraper import config
from market_feed_scraper.filters.record_validator import RecordValidator
from market_feed_scraper.scraper import parse_utils
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parse_utils import RecordContext

logger = logging.getLogger(__name__)

_SKIPPED_TAGS = {"script", "style"}


@dataclass(frozen=True)
class DateMemory:
    """Fold accumulator: the last genuine date seen and the records so far."""

    last_date: str = ""
    records: Tuple[ScheduleRecord, ...] = ()


def extract_node_text(node) -> str:
    """Concatenate the text under ``node``, skipping script/style and comments."""
    if isinstance(node, PreformattedString):
        return ""
    if isinstance(node, NavigableString):
        return str(node)
    if isinstance(node, Tag):
        if node.name in _SKIPPED_TAGS:
            return ""
        return "".join(extract_node_text(child) for child in node.children)
    return ""


def _is_genuine_date(value: str) -> bool:
    return bool(value) and value != config.DATE_UNSPECIFIED and not parse_utils.is_placeholder_date(value)


def parse_row(tr: Tag, context: RecordContext, last_date: str = "") -> Optional[ScheduleRecord]:
    """Build a record from the first five cells; a blank date inherits ``last_date``."""
    cells = tr.find_all("td")
    if len(cells) < 5:
        return None

    date, time, country, indicator, importance_text = (
        parse_utils.clean_text(extract_node_text(cell)) for cell in cells[:5]
    )
    if not indicator:
        return None

    return parse_utils.make_record(
        context,
        date or last_date,
        time,
        country,
        indicator,
        importance_text,
    )


def _fold_row(
    memory: DateMemory,
    tr: Tag,
    context: RecordContext,
    validator: RecordValidator,
) -> DateMemory:
    record = parse_row(tr, context, memory.last_date)
    if record is None or not validator.is_valid(record):
        return memory

    last_date = record.date if _is_genuine_date(record.date) else memory.last_date
    return DateMemory(last_date=last_date, records=memory.records + (record,))


def _data_rows(soup: BeautifulSoup) -> List[Tag]:
    rows: List[Tag] = []
    tables = soup.find_all("table")
    logger.debug(f"Found {len(tables)} tables")
    for table in tables:
        # the first row of each table is treated as its header
        rows.extend(table.find_all("tr")[1:])
    return rows


def parse_html_schedule(
    content: str,
    context: RecordContext,
    validator: RecordValidator,
) -> Optional[List[ScheduleRecord]]:
    """Parse every ``<table>`` in the document, carrying dates forward across rows.

    Returns ``None`` when no row survives validation.
    """
    soup = BeautifulSoup(content, "lxml")
    memory = reduce(
        lambda acc, tr: _fold_row(acc, tr, context, validator),
        _data_rows(soup),
        DateMemory(),
    )
    logger.info(f"HTML strategy produced {len(memory.records)} records")
    return list(memory.records) or None
