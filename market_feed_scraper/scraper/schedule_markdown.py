"""Markdown-table strategy for the economic schedule."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from market_feed_scraper import config
from market_feed_scraper.filters.record_validator import RecordValidator
from market_feed_scraper.scraper import parse_utils
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parse_utils import RecordContext

logger = logging.getLogger(__name__)

# Five pipe-delimited cells on one line
TABLE_ROW_PATTERN = re.compile(r"\|([^|\n]+)\|([^|\n]+)\|([^|\n]+)\|([^|\n]+)\|([^|\n]+)\|")


def _section_pattern(heading: str) -> re.Pattern:
    return re.compile(rf"##\s*{re.escape(heading)}([\s\S]*?)(?=##|\Z)")


def find_section(content: str, heading: str = config.SCHEDULE_SECTION_HEADING) -> Optional[str]:
    """Return the body of the ``## <heading>`` section, if any."""
    match = _section_pattern(heading).search(content)
    return match.group(1) if match else None


def _split_row(row: str) -> List[str]:
    if "|" in row:
        return row.strip().strip("|").split("|")
    if "/" in row:
        return row.split("/")
    if "-" in row:
        return row.split("-")
    return row.split()


def _cell(cells: Sequence[str], index: int) -> str:
    return cells[index] if index < len(cells) else ""


def _build_row(
    cells: Sequence[str],
    context: RecordContext,
    *,
    check_time: bool,
) -> Optional[ScheduleRecord]:
    date, time, country, indicator, importance_text = (_cell(cells, i) for i in range(5))

    if not indicator:
        return None
    if parse_utils.is_header_or_separator(date):
        return None
    if not parse_utils.is_accepted_date(date):
        logger.debug(f"Date format mismatch: {date!r}")
        return None
    if check_time and time and not parse_utils.TIME_PATTERN.match(time):
        logger.debug(f"Time format mismatch: {time!r}")
        return None

    return parse_utils.make_record(context, date, time, country, indicator, importance_text)


def _rows_from_section(section: str) -> List[List[str]]:
    lines = section.split("\n")
    header_index = next((i for i, line in enumerate(lines) if "---" in line), -1)
    body = lines[header_index + 1:] if header_index != -1 else lines[1:]

    rows = []
    for line in body:
        if not line.strip():
            continue
        cells = [parse_utils.extract_allowed_text(cell) for cell in _split_row(line)]
        if len(cells) >= 2:
            rows.append(cells)
    return rows


def _rows_from_document(content: str) -> List[List[str]]:
    return [
        [parse_utils.extract_allowed_text(cell) for cell in match.groups()]
        for match in TABLE_ROW_PATTERN.finditer(content)
    ]


def parse_markdown_schedule(
    content: str,
    context: RecordContext,
    validator: RecordValidator,
    heading: str = config.SCHEDULE_SECTION_HEADING,
) -> Optional[List[ScheduleRecord]]:
    """Parse the pipe table under the schedule heading, or any pipe rows.

    Returns ``None`` when no row survives validation.
    """
    section = find_section(content, heading)
    if section is None:
        logger.info("Schedule section not found, scanning whole document for table rows")
        candidates = (
            _build_row(cells, context, check_time=False)
            for cells in _rows_from_document(content)
        )
    else:
        logger.info(f"Schedule section found: {len(section)} characters")
        candidates = (
            _build_row(cells, context, check_time=True)
            for cells in _rows_from_section(section)
        )

    records = [record for record in candidates if record and validator.is_valid(record)]
    logger.info(f"Markdown strategy produced {len(records)} records")
    return records or None
