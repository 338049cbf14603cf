"""Text-pattern and line-based fallback strategies for the economic schedule."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from market_feed_scraper import config
from market_feed_scraper.filters.record_validator import RecordValidator
from market_feed_scraper.scraper import parse_utils
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parse_utils import RecordContext
from market_feed_scraper.scraper.schedule_markdown import TABLE_ROW_PATTERN

logger = logging.getLogger(__name__)

_GLYPH = re.escape(config.IMPORTANCE_GLYPH)

# "07/28 23:30 미국 7월 댈러스연은 제조업지수 ★"
FREE_TEXT_PATTERN = re.compile(
    r"(\d{2}/\d{2})\s+(\d{2}:\d{2})\s+"
    r"([가-힣]+|" + "|".join(map(re.escape, config.KNOWN_COUNTRIES)) + r")\s+"
    r"([^" + _GLYPH + r"\n]+)\s*(" + _GLYPH + r"+)"
)


def _accept(records: Iterable[Optional[ScheduleRecord]], validator: RecordValidator) -> List[ScheduleRecord]:
    return [record for record in records if record and validator.is_valid(record)]


def _pipe_row(cells, context: RecordContext) -> Optional[ScheduleRecord]:
    date, time, country, indicator, importance_text = (cell.strip() for cell in cells)
    if not parse_utils.clean_text(indicator):
        return None
    if parse_utils.is_header_or_separator(date):
        return None
    if not parse_utils.is_accepted_date(parse_utils.decode_entities(date)):
        return None
    return parse_utils.make_record(context, date, time, country, indicator, importance_text)


def _free_text_row(match: re.Match, context: RecordContext) -> ScheduleRecord:
    date, time, country, indicator, stars = (group.strip() for group in match.groups())
    return parse_utils.make_record(context, date, time, country, indicator, stars)


def parse_text_schedule(
    content: str,
    context: RecordContext,
    validator: RecordValidator,
) -> Optional[List[ScheduleRecord]]:
    """Regex passes over the raw text: pipe rows first, then free text."""
    records = _accept(
        (_pipe_row(match.groups(), context) for match in TABLE_ROW_PATTERN.finditer(content)),
        validator,
    )
    if records:
        logger.info(f"Text strategy (pipe pattern) produced {len(records)} records")
        return records

    logger.info("Pipe pattern found nothing, trying free-text pattern")
    records = _accept(
        (_free_text_row(match, context) for match in FREE_TEXT_PATTERN.finditer(content)),
        validator,
    )
    logger.info(f"Text strategy (free-text pattern) produced {len(records)} records")
    return records or None


def _line_row(line: str, context: RecordContext) -> Optional[ScheduleRecord]:
    if "|" not in line or len(line.split("|")) < 6:
        return None

    cells = [cell.strip() for cell in line.split("|") if cell.strip()]
    if len(cells) < 5:
        return None

    date, time, country, indicator, importance_text = cells[:5]
    if parse_utils.is_header_or_separator(date):
        return None
    if not parse_utils.DATE_PATTERN.match(date) or not parse_utils.TIME_PATTERN.match(time):
        return None
    return parse_utils.make_record(context, date, time, country, indicator, importance_text)


def parse_line_schedule(
    content: str,
    context: RecordContext,
    validator: RecordValidator,
) -> Optional[List[ScheduleRecord]]:
    """Last resort: strict ``MM/DD`` / ``HH:MM`` pipe lines only."""
    records = _accept((_line_row(line, context) for line in content.split("\n")), validator)
    logger.info(f"Line strategy produced {len(records)} records")
    return records or None
