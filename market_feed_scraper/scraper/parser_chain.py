"""Cascading schedule parser: the first strategy with a validated record wins."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from market_feed_scraper.errors import ParseStrategyMiss
from market_feed_scraper.filters.record_validator import RecordValidator
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parse_utils import RecordContext
from market_feed_scraper.scraper.schedule_html import parse_html_schedule
from market_feed_scraper.scraper.schedule_markdown import parse_markdown_schedule
from market_feed_scraper.scraper.schedule_text import parse_line_schedule, parse_text_schedule

logger = logging.getLogger(__name__)

Strategy = Callable[[str, RecordContext, RecordValidator], Optional[List[ScheduleRecord]]]

STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("markdown", parse_markdown_schedule),
    ("html", parse_html_schedule),
    ("text", parse_text_schedule),
    ("line", parse_line_schedule),
)


def run_strategy(
    name: str,
    strategy: Strategy,
    content: str,
    context: RecordContext,
    validator: RecordValidator,
) -> Optional[List[ScheduleRecord]]:
    """Run one strategy; any failure inside it counts as a miss."""
    try:
        records = strategy(content, context, validator)
        if not records:
            raise ParseStrategyMiss(f"{name} strategy found no rows", source=name)
    except ParseStrategyMiss as e:
        logger.info(str(e))
        return None
    except Exception as e:
        logger.error(f"{name} strategy failed: {e}")
        return None
    return records


def parse_schedule(
    content: str,
    base_url: str,
    *,
    captured_at: Optional[datetime] = None,
    default_country: Optional[str] = None,
    validator: Optional[RecordValidator] = None,
    strategies: Sequence[Tuple[str, Strategy]] = STRATEGIES,
) -> List[ScheduleRecord]:
    """Extract validated schedule records from a document of unknown format.

    Strategies are tried in order and the first one producing at least one
    validated record is returned as-is; results are never merged across
    strategies. An empty list means every strategy missed.
    """
    context = RecordContext.for_url(base_url, captured_at=captured_at, default_country=default_country)
    validator = validator or RecordValidator()
    logger.info(f"Parsing schedule document ({len(content)} characters) from {base_url}")

    for name, strategy in strategies:
        records = run_strategy(name, strategy, content, context, validator)
        if records:
            logger.info(f"Extracted {len(records)} records with the {name} strategy")
            return records

    logger.warning("All schedule strategies missed, returning no records")
    return []
