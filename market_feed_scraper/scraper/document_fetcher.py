"""HTTP retrieval of the daily schedule document."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

import requests

from market_feed_scraper import config
from market_feed_scraper.errors import SourceUnavailable
from market_feed_scraper.filters.classifier import today_in_display_tz
from market_feed_scraper.io.dedupe import dedupe_records
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parser_chain import parse_schedule

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": config.REQUEST_USER_AGENT,
    "Accept": "text/markdown,text/html,application/xhtml+xml,text/plain;q=0.9,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8",
}


def schedule_urls(day: date) -> Tuple[str, str]:
    """Return the markdown URL and its rendered-HTML fallback for ``day``."""
    page_url = f"{config.SCHEDULE_BASE_URL}/{day:%Y-%m-%d}/{config.SCHEDULE_PAGE_PATH}"
    return f"{page_url}.md", page_url


def fetch_schedule_document(
    day: Optional[date] = None,
    timeout: float = config.REQUEST_TIMEOUT,
) -> Tuple[str, str]:
    """Fetch the schedule page, markdown first. Returns ``(text, url)``."""
    day = day or today_in_display_tz()
    errors: List[str] = []

    for url in schedule_urls(day):
        try:
            response = requests.get(url, headers=DEFAULT_HEADERS, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            errors.append(f"{url}: {e}")
            continue

        if not response.text.strip():
            logger.warning(f"Empty document at {url}")
            errors.append(f"{url}: empty body")
            continue

        logger.info(f"Fetched {len(response.text)} characters from {url}")
        return response.text, url

    raise SourceUnavailable("; ".join(errors), source=config.SCHEDULE_BASE_URL)


def collect_schedule(day: Optional[date] = None) -> List[ScheduleRecord]:
    """Fetch, parse and deduplicate the schedule for ``day``."""
    content, url = fetch_schedule_document(day)
    return dedupe_records(parse_schedule(content, url))
