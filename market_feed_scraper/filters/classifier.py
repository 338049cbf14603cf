"""Date, importance and region views over schedule records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, NamedTuple, Optional, Sequence

import pytz

from market_feed_scraper import config
from market_feed_scraper.scraper.models import Importance, ScheduleRecord


@dataclass
class RegionBucket:
    name: str
    keywords: List[str]

    def matches(self, country: str) -> bool:
        country_lower = (country or "").lower()
        return any(keyword.lower() in country_lower for keyword in self.keywords)


DOMESTIC_BUCKET = RegionBucket("domestic", list(config.DOMESTIC_REGION_TOKENS))
FOREIGN_BUCKET = RegionBucket("foreign", list(config.FOREIGN_REGION_TOKENS))


class ScheduleViews(NamedTuple):
    """Non-exclusive views; a record may appear in several."""

    today: List[ScheduleRecord]
    tomorrow: List[ScheduleRecord]
    high_importance: List[ScheduleRecord]
    domestic: List[ScheduleRecord]
    foreign: List[ScheduleRecord]


def today_in_display_tz() -> date:
    """Current calendar date in the display timezone."""
    return datetime.now(pytz.timezone(config.TZ_DISPLAY)).date()


def month_day(day: date) -> str:
    return f"{day:%m/%d}"


def classify_records(
    records: Sequence[ScheduleRecord],
    today: Optional[date] = None,
    domestic: RegionBucket = DOMESTIC_BUCKET,
    foreign: RegionBucket = FOREIGN_BUCKET,
) -> ScheduleViews:
    """Partition records by day, importance and region. Nothing is cached."""
    today = today or today_in_display_tz()
    today_str = month_day(today)
    tomorrow_str = month_day(today + timedelta(days=1))

    return ScheduleViews(
        today=[r for r in records if today_str in r.date],
        tomorrow=[r for r in records if tomorrow_str in r.date],
        high_importance=[r for r in records if r.importance == Importance.HIGH],
        domestic=[r for r in records if domestic.matches(r.country)],
        foreign=[r for r in records if foreign.matches(r.country)],
    )


def filter_records(
    records: Iterable[ScheduleRecord],
    importance: Optional[Importance] = None,
    country: Optional[str] = None,
    day: Optional[str] = None,
    today: Optional[date] = None,
) -> List[ScheduleRecord]:
    """Narrow records by importance, country substring and ``today``/``tomorrow``."""
    filtered = list(records)

    if importance is not None:
        filtered = [r for r in filtered if r.importance == Importance(importance)]

    if country:
        filtered = [r for r in filtered if country in r.country]

    if day in ("today", "tomorrow"):
        today = today or today_in_display_tz()
        target = today if day == "today" else today + timedelta(days=1)
        filtered = [r for r in filtered if month_day(target) in r.date]

    return filtered


def schedule_title(today: Optional[date] = None) -> str:
    """Heading for the next-day schedule panel."""
    tomorrow = (today or today_in_display_tz()) + timedelta(days=1)
    return f"📅 다음날 주요 일정 - ({month_day(tomorrow)}) 경제지표"
