"""
Market Feed Scraper

Resilient acquisition of market data from unreliable public sources:

1. A Fear & Greed sentiment reading raced across several sources in
   priority order, falling back to a neutral 50.
2. Economic schedule records extracted from a daily report whose format
   drifts between Markdown tables, HTML tables and loose text.

Usage:
    from market_feed_scraper import parse_schedule, dedupe_records, classify_records

    records = dedupe_records(parse_schedule(document_text, source_url))
    views = classify_records(records)
    print(views.tomorrow)

    from market_feed_scraper import acquire_sync
    print(acquire_sync().to_dict())   # {"indexValue": 63}

CLI Usage:
    python -m market_feed_scraper.main --mode schedule --date 2025-07-28
"""

__version__ = "0.1.0"

from market_feed_scraper.filters.classifier import ScheduleViews, classify_records, filter_records
from market_feed_scraper.filters.record_validator import RecordValidator, validate_record
from market_feed_scraper.io.dedupe import dedupe_records
from market_feed_scraper.scraper.models import (
    Importance,
    ScheduleRecord,
    SentimentReading,
    SourceDescriptor,
)
from market_feed_scraper.scraper.parser_chain import parse_schedule
from market_feed_scraper.sentiment.racer import acquire, acquire_sync

__all__ = [
    "Importance",
    "ScheduleRecord",
    "SentimentReading",
    "SourceDescriptor",
    "RecordValidator",
    "validate_record",
    "parse_schedule",
    "dedupe_records",
    "ScheduleViews",
    "classify_records",
    "filter_records",
    "acquire",
    "acquire_sync",
]
