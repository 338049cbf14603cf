"""CLI orchestrator for the market schedule and sentiment scraper."""

from __future__ import annotations

import argparse
import json
import logging
from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional

from market_feed_scraper import config
from market_feed_scraper.errors import PipelineError
from market_feed_scraper.filters import classifier
from market_feed_scraper.io import dedupe, parse_output, save_records
from market_feed_scraper.scraper import document_fetcher, parser_chain
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.sentiment import racer

logger = logging.getLogger(__name__)


def _parse_day(value: Optional[str]) -> date:
    if not value:
        return classifier.today_in_display_tz()
    return datetime.strptime(value, "%Y-%m-%d").date()


def load_schedule(day: date, input_path: Optional[Path] = None) -> List[ScheduleRecord]:
    """Parse a local document when given, otherwise fetch the day's page."""
    if input_path is not None:
        content = input_path.read_text(encoding="utf-8")
        _, source_url = document_fetcher.schedule_urls(day)
        records = parser_chain.parse_schedule(content, source_url)
    else:
        content, url = document_fetcher.fetch_schedule_document(day)
        records = parser_chain.parse_schedule(content, url)
    return dedupe.dedupe_records(records)


def run_schedule_mode(day: date, input_path: Optional[Path] = None) -> None:
    records = load_schedule(day, input_path)
    if not records:
        raise SystemExit("No schedule records extracted.")

    views = classifier.classify_records(records, today=day)
    json_path = save_records.save_schedule_json(records, day)
    csv_path = save_records.save_schedule_csv(records, day)

    print(classifier.schedule_title(day))
    for record in views.tomorrow or records:
        print(f"  {record.date} {record.time} [{record.importance.value}] {record.country} - {record.indicator}")

    print(f"\nSaved {len(records)} records to {json_path} and {csv_path}")
    print("Importance distribution:", Counter(r.importance.value for r in records))
    print(
        f"Today: {len(views.today)}  Tomorrow: {len(views.tomorrow)}  "
        f"High: {len(views.high_importance)}  Domestic: {len(views.domestic)}  "
        f"Foreign: {len(views.foreign)}"
    )


def run_sentiment_mode(day: date, overall_timeout_ms: Optional[int]) -> None:
    reading = racer.acquire_sync(overall_timeout_ms=overall_timeout_ms)
    output_path = save_records.save_sentiment_json(reading, day)
    print(json.dumps(reading.to_dict()))
    logger.info(f"Saved sentiment reading to {output_path}")


def run_parse_output_mode() -> None:
    """Summarise saved schedule and sentiment files."""
    print("=" * 60)
    print("Parsing Output Files")
    print("=" * 60)

    schedule_files = parse_output.list_schedule_files()
    print(f"\n📅 Schedule Files: {len(schedule_files)}")
    for i, file_path in enumerate(schedule_files[:5], 1):
        print(f"  {i}. {file_path.name}")
        try:
            records = parse_output.load_schedule_json(file_path)
        except (ValueError, OSError) as e:
            print(f"     Error parsing: {e}")
            continue
        summary = parse_output.get_schedule_summary(parse_output.records_to_frame(records))
        print(f"     Entries: {summary['total_entries']}")
        if summary["importance_distribution"]:
            print(f"     Importance: {summary['importance_distribution']}")

    sentiment_files = parse_output.list_sentiment_files()
    print(f"\n📊 Sentiment Files: {len(sentiment_files)}")
    for i, file_path in enumerate(sentiment_files[:5], 1):
        try:
            reading = parse_output.load_sentiment_json(file_path)
        except (ValueError, OSError) as e:
            print(f"  {i}. {file_path.name}: error {e}")
            continue
        print(f"  {i}. {file_path.name}: {reading.value}")


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--mode",
        choices=("schedule", "sentiment", "parse"),
        default="schedule",
        help="Scraper mode to run.",
    )
    parser.add_argument("--date", help="Schedule date as YYYY-MM-DD (default: today in display timezone).")
    parser.add_argument("--input", type=Path, help="Parse a local schedule document instead of fetching.")
    parser.add_argument(
        "--overall-timeout-ms",
        type=int,
        default=None,
        help="Upper bound for the whole sentiment acquisition.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    day = _parse_day(args.date)
    logger.info(f"Output directory: {config.OUTPUT_DIR}")

    if args.mode == "schedule":
        try:
            run_schedule_mode(day, args.input)
        except PipelineError as e:
            raise SystemExit(f"Schedule fetch failed: {e}")
        return

    if args.mode == "sentiment":
        run_sentiment_mode(day, args.overall_timeout_ms)
        return

    run_parse_output_mode()


if __name__ == "__main__":
    main()
