"""JSON and CSV output helpers for schedule records and sentiment readings."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from market_feed_scraper import config
from market_feed_scraper.io import dedupe
from market_feed_scraper.scraper.models import ScheduleRecord, SentimentReading

SCHEDULE_COLUMNS = [
    "date",
    "time",
    "country",
    "indicator",
    "importance",
    "sourceLabel",
    "sourceUrl",
    "capturedAt",
    "language",
    "category",
]


def records_to_json(records: Iterable[ScheduleRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2)


def records_from_json(payload: str) -> List[ScheduleRecord]:
    return [ScheduleRecord.model_validate(item) for item in json.loads(payload)]


def prepare_rows_for_csv(records: Iterable[ScheduleRecord]) -> List[dict]:
    return [record.to_dict() for record in dedupe.dedupe_records(records)]


def _schedule_path(output_dir: Optional[Path], as_of_date: date, suffix: str) -> Path:
    output_dir = output_dir or config.SCHEDULE_OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"schedule_{as_of_date.strftime('%Y%m%d')}.{suffix}"


def save_schedule_json(
    records: Iterable[ScheduleRecord],
    as_of_date: date,
    output_dir: Optional[Path] = None,
) -> Path:
    """Persist records as a JSON array using the external field names."""
    output_path = _schedule_path(output_dir, as_of_date, "json")
    output_path.write_text(records_to_json(records), encoding="utf-8")
    return output_path


def save_schedule_csv(
    records: Iterable[ScheduleRecord],
    as_of_date: date,
    output_dir: Optional[Path] = None,
) -> Path:
    """Save schedule records to a CSV file within the output directory."""
    prepared_rows = prepare_rows_for_csv(records)
    if not prepared_rows:
        raise RuntimeError("No rows to save.")

    df = pd.DataFrame(prepared_rows, columns=SCHEDULE_COLUMNS)
    df.sort_values(by=["date", "time"], inplace=True, ignore_index=True, kind="stable")

    output_path = _schedule_path(output_dir, as_of_date, "csv")
    df.to_csv(output_path, index=False, encoding="utf-8")
    return output_path


def save_sentiment_json(
    reading: SentimentReading,
    as_of_date: date,
    output_dir: Optional[Path] = None,
) -> Path:
    output_dir = output_dir or config.SENTIMENT_OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"sentiment_{as_of_date.strftime('%Y%m%d')}.json"
    output_path.write_text(json.dumps(reading.to_dict()), encoding="utf-8")
    return output_path
