"""Parser for saved schedule and sentiment files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from market_feed_scraper import config
from market_feed_scraper.io.save_records import records_from_json
from market_feed_scraper.scraper.models import ScheduleRecord, SentimentReading

logger = logging.getLogger(__name__)


def _newest_first(directory: Path, pattern: str) -> list[Path]:
    return sorted(directory.glob(pattern), key=lambda p: p.stat().st_mtime, reverse=True)


def list_schedule_files(output_dir: Optional[Path] = None) -> list[Path]:
    """List saved schedule JSON files, newest first."""
    return _newest_first(output_dir or config.SCHEDULE_OUTPUT_DIR, "schedule_*.json")


def list_sentiment_files(output_dir: Optional[Path] = None) -> list[Path]:
    return _newest_first(output_dir or config.SENTIMENT_OUTPUT_DIR, "sentiment_*.json")


def load_schedule_json(file_path: Optional[Path] = None) -> List[ScheduleRecord]:
    """Load records from a schedule JSON file.

    Args:
        file_path: Path to the file. If None, the most recent one is used.

    Returns:
        Records with their original field values and importance.
    """
    if file_path is None:
        files = list_schedule_files()
        if not files:
            raise FileNotFoundError("No schedule JSON files found in schedule output directory")
        file_path = files[0]
        logger.info(f"Using most recent schedule file: {file_path.name}")

    if not file_path.exists():
        raise FileNotFoundError(f"Schedule file not found: {file_path}")

    records = records_from_json(file_path.read_text(encoding="utf-8"))
    logger.info(f"Parsed {len(records)} schedule records from {file_path.name}")
    return records


def load_sentiment_json(file_path: Path) -> SentimentReading:
    return SentimentReading.model_validate(json.loads(file_path.read_text(encoding="utf-8")))


def records_to_frame(records: List[ScheduleRecord]) -> pd.DataFrame:
    return pd.DataFrame([record.to_dict() for record in records])


def get_schedule_summary(df: pd.DataFrame) -> dict:
    """Get summary statistics from a schedule DataFrame.

    Args:
        df: Schedule DataFrame.

    Returns:
        Dictionary with summary statistics.
    """
    summary = {
        "total_entries": len(df),
        "dates": {},
        "importance_distribution": {},
        "countries": set(),
    }

    if "date" in df.columns:
        summary["dates"] = df["date"].value_counts().to_dict()

    if "importance" in df.columns:
        summary["importance_distribution"] = df["importance"].value_counts().to_dict()

    if "country" in df.columns:
        summary["countries"] = set(df["country"].dropna().unique())

    return summary
