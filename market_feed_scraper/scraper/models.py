"""Shared data models for the market feed scraper."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field


class Importance(str, Enum):
    """Three-level importance derived from the star count of a row."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ScheduleRecord(BaseModel):
    """Normalised representation of an economic schedule entry.

    Missing cells carry sentinel text, never ``None``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: str
    time: str
    country: str
    indicator: str
    importance: Importance
    source_label: str = Field(alias="sourceLabel")
    source_url: str = Field(alias="sourceUrl")
    captured_at: datetime = Field(alias="capturedAt")
    language: str
    category: str

    def to_dict(self) -> dict:
        """Convert to the JSON-ready external shape."""
        return self.model_dump(mode="json", by_alias=True)


class SentimentReading(BaseModel):
    """A single market sentiment value in ``[0, 100]``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: int = Field(alias="indexValue", ge=0, le=100)

    @classmethod
    def clamped(cls, raw: float) -> "SentimentReading":
        """Round half-up and clamp a raw score into range."""
        bounded = max(0.0, min(100.0, float(raw)))
        return cls(value=int(math.floor(bounded + 0.5)))

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


@dataclass(slots=True)
class SourceDescriptor:
    """One sentiment source, tried in descending ``priority`` order."""

    name: str
    priority: int
    fetch: Callable[[], Any]
    timeout_ms: int
