"""Concrete Fear & Greed sources used by the sentiment racer."""

from __future__ import annotations

import asyncio
import logging
import math
import random
import time
from typing import Any, Dict, List, Optional

import requests

from market_feed_scraper import config
from market_feed_scraper.errors import MalformedPayload, SourceUnavailable
from market_feed_scraper.scraper.models import SentimentReading, SourceDescriptor

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": config.REQUEST_USER_AGENT,
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

_DAY_MS = 86_400_000
_HOUR_MS = 3_600_000


def get_json(url: str, name: str, headers: Optional[Dict[str, str]] = None, timeout: float = config.REQUEST_TIMEOUT) -> Any:
    """GET ``url`` and decode JSON, mapping transport failures to ``SourceUnavailable``."""
    try:
        response = requests.get(url, headers=headers or DEFAULT_HEADERS, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        raise SourceUnavailable(f"{name} request failed: {e}", source=name) from e
    except ValueError as e:
        raise MalformedPayload(f"{name} returned invalid JSON", source=name) from e


def _dig(data: Any, *path: Any) -> Any:
    for key in path:
        try:
            data = data[key]
        except (KeyError, IndexError, TypeError):
            return None
    return data


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


# ---------------------------------------------------------------------------
# Payload parsers
# ---------------------------------------------------------------------------

def parse_cnn_payload(data: Any) -> SentimentReading:
    score = _dig(data, "fear_and_greed", "score")
    if not score:
        score = _dig(data, "fear_and_greed_historical", "data", 0, "y")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise MalformedPayload("Invalid CNN data structure", source="CNN DataViz")
    return SentimentReading.clamped(score)


def parse_alternative_payload(data: Any) -> SentimentReading:
    value = _as_number(_dig(data, "data", 0, "value"))
    if value is None:
        raise MalformedPayload("Invalid Alternative API data", source="Alternative API")
    return SentimentReading.clamped(value)


def vix_to_fear_greed(vix: float) -> float:
    """Invert VIX into a 0-100 greed score; a higher VIX means more fear."""
    if vix <= 12:
        return 85
    if vix <= 20:
        return 70 - (vix - 12) * 2.5
    if vix <= 30:
        return 50 - (vix - 20) * 2
    if vix <= 40:
        return 30 - (vix - 30) * 2
    return 15


def parse_vix_payload(data: Any) -> SentimentReading:
    vix = _dig(data, "quoteResponse", "result", 0, "regularMarketPrice")
    if isinstance(vix, bool) or not isinstance(vix, (int, float)):
        raise MalformedPayload("Invalid VIX data", source="Yahoo Finance VIX")
    score = vix_to_fear_greed(float(vix))
    logger.info(f"VIX {vix} -> Fear & Greed {score:.1f}")
    return SentimentReading.clamped(score)


def simulated_fear_greed(now_ms: Optional[float] = None, rng: Optional[random.Random] = None) -> SentimentReading:
    """Time-based stand-in reading: daily and weekly cycles plus noise around 50."""
    now_ms = time.time() * 1000 if now_ms is None else now_ms
    rng = rng or random.Random()
    daily_cycle = math.sin((now_ms / _DAY_MS) * 2 * math.pi) * 15
    weekly_cycle = math.sin((now_ms / (_DAY_MS * 7)) * 2 * math.pi) * 10
    market_event = math.sin(now_ms / _HOUR_MS) * (rng.random() * 10)
    return SentimentReading.clamped(config.NEUTRAL_SENTIMENT + daily_cycle + weekly_cycle + market_event)


# ---------------------------------------------------------------------------
# Async fetchers
# ---------------------------------------------------------------------------

async def fetch_cnn_fear_greed() -> SentimentReading:
    headers = {**DEFAULT_HEADERS, "Referer": "https://www.cnn.com/"}
    data = await asyncio.to_thread(
        get_json, config.CNN_FEAR_GREED_URL, "CNN DataViz", headers, config.CNN_TIMEOUT_MS / 1000
    )
    return parse_cnn_payload(data)


async def fetch_alternative_fear_greed() -> SentimentReading:
    data = await asyncio.to_thread(
        get_json, config.ALTERNATIVE_FNG_URL, "Alternative API", None, config.ALTERNATIVE_TIMEOUT_MS / 1000
    )
    return parse_alternative_payload(data)


async def fetch_vix_fear_greed() -> SentimentReading:
    headers = {"User-Agent": config.REQUEST_USER_AGENT}
    data = await asyncio.to_thread(
        get_json, config.YAHOO_VIX_URL, "Yahoo Finance VIX", headers, config.VIX_TIMEOUT_MS / 1000
    )
    return parse_vix_payload(data)


async def fetch_simulated_fear_greed() -> SentimentReading:
    return simulated_fear_greed()


def default_sources() -> List[SourceDescriptor]:
    """Production source list, highest priority first."""
    return [
        SourceDescriptor("CNN DataViz", 4, fetch_cnn_fear_greed, config.CNN_TIMEOUT_MS),
        SourceDescriptor("Alternative API", 3, fetch_alternative_fear_greed, config.ALTERNATIVE_TIMEOUT_MS),
        SourceDescriptor("Yahoo Finance VIX", 2, fetch_vix_fear_greed, config.VIX_TIMEOUT_MS),
        SourceDescriptor("Real-time Simulation", 1, fetch_simulated_fear_greed, config.SIMULATION_TIMEOUT_MS),
    ]
