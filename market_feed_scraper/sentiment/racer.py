"""Sequential multi-source acquisition of a single sentiment reading.

Sources are consulted strictly in descending priority. Each one races only
against its own deadline; the next source is tried once the current one
has failed, timed out or returned something unusable. The call never
raises: when every source fails the neutral reading is returned.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from market_feed_scraper import config
from market_feed_scraper.errors import (
    MalformedPayload,
    PipelineError,
    SourceTimeout,
    SourceUnavailable,
)
from market_feed_scraper.scraper.models import SentimentReading, SourceDescriptor
from market_feed_scraper.sentiment.sources import default_sources

logger = logging.getLogger(__name__)


def neutral_reading() -> SentimentReading:
    return SentimentReading(value=config.NEUTRAL_SENTIMENT)


def coerce_reading(result: Any, source: str = "") -> SentimentReading:
    """Turn a fetch result into a reading or raise ``MalformedPayload``."""
    if isinstance(result, SentimentReading):
        return result

    value = result
    if isinstance(result, Mapping):
        value = result.get("indexValue", result.get("value"))

    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedPayload(f"non-numeric result {result!r}", source=source)
    return SentimentReading.clamped(value)


async def _invoke(fetch: Any) -> Any:
    if inspect.iscoroutinefunction(fetch):
        return await fetch()
    # blocking fetchers run in a worker thread
    result = await asyncio.to_thread(fetch)
    if inspect.isawaitable(result):
        result = await result
    return result


async def try_source(source: SourceDescriptor) -> SentimentReading:
    """Run one source under its deadline, mapping every failure to the taxonomy."""
    timeout = source.timeout_ms / 1000
    try:
        # wait_for cancels the pending fetch when the deadline passes
        result = await asyncio.wait_for(_invoke(source.fetch), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise SourceTimeout(f"{source.name} timeout after {source.timeout_ms}ms", source=source.name) from e
    except PipelineError:
        raise
    except Exception as e:
        raise SourceUnavailable(f"{source.name} failed: {e}", source=source.name) from e
    return coerce_reading(result, source.name)


async def _acquire_in_order(sources: List[SourceDescriptor]) -> SentimentReading:
    for source in sources:
        logger.info(f"Trying {source.name} (timeout: {source.timeout_ms}ms)")
        try:
            reading = await try_source(source)
        except PipelineError as e:
            logger.warning(f"{source.name} failed: {e}")
            continue
        logger.info(f"Success with {source.name}: {reading.value}")
        return reading

    logger.info("All sentiment sources failed, using neutral fallback")
    return neutral_reading()


async def acquire(
    sources: Iterable[SourceDescriptor],
    overall_timeout_ms: Optional[int] = None,
) -> SentimentReading:
    """Return the first valid reading from ``sources``, else the neutral one.

    ``overall_timeout_ms`` bounds the whole acquisition; without it the worst
    case is the sum of the per-source deadlines.
    """
    ordered = sorted(sources, key=lambda s: s.priority, reverse=True)
    if overall_timeout_ms is None:
        return await _acquire_in_order(ordered)

    try:
        return await asyncio.wait_for(_acquire_in_order(ordered), timeout=overall_timeout_ms / 1000)
    except asyncio.TimeoutError:
        logger.warning(f"Sentiment acquisition exceeded {overall_timeout_ms}ms, using neutral fallback")
        return neutral_reading()


def acquire_sync(
    sources: Optional[Iterable[SourceDescriptor]] = None,
    overall_timeout_ms: Optional[int] = None,
) -> SentimentReading:
    """Blocking wrapper; uses the production source list by default."""
    if sources is None:
        sources = default_sources()
    return asyncio.run(acquire(sources, overall_timeout_ms))
