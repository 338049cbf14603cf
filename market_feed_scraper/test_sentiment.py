"""Tests for the sentiment racer and its sources."""

from __future__ import annotations

import asyncio
import random
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
import requests

from market_feed_scraper.errors import MalformedPayload, SourceUnavailable
from market_feed_scraper.scraper.models import SentimentReading, SourceDescriptor
from market_feed_scraper.sentiment import racer, sources


def source(name: str, fetch, priority: int = 1, timeout_ms: int = 200) -> SourceDescriptor:
    return SourceDescriptor(name=name, priority=priority, fetch=fetch, timeout_ms=timeout_ms)


async def _sleep_forever():
    await asyncio.sleep(10)
    return SentimentReading(value=99)


# ---------------------------------------------------------------------------
# Racer
# ---------------------------------------------------------------------------

def test_first_source_success_skips_the_rest():
    first = AsyncMock(return_value=SentimentReading(value=72))
    second = AsyncMock(return_value=SentimentReading(value=10))

    reading = asyncio.run(racer.acquire([source("a", first, 2), source("b", second, 1)]))

    assert reading.value == 72
    assert reading.to_dict() == {"indexValue": 72}
    assert first.await_count == 1
    assert second.call_count == 0


def test_all_sources_failing_returns_neutral():
    failing = [
        source("error", AsyncMock(side_effect=ConnectionError("down")), 4),
        source("slow", _sleep_forever, 3, timeout_ms=20),
        source("malformed", AsyncMock(return_value={"indexValue": "n/a"}), 2),
        source("none", AsyncMock(return_value=None), 1),
    ]

    reading = asyncio.run(racer.acquire(failing))

    assert reading.to_dict() == {"indexValue": 50}


def test_empty_source_list_returns_neutral():
    assert asyncio.run(racer.acquire([])).value == 50


def test_sources_tried_in_descending_priority():
    calls = []

    def recorder(name, result):
        async def fetch():
            calls.append(name)
            if result is None:
                raise RuntimeError(f"{name} failed")
            return result
        return fetch

    reading = asyncio.run(racer.acquire([
        source("low", recorder("low", 30), 1),
        source("high", recorder("high", None), 3),
        source("mid", recorder("mid", 60), 2),
    ]))

    assert calls == ["high", "mid"]
    assert reading.value == 60


def test_timed_out_fetch_is_cancelled():
    state = {"cancelled": False}

    async def slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise
        return 90

    fallback = AsyncMock(return_value=41)

    reading = asyncio.run(racer.acquire([source("slow", slow, 2, timeout_ms=20), source("fallback", fallback, 1)]))

    assert reading.value == 41
    assert state["cancelled"]
    assert fallback.await_count == 1


def test_results_are_rounded_and_clamped():
    assert asyncio.run(racer.acquire([source("hi", AsyncMock(return_value=123.6))])).value == 100
    assert asyncio.run(racer.acquire([source("lo", AsyncMock(return_value=-5))])).value == 0
    assert asyncio.run(racer.acquire([source("mid", AsyncMock(return_value={"indexValue": 61.5}))])).value == 62


def test_sync_fetch_callable_is_accepted():
    reading = asyncio.run(racer.acquire([source("sync", MagicMock(return_value=33))]))

    assert reading.value == 33


def test_blocking_fetch_past_deadline_falls_through():
    def blocking():
        time.sleep(0.5)
        return 99

    fallback = AsyncMock(return_value=41)

    reading = asyncio.run(racer.acquire(
        [source("blocking", blocking, 2, timeout_ms=50), source("fallback", fallback, 1)],
        overall_timeout_ms=400,
    ))

    assert reading.value == 41
    assert fallback.await_count == 1


def test_blocking_fetch_respects_overall_timeout():
    def blocking():
        time.sleep(0.5)
        return 99

    reading = asyncio.run(racer.acquire([source("blocking", blocking, timeout_ms=5_000)], overall_timeout_ms=50))

    assert reading.value == 50


def test_overall_timeout_returns_neutral():
    slow_sources = [source(f"slow{i}", _sleep_forever, i, timeout_ms=5_000) for i in range(3)]

    reading = asyncio.run(racer.acquire(slow_sources, overall_timeout_ms=50))

    assert reading.value == 50


def test_coerce_reading_rejects_booleans():
    with pytest.raises(MalformedPayload):
        racer.coerce_reading(True, "bool")


def test_acquire_sync_wraps_event_loop():
    reading = racer.acquire_sync([source("a", AsyncMock(return_value=SentimentReading(value=12)))])

    assert reading == SentimentReading(value=12)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def test_cnn_payload():
    assert sources.parse_cnn_payload({"fear_and_greed": {"score": 63.4}}).value == 63
    historical = {"fear_and_greed_historical": {"data": [{"y": 22.7}]}}
    assert sources.parse_cnn_payload(historical).value == 23
    with pytest.raises(MalformedPayload):
        sources.parse_cnn_payload({"fear_and_greed": {"score": "high"}})


def test_alternative_payload_accepts_string_digits():
    assert sources.parse_alternative_payload({"data": [{"value": "27"}]}).value == 27
    with pytest.raises(MalformedPayload):
        sources.parse_alternative_payload({"data": []})


def test_vix_mapping():
    assert sources.vix_to_fear_greed(10) == 85
    assert sources.vix_to_fear_greed(16) == 60
    assert sources.vix_to_fear_greed(25) == 40
    assert sources.vix_to_fear_greed(35) == 20
    assert sources.vix_to_fear_greed(55) == 15

    payload = {"quoteResponse": {"result": [{"regularMarketPrice": 16}]}}
    assert sources.parse_vix_payload(payload).value == 60


def test_simulation_stays_in_range():
    rng = random.Random(7)
    for step in range(50):
        reading = sources.simulated_fear_greed(now_ms=step * 7_919_000, rng=rng)
        assert 0 <= reading.value <= 100


def test_get_json_maps_transport_errors(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(sources.requests, "get", fail)

    with pytest.raises(SourceUnavailable):
        sources.get_json("https://example.invalid", "test")


def test_get_json_maps_http_status(monkeypatch):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
    monkeypatch.setattr(sources.requests, "get", MagicMock(return_value=response))

    with pytest.raises(SourceUnavailable):
        sources.get_json("https://example.invalid", "test")


def test_default_sources_order():
    names = [s.name for s in sorted(sources.default_sources(), key=lambda s: s.priority, reverse=True)]

    assert names == ["CNN DataViz", "Alternative API", "Yahoo Finance VIX", "Real-time Simulation"]


def test_production_sources_fall_through_to_simulation(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(sources.requests, "get", fail)

    reading = asyncio.run(racer.acquire(sources.default_sources()))

    assert 0 <= reading.value <= 100
