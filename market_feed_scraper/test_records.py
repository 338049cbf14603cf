"""Tests for record validation, deduplication and classification."""

from __future__ import annotations

from datetime import date, datetime, timezone

from market_feed_scraper import config
from market_feed_scraper.filters.classifier import (
    RegionBucket,
    classify_records,
    filter_records,
    schedule_title,
)
from market_feed_scraper.filters.record_validator import RecordValidator, validate_record
from market_feed_scraper.io.dedupe import dedupe_records, record_key
from market_feed_scraper.scraper.models import Importance, ScheduleRecord

TODAY = date(2025, 7, 28)


def make_record(
    indicator: str = "2년물 국채 경매",
    date_text: str = "07/28",
    time_text: str = "23:30",
    country: str = "미국",
    importance: Importance = Importance.LOW,
    source_label: str = config.SCHEDULE_SOURCE_LABEL,
) -> ScheduleRecord:
    return ScheduleRecord(
        date=date_text,
        time=time_text,
        country=country,
        indicator=indicator,
        importance=importance,
        source_label=source_label,
        source_url="https://futuresnow.gitbook.io/newstoday/2025-07-28/news/today/undefined",
        captured_at=datetime(2025, 7, 28, tzinfo=timezone.utc),
        language="kr",
        category="economic-schedule",
    )


# ---------------------------------------------------------------------------
# RecordValidator
# ---------------------------------------------------------------------------

def test_empty_indicator_always_rejected():
    assert not validate_record(make_record(indicator=""))
    assert not validate_record(make_record(indicator="   "))
    assert not validate_record(make_record(indicator="&nbsp;", importance=Importance.HIGH))


def test_blank_other_fields_do_not_reject():
    record = make_record(date_text=config.DATE_UNSPECIFIED, time_text=config.TIME_UNSPECIFIED)

    assert validate_record(record)


def test_noise_in_indicator_or_country_rejected():
    assert not validate_record(make_record(indicator="Powered by GitBook"))
    assert not validate_record(make_record(indicator="오늘의 뉴스 요약"))
    assert not validate_record(make_record(country="국가"))


def test_custom_denylist():
    validator = RecordValidator(noise_keywords=["광고"])

    assert not validator.is_valid(make_record(indicator="광고 배너"))
    assert validator.is_valid(make_record(indicator="GitBook"))


# ---------------------------------------------------------------------------
# Deduplicator
# ---------------------------------------------------------------------------

def test_duplicates_collapse_keeping_first():
    first = make_record(importance=Importance.HIGH, source_label="first")
    second = make_record(importance=Importance.LOW, source_label="second")
    other = make_record(indicator="5년물 국채 경매")

    result = dedupe_records([first, other, second])

    assert result == [first, other]
    assert result[0].source_label == "first"
    assert result[0].importance == Importance.HIGH


def test_dedupe_key_is_normalised():
    assert record_key(make_record(country=" US ")) == record_key(make_record(country="us"))
    assert len(dedupe_records([make_record(indicator="2년물  국채 경매"), make_record()])) == 1


def test_dedupe_is_idempotent():
    records = [make_record(), make_record(), make_record(time_text="00:30")]

    once = dedupe_records(records)

    assert dedupe_records(once) == once


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

def test_today_and_tomorrow_views():
    today_record = make_record(date_text="07/28")
    tomorrow_record = make_record(date_text="07/29", indicator="5년물 국채 경매")
    undated = make_record(date_text=config.DATE_UNSPECIFIED, indicator="재무부 차입 예상치")

    views = classify_records([today_record, tomorrow_record, undated], today=TODAY)

    assert views.today == [today_record]
    assert views.tomorrow == [tomorrow_record]
    assert today_record not in views.tomorrow


def test_tomorrow_rolls_over_month_end():
    record = make_record(date_text="08/01")

    views = classify_records([record], today=date(2025, 7, 31))

    assert views.tomorrow == [record]


def test_importance_and_region_views_overlap():
    us_high = make_record(importance=Importance.HIGH, country="미국")
    kr = make_record(country="한국", indicator="수출입물가")
    us_latin = make_record(country="us", indicator="CPI")

    views = classify_records([us_high, kr, us_latin], today=TODAY)

    assert views.high_importance == [us_high]
    assert views.domestic == [kr]
    assert views.foreign == [us_high, us_latin]
    assert us_high in views.today and us_high in views.foreign


def test_custom_region_buckets():
    jp = make_record(country="일본")

    views = classify_records(
        [jp],
        today=TODAY,
        domestic=RegionBucket("domestic", ["일본", "JP"]),
        foreign=RegionBucket("foreign", ["미국"]),
    )

    assert views.domestic == [jp]
    assert views.foreign == []


def test_filter_records():
    high = make_record(importance=Importance.HIGH)
    kr_tomorrow = make_record(country="한국", date_text="07/29")

    assert filter_records([high, kr_tomorrow], importance="HIGH") == [high]
    assert filter_records([high, kr_tomorrow], country="한국") == [kr_tomorrow]
    assert filter_records([high, kr_tomorrow], day="tomorrow", today=TODAY) == [kr_tomorrow]
    assert filter_records([high, kr_tomorrow]) == [high, kr_tomorrow]


def test_schedule_title():
    assert schedule_title(TODAY) == "📅 다음날 주요 일정 - (07/29) 경제지표"
