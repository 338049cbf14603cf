"""Configuration constants for the market feed scraper."""

from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# HTTP settings
# ---------------------------------------------------------------------------

REQUEST_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
REQUEST_TIMEOUT = float(os.getenv("MARKET_FEED_REQUEST_TIMEOUT", "10"))

TZ_DISPLAY = os.getenv("MARKET_FEED_TZ", "Asia/Seoul")

# ---------------------------------------------------------------------------
# Economic schedule source (GitBook daily report)
# ---------------------------------------------------------------------------

SCHEDULE_BASE_URL = os.getenv(
    "SCHEDULE_BASE_URL", "https://futuresnow.gitbook.io/newstoday"
)
SCHEDULE_PAGE_PATH = "news/today/undefined"

# Heading of the markdown section holding the indicator table
SCHEDULE_SECTION_HEADING = "경제지표"

SCHEDULE_SOURCE_LABEL = "오선 (Osen)"
SCHEDULE_LANGUAGE = "kr"
SCHEDULE_CATEGORY = "economic-schedule"

# Sentinels substituted for missing cells
DATE_UNSPECIFIED = "(날짜 미정)"
TIME_UNSPECIFIED = "(시간 미정)"
DATE_PLACEHOLDER_TOKENS = ("(잠정)",)
DEFAULT_COUNTRY = os.getenv("SCHEDULE_DEFAULT_COUNTRY", "미국")

IMPORTANCE_GLYPH = "★"

# Words that mark a header row in the first cell
HEADER_KEYWORDS = ("날짜", "시간", "국가")

# Site chrome, column headers and branding that never form a real record
NOISE_KEYWORDS = (
    "GitBook",
    "Powered by",
    "라이브 리포트",
    "뉴스",
    "Wall Street",
    "날짜",
    "시간",
    "국가",
    "지표",
    "중요도",
)

# Countries recognised by the free-text schedule pattern
KNOWN_COUNTRIES = ("미국", "한국", "일본", "중국", "독일", "영국")


def _tokens(env_name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(env_name, default)
    return tuple(token.strip() for token in raw.split(",") if token.strip())


# Region buckets used by the classifier (case-insensitive substring match)
DOMESTIC_REGION_TOKENS = _tokens("SCHEDULE_DOMESTIC_TOKENS", "한국,KR")
FOREIGN_REGION_TOKENS = _tokens("SCHEDULE_FOREIGN_TOKENS", "미국,US")

# ---------------------------------------------------------------------------
# Sentiment sources
# ---------------------------------------------------------------------------

CNN_FEAR_GREED_URL = "https://production.dataviz.cnn.io/index/fearandgreed/graphdata"
ALTERNATIVE_FNG_URL = "https://api.alternative.me/fng/?limit=1&format=json"
YAHOO_VIX_URL = "https://query1.finance.yahoo.com/v7/finance/quote?symbols=^VIX"

# Per-source deadlines in milliseconds
CNN_TIMEOUT_MS = 4_000
ALTERNATIVE_TIMEOUT_MS = 5_000
VIX_TIMEOUT_MS = 6_000
SIMULATION_TIMEOUT_MS = 2_000

NEUTRAL_SENTIMENT = 50

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

OUTPUT_DIR = Path(os.getenv("MARKET_FEED_OUTPUT_DIR", str(PROJECT_ROOT / "output")))
SCHEDULE_OUTPUT_DIR = OUTPUT_DIR / "schedule"
SENTIMENT_OUTPUT_DIR = OUTPUT_DIR / "sentiment"
