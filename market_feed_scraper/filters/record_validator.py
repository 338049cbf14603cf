"""Accept/reject rules for candidate schedule records."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from market_feed_scraper import config
from market_feed_scraper.errors import ValidationRejected
from market_feed_scraper.scraper.models import ScheduleRecord
from market_feed_scraper.scraper.parse_utils import decode_entities

logger = logging.getLogger(__name__)


class RecordValidator:
    """Reject records with no indicator or with structural noise.

    Blank date, time or country never cause a rejection; those cells get
    sentinel defaults when the record is built.
    """

    def __init__(self, noise_keywords: Optional[Iterable[str]] = None):
        self.noise_keywords = tuple(
            config.NOISE_KEYWORDS if noise_keywords is None else noise_keywords
        )

    def check(self, record: ScheduleRecord) -> None:
        """Raise ``ValidationRejected`` when the record must be dropped."""
        indicator = decode_entities(record.indicator)
        if not indicator:
            raise ValidationRejected("indicator is empty")

        country = record.country or ""
        for keyword in self.noise_keywords:
            if keyword in indicator or keyword in country:
                raise ValidationRejected(f"noise keyword {keyword!r} in {indicator!r}")

    def is_valid(self, record: ScheduleRecord) -> bool:
        try:
            self.check(record)
        except ValidationRejected as e:
            logger.debug(f"Rejected {record.date} {record.time} {record.country}: {e}")
            return False
        return True


_DEFAULT_VALIDATOR = RecordValidator()


def validate_record(record: ScheduleRecord) -> bool:
    """Validate with the configured denylist."""
    return _DEFAULT_VALIDATOR.is_valid(record)
