"""Blocking delays that keep the pipeline inside the Places API rate budget."""

import logging
import time
from typing import Optional

from clinic_extractor.core.config import Settings

logger = logging.getLogger(__name__)

RATE_DELAY_SECONDS = 0.2
NEXT_PAGE_DELAY_SECONDS = 2.0


class Pacer:
    """Sleeps before each outbound call and between pages of one search."""

    def __init__(
        self,
        call_delay: float = RATE_DELAY_SECONDS,
        page_delay: float = NEXT_PAGE_DELAY_SECONDS,
    ) -> None:
        self.call_delay = max(call_delay, 0.0)
        self.page_delay = max(page_delay, 0.0)

    @classmethod
    def from_settings(cls, settings: Optional[Settings]) -> "Pacer":
        if settings is None:
            return cls()
        return cls(settings.rate_delay_seconds, settings.next_page_delay_seconds)

    def before_call(self) -> None:
        if self.call_delay:
            time.sleep(self.call_delay)

    def before_next_page(self) -> None:
        if self.page_delay:
            logger.debug("Sleeping %.2fs before the next result page", self.page_delay)
            time.sleep(self.page_delay)
