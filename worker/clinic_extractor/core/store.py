"""Single-slot holder for the most recent completed extraction.

The HTTP layer owns one instance for the life of the process. Every completed
build overwrites it and the export route reads it. No history or run identity
is kept, so two overlapping builds simply race and the last one to finish
wins.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from clinic_extractor.models import ClinicRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LastExtraction:
    results: List[ClinicRecord] = field(default_factory=list)
    country: str = ""
    state: str = ""
    city: str = ""


class LastExtractionStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[LastExtraction] = None

    def set(self, results: List[ClinicRecord], country: str, state: str, city: str = "") -> None:
        snapshot = LastExtraction(results=list(results), country=country, state=state, city=city or "")
        with self._lock:
            self._value = snapshot
        logger.info("Stored %d records from the latest extraction", len(snapshot.results))

    def get(self) -> Optional[LastExtraction]:
        with self._lock:
            return self._value
