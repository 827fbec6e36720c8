"""Core data models shared by the clinic extraction pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class ExtractionScope:
    """Geographic qualifier appended to every query of a run."""

    state: str
    country: str = ""
    city: Optional[str] = None


@dataclass(slots=True)
class RawCandidate:
    """One unique search hit, waiting for detail enrichment."""

    place_id: str
    name: str
    formatted_address: str
    source_query: str
    rating: Optional[float] = None
    review_count: Optional[int] = None
    lat: float = 0.0
    lng: float = 0.0


@dataclass(slots=True)
class ClinicRecord:
    """Flat exported row; field order matches the CSV header."""

    country: str
    state: str
    city: str
    name: str
    full_address: str
    phone: str
    website: str
    rating: Optional[float]
    total_reviews: Optional[int]
    lat: float
    lng: float
    place_id: str
    source_query: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class RunResult:
    """Everything a single extraction run hands back to its caller."""

    log: List[str] = field(default_factory=list)
    results: List[ClinicRecord] = field(default_factory=list)
    total_results: int = 0

    @property
    def deduped_count(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "log": list(self.log),
            "results": [record.to_dict() for record in self.results],
            "totalResults": self.total_results,
            "dedupedCount": self.deduped_count,
        }
