"""Run-scoped place identity tracking."""

from typing import Dict, Optional


class PlaceIdentitySet:
    """Remembers which search term first produced each place id."""

    def __init__(self) -> None:
        self._first_seen: Dict[str, str] = {}

    def accept(self, place_id: str, term: str) -> bool:
        if place_id in self._first_seen:
            return False
        self._first_seen[place_id] = term
        return True

    def source_for(self, place_id: str) -> Optional[str]:
        return self._first_seen.get(place_id)

    def __contains__(self, place_id: object) -> bool:
        return place_id in self._first_seen

    def __len__(self) -> int:
        return len(self._first_seen)
