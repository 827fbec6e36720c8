"""Utilities for turning Places API payloads into clinic records."""

import logging
from typing import Any, Dict, Iterable, Optional

from clinic_extractor.models import ClinicRecord, ExtractionScope, RawCandidate

logger = logging.getLogger(__name__)


def build_query(term: str, scope: ExtractionScope) -> str:
    if scope.city:
        location = f"{scope.city}, {scope.state}, {scope.country}"
    else:
        location = f"{scope.state}, {scope.country}"
    return f"{term} in {location}"


def get_component(address_components: Optional[Iterable[Dict[str, Any]]], type_name: str) -> str:
    """Return the long text of the first component tagged with ``type_name``."""
    for component in address_components or []:
        if type_name in (component.get("types") or []):
            return component.get("longText") or ""
    return ""


def _safe_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_candidate(place: Dict[str, Any], term: str) -> Optional[RawCandidate]:
    """Build a candidate from one search item; items without an id yield None."""
    place_id = place.get("id")
    if not place_id:
        logger.debug("Skipping search item without id: %s", place)
        return None

    location = place.get("location") or {}
    return RawCandidate(
        place_id=place_id,
        name=(place.get("displayName") or {}).get("text") or "",
        formatted_address=place.get("formattedAddress") or "",
        source_query=term,
        rating=_safe_float(place.get("rating")),
        review_count=_safe_int(place.get("userRatingCount")),
        lat=_safe_float(location.get("latitude")) or 0.0,
        lng=_safe_float(location.get("longitude")) or 0.0,
    )


def fallback_record(candidate: RawCandidate, scope: ExtractionScope) -> ClinicRecord:
    """Record built only from search data, used when the detail lookup fails."""
    return ClinicRecord(
        country=scope.country,
        state=scope.state,
        city="",
        name=candidate.name,
        full_address=candidate.formatted_address,
        phone="",
        website="",
        rating=candidate.rating,
        total_reviews=candidate.review_count,
        lat=candidate.lat,
        lng=candidate.lng,
        place_id=candidate.place_id,
        source_query=candidate.source_query,
    )


def to_clinic_record(candidate: RawCandidate, details: Dict[str, Any], scope: ExtractionScope) -> ClinicRecord:
    components = details.get("addressComponents") or []
    city = get_component(components, "locality") or get_component(components, "administrative_area_level_2")
    state = get_component(components, "administrative_area_level_1") or scope.state
    country = get_component(components, "country") or scope.country

    display_name = (details.get("displayName") or {}).get("text")
    return ClinicRecord(
        country=country,
        state=state,
        city=city,
        name=display_name or candidate.name,
        full_address=details.get("formattedAddress") or candidate.formatted_address,
        phone=details.get("nationalPhoneNumber") or "",
        website=details.get("websiteUri") or "",
        rating=candidate.rating,
        total_reviews=candidate.review_count,
        lat=candidate.lat,
        lng=candidate.lng,
        place_id=candidate.place_id,
        source_query=candidate.source_query,
    )
