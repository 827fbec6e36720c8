"""Client utilities for the Google Places API (New)."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://places.googleapis.com/v1"
SEARCH_TEXT_URL = f"{_BASE_URL}/places:searchText"
PLACE_DETAILS_URL = f"{_BASE_URL}/places"

PAGE_SIZE = 20
REQUEST_TIMEOUT = 10
SEARCH_FIELD_MASK = (
    "places.id,places.displayName,places.formattedAddress,places.location,"
    "places.rating,places.userRatingCount,nextPageToken"
)
DETAILS_FIELD_MASK = "displayName,formattedAddress,addressComponents,nationalPhoneNumber,websiteUri"


@dataclass(frozen=True)
class PlacesError:
    """Failure details for one Places call; code 0 means no HTTP response."""

    code: int
    message: str
    status: str


@dataclass(frozen=True)
class PlacesResponse:
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[PlacesError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _headers(api_key: str, field_mask: str) -> Dict[str, str]:
    return {"X-Goog-Api-Key": api_key, "X-Goog-FieldMask": field_mask}


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason or ""


def _to_places_response(response: requests.Response, operation: str) -> PlacesResponse:
    if not response.ok:
        message = _error_message(response)
        logger.error("%s failed: status=%s, error_message=%s", operation, response.status_code, message)
        return PlacesResponse(
            error=PlacesError(code=response.status_code, message=message, status=str(response.status_code))
        )
    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("%s returned a body that is not JSON: %s", operation, exc)
        return PlacesResponse(error=PlacesError(code=response.status_code, message=str(exc), status="INVALID_RESPONSE"))
    return PlacesResponse(payload=payload if isinstance(payload, dict) else {})


def search_text_page(query: str, api_key: str, page_token: Optional[str] = None) -> PlacesResponse:
    """Fetch one page of text-search results; failures come back as ``response.error``."""
    body: Dict[str, Any] = {"textQuery": query, "pageSize": PAGE_SIZE}
    if page_token:
        body["pageToken"] = page_token
    try:
        response = _SESSION.post(
            SEARCH_TEXT_URL,
            json=body,
            headers=_headers(api_key, SEARCH_FIELD_MASK),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as exc:
        logger.error("search_text failed before a response arrived: %s", exc)
        return PlacesResponse(error=PlacesError(code=0, message=str(exc), status="NETWORK_ERROR"))
    return _to_places_response(response, "search_text")


def place_details(place_id: str, api_key: str) -> PlacesResponse:
    url = f"{PLACE_DETAILS_URL}/{quote(place_id, safe='')}"
    try:
        response = _SESSION.get(url, headers=_headers(api_key, DETAILS_FIELD_MASK), timeout=REQUEST_TIMEOUT)
    except requests.RequestException as exc:
        logger.error("place_details failed before a response arrived: %s", exc)
        return PlacesResponse(error=PlacesError(code=0, message=str(exc), status="NETWORK_ERROR"))
    return _to_places_response(response, "place_details")
