import pytest
import requests

from clinic_extractor.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", invalid_json=False):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload if payload is not None else {}
        self._invalid_json = invalid_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()
        self.exc = None

    def _respond(self):
        if self.exc is not None:
            raise self.exc
        return self.response

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append(("POST", url, json, headers, timeout))
        return self._respond()

    def get(self, url, headers=None, timeout=None):
        self.calls.append(("GET", url, None, headers, timeout))
        return self._respond()


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_search_text_page_success(patch_session):
    patch_session.response = DummyResponse(payload={"places": [{"id": "a"}], "nextPageToken": "tok"})

    response = google_places.search_text_page("lice clinic in Texas, United States", "key")

    assert response.ok
    assert response.payload["nextPageToken"] == "tok"
    method, url, body, headers, timeout = patch_session.calls[0]
    assert method == "POST"
    assert url.endswith("places:searchText")
    assert body == {"textQuery": "lice clinic in Texas, United States", "pageSize": 20}
    assert headers["X-Goog-Api-Key"] == "key"
    assert headers["X-Goog-FieldMask"] == google_places.SEARCH_FIELD_MASK
    assert timeout == 10


def test_search_text_page_sends_page_token(patch_session):
    google_places.search_text_page("q", "key", page_token="next")

    assert patch_session.calls[0][2]["pageToken"] == "next"


def test_search_text_page_http_error_is_returned(patch_session):
    patch_session.response = DummyResponse(
        status_code=403,
        reason="Forbidden",
        payload={"error": {"code": 403, "message": "API key not valid", "status": "PERMISSION_DENIED"}},
    )

    response = google_places.search_text_page("q", "key")

    assert not response.ok
    assert response.error == google_places.PlacesError(code=403, message="API key not valid", status="403")


def test_http_error_without_json_uses_reason(patch_session):
    patch_session.response = DummyResponse(status_code=502, reason="Bad Gateway", invalid_json=True)

    response = google_places.search_text_page("q", "key")

    assert response.error.message == "Bad Gateway"
    assert response.error.status == "502"


def test_transport_error_is_returned(patch_session):
    patch_session.exc = requests.ConnectionError("connection reset")

    response = google_places.search_text_page("q", "key")

    assert response.error.code == 0
    assert response.error.status == "NETWORK_ERROR"
    assert "connection reset" in response.error.message


def test_invalid_success_body_is_returned_as_error(patch_session):
    patch_session.response = DummyResponse(invalid_json=True)

    response = google_places.place_details("pid", "key")

    assert response.error.status == "INVALID_RESPONSE"


def test_place_details_success(patch_session):
    patch_session.response = DummyResponse(payload={"displayName": {"text": "Acme Lice"}})

    response = google_places.place_details("places/ab c", "key")

    assert response.payload["displayName"]["text"] == "Acme Lice"
    method, url, _, headers, _ = patch_session.calls[0]
    assert method == "GET"
    assert url.endswith("/places/places%2Fab%20c")
    assert headers["X-Goog-FieldMask"] == google_places.DETAILS_FIELD_MASK


def test_place_details_error(patch_session):
    patch_session.response = DummyResponse(status_code=404, reason="Not Found", payload={})

    response = google_places.place_details("pid", "key")

    assert response.error == google_places.PlacesError(code=404, message="Not Found", status="404")
