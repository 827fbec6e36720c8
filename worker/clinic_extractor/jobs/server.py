"""HTTP entrypoint that runs clinic extractions and serves the CSV export."""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
import os
from typing import Any, Optional

from flask import Flask, Response, jsonify, request

from clinic_extractor.core.config import get_settings
from clinic_extractor.core.store import LastExtractionStore
from clinic_extractor.etl.csv_export import NothingToExportError, export_filename, records_to_csv
from clinic_extractor.jobs.extract import ExtractionConfigError, clamp_max_results, run_extraction
from clinic_extractor.models import ExtractionScope

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

AUTH_REALM = 'Basic realm="Clinic Extractor"'
_OPEN_PATHS = {"/healthz"}


def _unauthorized(message: str) -> Response:
    return Response(message, status=401, headers={"WWW-Authenticate": AUTH_REALM})


def _check_basic_auth() -> Optional[Response]:
    """Reject the request unless it carries the configured Basic credentials."""
    if request.path in _OPEN_PATHS:
        return None
    creds = get_settings().basic_auth
    if creds is None:
        return None

    header = request.headers.get("Authorization", "")
    if not header.startswith("Basic "):
        return _unauthorized("Auth required")

    try:
        decoded = base64.b64decode(header[6:], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return _unauthorized("Invalid credentials")

    user, _, password = decoded.partition(":")
    user_ok = hmac.compare_digest(user.encode("utf-8"), creds[0].encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), creds[1].encode("utf-8"))
    if user_ok and password_ok:
        return None
    return _unauthorized("Invalid credentials")


def create_app(store: Optional[LastExtractionStore] = None) -> Flask:
    """Build the Flask app around an explicitly owned last-result store."""
    app = Flask(__name__)
    last_extraction = store if store is not None else LastExtractionStore()
    app.extensions["last_extraction"] = last_extraction
    app.before_request(_check_basic_auth)

    # ---------- Routes ----------

    @app.get("/")
    def root() -> Any:
        return "ok", 200

    @app.get("/healthz")
    def healthcheck() -> Any:
        settings = get_settings()
        return (
            jsonify(
                {
                    "status": "ok",
                    "worker_port_config": settings.worker_port,
                    "api_key_configured": bool(settings.google_places_api_key),
                    "revision": os.getenv("K_REVISION", "unknown"),
                }
            ),
            200,
        )

    @app.post("/api/build")
    def build() -> Any:
        """
        Run one extraction synchronously and remember it for export.
        Required JSON fields: state, searchTerms
        Optional: country, city, maxResults
        """
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "Invalid JSON body"}), 400

        state = payload.get("state")
        state = state.strip() if isinstance(state, str) else ""
        raw_terms = payload.get("searchTerms")
        terms = [t.strip() for t in raw_terms if isinstance(t, str) and t.strip()] if isinstance(raw_terms, list) else []

        if not state:
            return jsonify({"error": "state is required"}), 400
        if not terms:
            return jsonify({"error": "searchTerms must be a non-empty array"}), 400

        settings = get_settings()
        country = payload.get("country")
        city = payload.get("city")
        scope = ExtractionScope(
            state=state,
            country=country if isinstance(country, str) else settings.default_country,
            city=city if isinstance(city, str) else None,
        )
        max_results = clamp_max_results(payload.get("maxResults"))

        logger.info("Starting extraction: scope=%s terms=%s max_results=%d", scope, terms, max_results)
        try:
            result = run_extraction(scope, terms, max_results, settings.google_places_api_key)
        except ExtractionConfigError as exc:
            return jsonify({"error": str(exc)}), 400

        if settings.google_places_api_key:
            last_extraction.set(
                result.results,
                country=(scope.country or "").strip() or settings.default_country,
                state=state,
                city=(scope.city or "").strip(),
            )
        return jsonify(result.to_dict()), 200

    @app.get("/api/export")
    def export_csv() -> Any:
        last = last_extraction.get()
        try:
            content = records_to_csv(last.results if last else [])
        except NothingToExportError as exc:
            return jsonify({"error": str(exc)}), 404

        filename = export_filename(last.country, last.state, last.city)
        return Response(
            content,
            status=200,
            content_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app


app = create_app()


def main() -> None:
    env_port = os.getenv("PORT")
    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
