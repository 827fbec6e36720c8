"""Clinic extraction job: paginated Places text search, dedup and detail enrichment."""

import argparse
import logging
import math
import sys
from typing import Any, List, Optional, Sequence

from clinic_extractor.core.config import get_settings
from clinic_extractor.core.dedup import PlaceIdentitySet
from clinic_extractor.core.pacer import Pacer
from clinic_extractor.etl.csv_export import NothingToExportError, records_to_csv
from clinic_extractor.etl.transform import build_query, fallback_record, to_candidate, to_clinic_record
from clinic_extractor.models import ClinicRecord, ExtractionScope, RawCandidate, RunResult
from clinic_extractor.vendors import google_places

logger = logging.getLogger(__name__)

MAX_RESULTS_CAP = 60
PROGRESS_EVERY = 10
MISSING_KEY_MESSAGE = "Error: GOOGLE_PLACES_API_KEY is not set."


class ExtractionConfigError(ValueError):
    """Raised when the caller supplies an unusable scope or term list."""


class RunLog(list):
    """Run log lines, mirrored to the module logger as they are added."""

    def add(self, line: str) -> None:
        logger.info(line)
        self.append(line)


def clamp_max_results(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MAX_RESULTS_CAP
    # inf and nan arrive from JSON bodies and cannot go through int()
    if not math.isfinite(value) or value <= 0 or value >= MAX_RESULTS_CAP:
        return MAX_RESULTS_CAP
    return max(1, int(value))


def _search_term(
    term: str,
    scope: ExtractionScope,
    api_key: str,
    max_results: int,
    pacer: Pacer,
    seen: PlaceIdentitySet,
    candidates: List[RawCandidate],
    log: RunLog,
) -> int:
    """Paginate one term, appending first-seen candidates. Returns raw hit count."""
    query = build_query(term, scope)
    log.add(f"[{term}] Query: {query}")

    total_for_term = 0
    page_token: Optional[str] = None
    while True:
        pacer.before_call()
        response = google_places.search_text_page(query=query, api_key=api_key, page_token=page_token)
        if not response.ok:
            error = response.error
            log.add(f"[{term}] API error: {error.status} {error.message}")
            break

        places = response.payload.get("places") or []
        total_for_term += len(places)
        for place in places:
            candidate = to_candidate(place, term)
            if candidate is None or not seen.accept(candidate.place_id, term):
                continue
            candidates.append(candidate)

        log.add(f"[{term}] Page: {len(places)} results (total this term: {total_for_term})")

        page_token = response.payload.get("nextPageToken")
        if not page_token or total_for_term >= max_results:
            break
        log.add(f"[{term}] Waiting {pacer.page_delay:g}s before next page...")
        pacer.before_next_page()

    if total_for_term >= max_results:
        log.add(f"[{term}] Reached max results ({max_results}).")
    return total_for_term


def _enrich(
    candidates: Sequence[RawCandidate],
    scope: ExtractionScope,
    api_key: str,
    pacer: Pacer,
    log: RunLog,
) -> List[ClinicRecord]:
    results: List[ClinicRecord] = []
    for index, candidate in enumerate(candidates, start=1):
        pacer.before_call()
        response = google_places.place_details(place_id=candidate.place_id, api_key=api_key)
        if response.ok:
            results.append(to_clinic_record(candidate, response.payload, scope))
        else:
            error = response.error
            log.add(f"[{candidate.place_id}] Details error: {error.status} {error.message}")
            results.append(fallback_record(candidate, scope))

        if index % PROGRESS_EVERY == 0:
            log.add(f"Details: {index}/{len(candidates)} done.")
    return results


def run_extraction(
    scope: ExtractionScope,
    terms: Sequence[str],
    max_results: Any,
    api_key: Optional[str],
    pacer: Optional[Pacer] = None,
) -> RunResult:
    """Run one full extraction.

    Upstream failures never raise: a failed search page ends that term and a
    failed detail lookup falls back to the search data, both noted in the log.
    Only an unusable scope or term list raises ``ExtractionConfigError``.
    """
    log = RunLog()
    if not api_key or not api_key.strip():
        log.add(MISSING_KEY_MESSAGE)
        return RunResult(log=list(log))

    state = (scope.state or "").strip()
    if not state:
        raise ExtractionConfigError("state is required")
    cleaned_terms = [term.strip() for term in terms if isinstance(term, str) and term.strip()]
    if not cleaned_terms:
        raise ExtractionConfigError("searchTerms must be a non-empty array")

    settings = get_settings()
    scope = ExtractionScope(
        state=state,
        country=(scope.country or "").strip() or settings.default_country,
        city=(scope.city or "").strip() or None,
    )
    api_key = api_key.strip()
    cap = clamp_max_results(max_results)
    pacer = pacer or Pacer.from_settings(settings)

    seen = PlaceIdentitySet()
    candidates: List[RawCandidate] = []
    total_results = 0
    for term in cleaned_terms:
        total_results += _search_term(term, scope, api_key, cap, pacer, seen, candidates, log)

    log.add(f"Total results from search: {total_results}. Unique places: {len(candidates)}. Fetching details...")
    results = _enrich(candidates, scope, api_key, pacer, log)
    log.add(f"Done. Deduplicated count: {len(results)}.")

    return RunResult(log=list(log), results=results, total_results=total_results)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract clinic listings from Google Places into CSV")
    parser.add_argument("--state", dest="state", required=True, help="State or region to search in")
    parser.add_argument("--city", dest="city", help="Optional city filter")
    parser.add_argument("--country", dest="country", default=get_settings().default_country, help="Country name")
    parser.add_argument(
        "--term",
        dest="terms",
        action="append",
        required=True,
        help="Search term, repeat for several (e.g. --term 'lice clinic' --term 'lice removal')",
    )
    parser.add_argument(
        "--max-results",
        dest="max_results",
        type=int,
        default=MAX_RESULTS_CAP,
        help="Maximum raw results per term (1-60)",
    )
    parser.add_argument("--output", dest="output", help="CSV file to write; stdout when omitted")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    scope = ExtractionScope(state=args.state, country=args.country, city=args.city)
    try:
        result = run_extraction(scope, args.terms, args.max_results, get_settings().google_places_api_key)
    except ExtractionConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc

    try:
        content = records_to_csv(result.results)
    except NothingToExportError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        logger.info("Wrote %d records to %s", result.deduped_count, args.output)
    else:
        sys.stdout.write(content)


if __name__ == "__main__":
    main()
