"""CSV rendering of clinic records."""

import csv
import io
import logging
import re
from dataclasses import fields
from typing import Iterable, List, Optional

from clinic_extractor.models import ClinicRecord

logger = logging.getLogger(__name__)

CSV_COLUMNS = tuple(f.name for f in fields(ClinicRecord))
FILENAME_SUFFIX = "clinics"


class NothingToExportError(ValueError):
    """Raised when an export is requested for an empty result set."""


def records_to_csv(records: Iterable[ClinicRecord]) -> str:
    """Render records under the fixed header; None values become empty cells."""
    rows = list(records)
    if not rows:
        raise NothingToExportError("No extraction results to export. Run an extraction first.")

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_COLUMNS)
    for record in rows:
        writer.writerow([getattr(record, column) for column in CSV_COLUMNS])
    logger.debug("Rendered %d records to CSV", len(rows))
    return buffer.getvalue()


def _optional_float(value: str) -> Optional[float]:
    return float(value) if value != "" else None


def _optional_int(value: str) -> Optional[int]:
    return int(value) if value != "" else None


def records_from_csv(text: str) -> List[ClinicRecord]:
    reader = csv.DictReader(io.StringIO(text, newline=""))
    if tuple(reader.fieldnames or ()) != CSV_COLUMNS:
        raise ValueError(f"Unexpected CSV header: {reader.fieldnames}")

    records: List[ClinicRecord] = []
    for row in reader:
        records.append(
            ClinicRecord(
                country=row["country"],
                state=row["state"],
                city=row["city"],
                name=row["name"],
                full_address=row["full_address"],
                phone=row["phone"],
                website=row["website"],
                rating=_optional_float(row["rating"]),
                total_reviews=_optional_int(row["total_reviews"]),
                lat=_optional_float(row["lat"]) or 0.0,
                lng=_optional_float(row["lng"]) or 0.0,
                place_id=row["place_id"],
                source_query=row["source_query"],
            )
        )
    return records


def _sanitise_filename_part(value: str) -> str:
    value = re.sub(r"\s+", "-", value.lower())
    return re.sub(r"[^a-z0-9-]", "", value)


def export_filename(country: str, state: str, city: Optional[str] = None) -> str:
    country_part = _sanitise_filename_part(country or "us")
    state_part = _sanitise_filename_part(state)
    city_part = f"-{_sanitise_filename_part(city)}" if city else ""
    return f"{country_part}-{state_part}{city_part}-{FILENAME_SUFFIX}.csv"
