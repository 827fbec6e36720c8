import csv
import io

import pytest

from clinic_extractor.etl import csv_export
from clinic_extractor.models import ClinicRecord


def _record(**overrides):
    values = dict(
        country="United States",
        state="Texas",
        city="Austin",
        name="Lice Clinics of Austin",
        full_address="1 Main St, Austin, TX",
        phone="(512) 555-0100",
        website="https://example.com",
        rating=4.7,
        total_reviews=88,
        lat=30.2672,
        lng=-97.7431,
        place_id="pid-1",
        source_query="lice clinic",
    )
    values.update(overrides)
    return ClinicRecord(**values)


def test_header_order():
    assert csv_export.CSV_COLUMNS == (
        "country",
        "state",
        "city",
        "name",
        "full_address",
        "phone",
        "website",
        "rating",
        "total_reviews",
        "lat",
        "lng",
        "place_id",
        "source_query",
    )


def test_empty_results_raise():
    with pytest.raises(csv_export.NothingToExportError):
        csv_export.records_to_csv([])


def test_special_characters_are_quoted():
    content = csv_export.records_to_csv([_record(name='Nit "Pickers", LLC', full_address="Suite 1\nAustin")])

    assert '"Nit ""Pickers"", LLC"' in content
    assert '"Suite 1\nAustin"' in content


def test_null_numbers_render_as_empty_cells():
    content = csv_export.records_to_csv([_record(rating=None, total_reviews=None)])

    rows = list(csv.reader(io.StringIO(content, newline="")))
    assert rows[1][7] == ""
    assert rows[1][8] == ""


def test_round_trip_preserves_values():
    records = [
        _record(),
        _record(
            place_id="pid-2",
            name='Nit "Pickers", LLC',
            full_address="Suite 1\r\nAustin, TX",
            phone="",
            website="",
            rating=None,
            total_reviews=None,
            lat=0.0,
            lng=0.0,
        ),
    ]

    parsed = csv_export.records_from_csv(csv_export.records_to_csv(records))

    assert parsed == records


def test_records_from_csv_rejects_unknown_header():
    with pytest.raises(ValueError):
        csv_export.records_from_csv("a,b\n1,2\n")


@pytest.mark.parametrize(
    "country,state,city,expected",
    [
        ("United States", "Texas", "", "united-states-texas-clinics.csv"),
        ("United States", "New York", "New York City", "united-states-new-york-new-york-city-clinics.csv"),
        ("", "Québec", None, "us-qubec-clinics.csv"),
    ],
)
def test_export_filename(country, state, city, expected):
    assert csv_export.export_filename(country, state, city) == expected
