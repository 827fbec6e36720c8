import sys
from pathlib import Path

import pytest

# Make `clinic_extractor` importable when running pytest from the worker directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    from clinic_extractor.core import config

    for name in (
        "GOOGLE_PLACES_API_KEY",
        "BASIC_AUTH_CREDENTIALS",
        "BASIC_AUTH_USER",
        "BASIC_AUTH_PASSWORD",
        "RATE_DELAY_MS",
        "NEXT_PAGE_DELAY_MS",
        "DEFAULT_COUNTRY",
        "WORKER_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
