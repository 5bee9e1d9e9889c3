"""Pytest configuration for geo-data tests."""

import copy
import json
import sys
from pathlib import Path

# Ensure we import from the local package, not any other installed version
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest

from geo_data.core.config import GeoDataConfig, RegistrySettings, set_settings
from geo_data.errors import NetworkError


SAUDI_DATASET = {
    "code": "SA",
    "iso3": "SAU",
    "name": {"en": "Saudi Arabia", "ar": "المملكة العربية السعودية", "fr": "Arabie saoudite"},
    "phone": "+966",
    "currency": "SAR",
    "timezone": "Asia/Riyadh",
    "flag": "🇸🇦",
    "regions": [
        {
            "code": "01",
            "name": {"en": "Riyadh Region", "ar": "منطقة الرياض", "fr": "Région de Riyad"},
            "cities": [
                {
                    "name": {"en": "Riyadh", "ar": "الرياض", "fr": "Riyad"},
                    "latitude": 24.7136,
                    "longitude": 46.6753,
                },
                {
                    "name": {"en": "Al Kharj", "ar": "الخرج"},
                    "latitude": 24.1556,
                    "longitude": 47.3122,
                },
            ],
        },
        {
            "code": "02",
            "name": {"en": "Makkah Region", "ar": "منطقة مكة المكرمة"},
            "cities": [
                {"name": {"en": "Jeddah", "ar": "جدة"}, "latitude": 21.4858, "longitude": 39.1925},
            ],
        },
    ],
}

US_DATASET = {
    "code": "US",
    "name": {"en": "United States", "ar": "الولايات المتحدة"},
    "phone": "+1",
    "currency": "USD",
    "timezone": "America/New_York",
    "flag": "🇺🇸",
    "regions": [
        {
            "code": "NY",
            "name": {"en": "New York"},
            "cities": [{"name": {"en": "New York City"}, "latitude": 40.7128, "longitude": -74.006}],
        },
    ],
}

REGISTRY_INDEX = {
    "version": "1.0.0",
    "countries": {
        "sa": {"name": {"en": "Saudi Arabia", "ar": "السعودية"}, "flag": "🇸🇦", "languages": ["en", "ar", "fr"]},
        "us": {"name": {"en": "United States"}, "flag": "🇺🇸", "languages": ["en", "ar"]},
        "ae": {"name": {"en": "United Arab Emirates"}, "flag": "🇦🇪", "languages": ["en", "ar"]},
    },
}


@pytest.fixture
def saudi_payload():
    """Raw Saudi Arabia dataset, as the registry serves it."""
    return copy.deepcopy(SAUDI_DATASET)


@pytest.fixture
def us_payload():
    """Raw United States dataset."""
    return copy.deepcopy(US_DATASET)


@pytest.fixture
def index_payload():
    """Raw registry index (sa, us, ae; ae has no dataset)."""
    return copy.deepcopy(REGISTRY_INDEX)


@pytest.fixture(autouse=True)
def reset_settings():
    """Never let process-wide registry settings leak between tests."""
    set_settings(None)
    yield
    set_settings(None)


@pytest.fixture
def cache_dir(tmp_path):
    """Empty cache root."""
    return tmp_path / "cache"


@pytest.fixture
def config(tmp_path):
    """Project config writing into a temporary output directory."""
    return GeoDataConfig(
        output_dir=str(tmp_path / "project" / "data" / "geo"),
        languages=["en", "ar"],
        include_coordinates=True,
        typescript=True,
    )


class FakeClient:
    """FetchClient stand-in serving payloads from a dict, counting calls."""

    def __init__(self, payloads=None):
        self.payloads = payloads or {}
        self.calls = []
        self.offline = False

    def fetch(self, location):
        self.calls.append(location)
        if self.offline:
            raise NetworkError(f"Failed to fetch {location}: connection refused", location=location)
        for suffix, payload in self.payloads.items():
            if location.endswith(suffix):
                return copy.deepcopy(payload)
        raise NetworkError(f"Failed to fetch {location}: 404", location=location, status_code=404)


@pytest.fixture
def fake_client(index_payload, saudi_payload, us_payload):
    """Fake remote registry holding the index plus sa/us datasets."""
    return FakeClient({
        "/index.json": index_payload,
        "/countries/sa.json": saudi_payload,
        "/countries/us.json": us_payload,
    })


@pytest.fixture
def remote_settings(cache_dir):
    """Settings pointing at a (fake) remote registry."""
    return RegistrySettings(registry_base="https://registry.example.com/registry", cache_dir=cache_dir)


@pytest.fixture
def local_registry(tmp_path, index_payload, saudi_payload, us_payload):
    """A registry mirror on disk: index.json plus countries/<code>.json."""
    root = tmp_path / "registry"
    countries = root / "countries"
    countries.mkdir(parents=True)
    (root / "index.json").write_text(json.dumps(index_payload, ensure_ascii=False), encoding="utf-8")
    (countries / "sa.json").write_text(json.dumps(saudi_payload, ensure_ascii=False), encoding="utf-8")
    (countries / "us.json").write_text(json.dumps(us_payload, ensure_ascii=False), encoding="utf-8")
    return root


@pytest.fixture
def make_client():
    """Factory for FakeClient instances with custom payloads."""
    return FakeClient
