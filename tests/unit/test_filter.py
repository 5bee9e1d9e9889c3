"""
Tests for dataset projection.
"""

import copy

from geo_data.core.config import GeoDataConfig
from geo_data.registry.filter import filter_name, project
from geo_data.registry.validator import validate_dataset


def _config(languages, coordinates=False):
    return GeoDataConfig(output_dir="./data/geo", languages=languages, include_coordinates=coordinates)


def _dataset(payload):
    return validate_dataset(payload).value


class TestFilterName:

    def test_keeps_requested_languages(self):
        name = {"en": "Riyadh", "ar": "الرياض", "fr": "Riyad"}
        assert filter_name(name, ["ar"]) == {"ar": "الرياض", "en": "Riyadh"}

    def test_follows_requested_order(self):
        name = {"en": "Riyadh", "ar": "الرياض", "fr": "Riyad"}
        assert list(filter_name(name, ["fr", "en"])) == ["fr", "en"]

    def test_missing_languages_are_skipped(self):
        assert filter_name({"en": "Jeddah", "ar": "جدة"}, ["fr", "de"]) == {"en": "Jeddah"}

    def test_no_english_available(self):
        assert filter_name({"ar": "منطقة الرياض"}, ["fr"]) == {}


class TestProject:
    """Language and coordinate projection of whole datasets."""

    def test_riyadh_projection(self, saudi_payload):
        """languages [ar] without coordinates keeps ar plus en only."""
        projected = project(_dataset(saudi_payload), _config(["ar"]))
        riyadh = projected.regions[0].cities[0]

        assert riyadh.name == {"ar": "الرياض", "en": "Riyadh"}
        assert riyadh.latitude is None
        assert riyadh.longitude is None
        assert "latitude" not in riyadh.to_dict()
        assert projected.name == {"ar": "المملكة العربية السعودية", "en": "Saudi Arabia"}

    def test_coordinates_kept_when_requested(self, saudi_payload):
        projected = project(_dataset(saudi_payload), _config(["en"], coordinates=True))
        riyadh = projected.regions[0].cities[0]
        assert riyadh.latitude == 24.7136
        assert riyadh.longitude == 46.6753

    def test_zero_coordinates_survive(self, saudi_payload):
        city = saudi_payload["regions"][0]["cities"][0]
        city["latitude"] = 0
        city["longitude"] = 0.0
        projected = project(_dataset(saudi_payload), _config(["en"], coordinates=True))
        riyadh = projected.regions[0].cities[0]
        assert riyadh.latitude == 0
        assert riyadh.longitude == 0.0
        assert riyadh.to_dict()["latitude"] == 0

    def test_english_always_present(self, saudi_payload):
        projected = project(_dataset(saudi_payload), _config(["fr"]))
        for city in projected.iter_cities():
            assert "en" in city.name
        assert projected.regions[1].name == {"en": "Makkah Region"}

    def test_idempotent(self, saudi_payload):
        config = _config(["ar"], coordinates=True)
        once = project(_dataset(saudi_payload), config)
        twice = project(once, config)
        assert twice == once

    def test_input_not_mutated(self, saudi_payload):
        dataset = _dataset(saudi_payload)
        before = copy.deepcopy(dataset)
        project(dataset, _config(["ar"]))
        assert dataset == before

    def test_scalar_fields_carried_over(self, saudi_payload):
        projected = project(_dataset(saudi_payload), _config(["en"]))
        assert (projected.code, projected.iso3, projected.phone) == ("SA", "SAU", "+966")
        assert (projected.currency, projected.timezone, projected.flag) == ("SAR", "Asia/Riyadh", "🇸🇦")
        assert [r.code for r in projected.regions] == ["01", "02"]
