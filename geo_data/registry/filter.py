"""
Dataset Filter
==============

Projects a validated country dataset down to the languages and coordinate
preference of one project config.

The projection is pure: it builds new records and never touches the
dataset it was given, so the same validated dataset can be projected for
several configs in a row.
"""

from typing import Iterable

from geo_data.core.config import GeoDataConfig
from .schemas import City, CountryDataset, LocalizedName, Region


FALLBACK_LANGUAGE = "en"


def filter_name(name: LocalizedName, languages: Iterable[str]) -> LocalizedName:
    """
    Keep only the requested languages, always keeping English.

    Args:
        name: Language tag -> label map
        languages: Language tags to keep, in output order

    Returns:
        A new map; English is re-added when it was dropped and exists
    """
    filtered: LocalizedName = {}
    for lang in languages:
        if lang in name:
            filtered[lang] = name[lang]
    if FALLBACK_LANGUAGE not in filtered and FALLBACK_LANGUAGE in name:
        filtered[FALLBACK_LANGUAGE] = name[FALLBACK_LANGUAGE]
    return filtered


def _project_city(city: City, config: GeoDataConfig) -> City:
    projected = City(name=filter_name(city.name, config.languages))
    if config.include_coordinates:
        # Presence test, not truthiness: 0.0 is the equator / prime meridian
        if city.latitude is not None:
            projected.latitude = city.latitude
        if city.longitude is not None:
            projected.longitude = city.longitude
    return projected


def project(dataset: CountryDataset, config: GeoDataConfig) -> CountryDataset:
    """Build the config-specific view of a dataset."""
    return CountryDataset(
        code=dataset.code,
        iso3=dataset.iso3,
        name=filter_name(dataset.name, config.languages),
        phone=dataset.phone,
        currency=dataset.currency,
        timezone=dataset.timezone,
        flag=dataset.flag,
        regions=[
            Region(
                code=region.code,
                name=filter_name(region.name, config.languages),
                cities=[_project_city(city, config) for city in region.cities],
            )
            for region in dataset.regions
        ],
    )
