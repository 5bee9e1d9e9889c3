"""
Schema Validator
================

Validates untyped registry payloads against the registry's shape contracts:
- Index: lowercase two-letter codes mapped to well-formed summaries
- Dataset: required scalar fields plus well-formed regions and cities

Validation stops at the first violated constraint and reports it with its
location. Nothing is coerced: a boolean is not a number, null is not an
absent coordinate, and a missing field is a failure.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from geo_data.errors import ValidationError
from .schemas import City, CountryDataset, CountrySummary, Region, RegistryIndex


T = TypeVar("T")

COUNTRY_CODE_PATTERN = re.compile(r"^[a-z]{2}$")


@dataclass
class ValidationResult(Generic[T]):
    """Outcome of validating one payload."""
    passed: bool
    value: Optional[T] = None
    message: Optional[str] = None

    def __str__(self) -> str:
        if self.passed:
            return "valid"
        return f"invalid: {self.message}"


# =============================================================================
# FIELD CHECKS
# =============================================================================

def _require_object(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError("expected an object", path)
    return value


def _require_list(value: Any, path: str) -> List[Any]:
    if not isinstance(value, list):
        raise ValidationError("expected an array", path)
    return value


def _require_string(data: Dict[str, Any], key: str, path: str) -> str:
    if key not in data:
        raise ValidationError("required", _join(path, key))
    value = data[key]
    if not isinstance(value, str):
        raise ValidationError("expected a string", _join(path, key))
    return value


def _optional_string(data: Dict[str, Any], key: str, path: str) -> Optional[str]:
    if key not in data:
        return None
    return _require_string(data, key, path)


def _optional_number(data: Dict[str, Any], key: str, path: str) -> Optional[float]:
    if key not in data:
        return None
    value = data[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("expected a number", _join(path, key))
    return value


def _require_name(data: Dict[str, Any], path: str, require_english: bool) -> Dict[str, str]:
    name_path = _join(path, "name")
    if "name" not in data:
        raise ValidationError("required", name_path)
    name = _require_object(data["name"], name_path)
    for lang, label in name.items():
        if not isinstance(label, str):
            raise ValidationError("expected a string", _join(name_path, lang))
    if require_english and "en" not in name:
        raise ValidationError('missing required "en" entry', name_path)
    return dict(name)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


# =============================================================================
# SHAPES
# =============================================================================

def _parse_city(value: Any, path: str) -> City:
    data = _require_object(value, path)
    return City(
        name=_require_name(data, path, require_english=True),
        latitude=_optional_number(data, "latitude", path),
        longitude=_optional_number(data, "longitude", path),
    )


def _parse_region(value: Any, path: str) -> Region:
    data = _require_object(value, path)
    code = _require_string(data, "code", path)
    name = _require_name(data, path, require_english=False)
    if "cities" not in data:
        raise ValidationError("required", _join(path, "cities"))
    cities = _require_list(data["cities"], _join(path, "cities"))
    return Region(
        code=code,
        name=name,
        cities=[_parse_city(c, f"{path}.cities[{i}]") for i, c in enumerate(cities)],
    )


def _parse_dataset(value: Any) -> CountryDataset:
    data = _require_object(value, "")
    code = _require_string(data, "code", "")
    iso3 = _optional_string(data, "iso3", "")
    name = _require_name(data, "", require_english=True)
    phone = _require_string(data, "phone", "")
    currency = _require_string(data, "currency", "")
    timezone = _require_string(data, "timezone", "")
    flag = _require_string(data, "flag", "")
    if "regions" not in data:
        raise ValidationError("required", "regions")
    raw_regions = _require_list(data["regions"], "regions")

    regions: List[Region] = []
    seen_codes = set()
    for i, raw_region in enumerate(raw_regions):
        region = _parse_region(raw_region, f"regions[{i}]")
        if region.code in seen_codes:
            raise ValidationError(f'duplicate region code "{region.code}"', f"regions[{i}].code")
        seen_codes.add(region.code)
        regions.append(region)

    return CountryDataset(
        code=code,
        iso3=iso3,
        name=name,
        phone=phone,
        currency=currency,
        timezone=timezone,
        flag=flag,
        regions=regions,
    )


def _parse_summary(value: Any, path: str) -> CountrySummary:
    data = _require_object(value, path)
    name_path = _join(path, "name")
    if "name" not in data:
        raise ValidationError("required", name_path)
    raw_name = _require_object(data["name"], name_path)
    english = _require_string(raw_name, "en", name_path)
    if not english.strip():
        raise ValidationError("must not be empty", _join(name_path, "en"))
    name = {"en": english}
    arabic = _optional_string(raw_name, "ar", name_path)
    if arabic is not None:
        name["ar"] = arabic

    flag = _require_string(data, "flag", path)

    languages_path = _join(path, "languages")
    if "languages" not in data:
        raise ValidationError("required", languages_path)
    languages: List[str] = []
    for i, lang in enumerate(_require_list(data["languages"], languages_path)):
        if not isinstance(lang, str):
            raise ValidationError("expected a string", f"{languages_path}[{i}]")
        if lang not in languages:
            languages.append(lang)

    return CountrySummary(name=name, flag=flag, languages=languages)


def _parse_index(value: Any) -> RegistryIndex:
    data = _require_object(value, "")
    version = _require_string(data, "version", "")
    if "countries" not in data:
        raise ValidationError("required", "countries")
    raw_countries = _require_object(data["countries"], "countries")

    countries: Dict[str, CountrySummary] = {}
    for code, raw_summary in raw_countries.items():
        path = f"countries.{code}"
        if not COUNTRY_CODE_PATTERN.match(code):
            raise ValidationError("country codes must be two lowercase letters", path)
        countries[code] = _parse_summary(raw_summary, path)

    return RegistryIndex(version=version, countries=countries)


# =============================================================================
# PUBLIC API
# =============================================================================

_SHAPES: Dict[type, Callable[[Any], Any]] = {
    RegistryIndex: _parse_index,
    CountryDataset: _parse_dataset,
}


def validate(payload: Any, shape: Type[T]) -> ValidationResult[T]:
    """
    Validate an untyped payload against a shape contract.

    Args:
        payload: Decoded JSON of unknown structure
        shape: RegistryIndex or CountryDataset

    Returns:
        ValidationResult holding the typed record, or the first violation
    """
    try:
        parser = _SHAPES[shape]
    except KeyError:
        raise TypeError(f"No shape contract for {shape!r}") from None

    try:
        return ValidationResult(passed=True, value=parser(payload))
    except ValidationError as e:
        return ValidationResult(passed=False, message=str(e))


def validate_index(payload: Any) -> ValidationResult[RegistryIndex]:
    """Validate a registry index payload."""
    return validate(payload, RegistryIndex)


def validate_dataset(payload: Any) -> ValidationResult[CountryDataset]:
    """Validate a country dataset payload."""
    return validate(payload, CountryDataset)
