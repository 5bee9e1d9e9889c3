"""
Registry Data Model
===================

Typed records for the geo-data registry.

Hierarchy:
- RegistryIndex: code -> CountrySummary for every country in the registry
- CountryDataset: one country with its regions
- Region: a first-level subdivision with its cities
- City: a named place with optional coordinates

`from_dict` constructors trust their input: they are used for payloads that
already passed the SchemaValidator (or came out of the cache, which only
ever holds validated payloads). Untrusted JSON goes through
`geo_data.registry.validator` instead.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from geo_data.errors import NotFoundError
from .suggest import suggest_code


LocalizedName = Dict[str, str]


@dataclass
class City:
    """A city. Coordinates are None when absent; 0.0 is a real value."""
    name: LocalizedName
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": dict(self.name)}
        if self.latitude is not None:
            data["latitude"] = self.latitude
        if self.longitude is not None:
            data["longitude"] = self.longitude
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "City":
        return cls(
            name=dict(data["name"]),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )


@dataclass
class Region:
    """A region (state, province, emirate...) of a country."""
    code: str
    name: LocalizedName
    cities: List[City] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": dict(self.name),
            "cities": [c.to_dict() for c in self.cities],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Region":
        return cls(
            code=data["code"],
            name=dict(data["name"]),
            cities=[City.from_dict(c) for c in data.get("cities", [])],
        )


@dataclass
class CountryDataset:
    """Full country -> regions -> cities tree for one country code."""
    code: str
    name: LocalizedName
    phone: str
    currency: str
    timezone: str
    flag: str
    regions: List[Region] = field(default_factory=list)
    iso3: Optional[str] = None

    def iter_cities(self) -> List[City]:
        """All cities across every region, in region order."""
        return [city for region in self.regions for city in region.cities]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with a fixed key order so written files diff cleanly."""
        data: Dict[str, Any] = {"code": self.code}
        if self.iso3 is not None:
            data["iso3"] = self.iso3
        data.update({
            "name": dict(self.name),
            "phone": self.phone,
            "currency": self.currency,
            "timezone": self.timezone,
            "flag": self.flag,
            "regions": [r.to_dict() for r in self.regions],
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CountryDataset":
        return cls(
            code=data["code"],
            iso3=data.get("iso3"),
            name=dict(data["name"]),
            phone=data["phone"],
            currency=data["currency"],
            timezone=data["timezone"],
            flag=data["flag"],
            regions=[Region.from_dict(r) for r in data.get("regions", [])],
        )


@dataclass
class CountrySummary:
    """Index entry describing one available country."""
    name: LocalizedName
    flag: str
    languages: List[str] = field(default_factory=list)

    @property
    def english_name(self) -> str:
        return self.name["en"]

    def display(self, code: str) -> str:
        """Format for display, e.g. '🇸🇦 SA - Saudi Arabia'."""
        return f"{self.flag} {code.upper()} - {self.english_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": dict(self.name),
            "flag": self.flag,
            "languages": list(self.languages),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CountrySummary":
        return cls(
            name=dict(data["name"]),
            flag=data["flag"],
            languages=list(data.get("languages", [])),
        )


@dataclass
class RegistryIndex:
    """The registry's table of contents: every available country."""
    version: str
    countries: Dict[str, CountrySummary] = field(default_factory=dict)

    def __contains__(self, code: str) -> bool:
        return code.lower() in self.countries

    def get(self, code: str) -> Optional[CountrySummary]:
        """Get a country summary by code (case-insensitive)."""
        return self.countries.get(code.lower())

    def get_summary(self, code: str) -> CountrySummary:
        """
        Get a country summary, raising NotFoundError for unknown codes.

        The error carries the closest known code as a suggestion.
        """
        summary = self.get(code)
        if summary is None:
            raise NotFoundError(code.lower(), suggestion=self.suggest(code))
        return summary

    def suggest(self, query: str) -> Optional[str]:
        """Closest known code for a mistyped code or English name."""
        names = {code: s.english_name for code, s in self.countries.items()}
        return suggest_code(query, names)

    def sorted_by_name(self) -> List[str]:
        """Country codes ordered by English name."""
        return sorted(self.countries, key=lambda c: self.countries[c].english_name.lower())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "countries": {code: s.to_dict() for code, s in self.countries.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistryIndex":
        return cls(
            version=data["version"],
            countries={
                code: CountrySummary.from_dict(summary)
                for code, summary in data.get("countries", {}).items()
            },
        )
