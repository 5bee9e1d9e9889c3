"""
Accessor Module Generator
=========================

Generates the index.ts / index.js module that exposes the datasets
installed in a project's output directory.

The generated module exports:
- countries: installed datasets keyed by upper-case country code
- getCountry, getRegions, getCities, getAllCities
- getLocalizedName (requested language -> English -> first available)
- getCountryCodes, isValidCountryCode

Both variants share the same function bodies; only declarations carry
type annotations. Codes are sorted and no timestamp is written, so the
output depends only on which datasets are installed.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from geo_data.core.config import GeoDataConfig
from geo_data.core.files import write_text_atomic

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"

_IDENTIFIER_KEY = re.compile(r"^[A-Z_][A-Z0-9_]*$")


def installed_dataset_files(output_dir: Path) -> Dict[str, str]:
    """
    Map installed country codes to their dataset file names.

    Returns:
        Lowercase code -> file name, sorted by code. Empty when the
        directory does not exist.
    """
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        return {}

    found: Dict[str, str] = {}
    for path in sorted(output_dir.iterdir()):
        name = path.name
        if not path.is_file() or name.startswith("."):
            continue
        if not name.endswith(".json") or name == INDEX_FILE:
            continue
        found.setdefault(path.stem.lower(), name)

    return {code: found[code] for code in sorted(found)}


def get_installed_countries(output_dir: Path) -> List[str]:
    """Sorted lowercase codes of the datasets in output_dir."""
    return list(installed_dataset_files(output_dir))


@dataclass
class _Helper:
    """One exported function, with per-variant signatures and a shared body."""
    name: str
    ts_params: str
    ts_returns: str
    js_params: str
    doc: str
    body: List[str]


_HELPERS: List[_Helper] = [
    _Helper(
        name="isValidCountryCode",
        ts_params="code: string",
        ts_returns="code is CountryCode | Lowercase<CountryCode>",
        js_params="code",
        doc="True when `code` (any case) is an installed country. Narrows upper- and lower-case codes.",
        body=[
            "return INSTALLED.has(String(code).toUpperCase());",
        ],
    ),
    _Helper(
        name="getCountry",
        ts_params="code: string",
        ts_returns="Country | undefined",
        js_params="code",
        doc="Installed country by code (any case), or undefined.",
        body=[
            "const key = String(code).toUpperCase();",
            "return INSTALLED.has(key) ? byCode[key] : undefined;",
        ],
    ),
    _Helper(
        name="getRegions",
        ts_params="code: string",
        ts_returns="Region[]",
        js_params="code",
        doc="Regions of a country; empty when the country is not installed.",
        body=[
            "const country = getCountry(code);",
            "return country ? country.regions : [];",
        ],
    ),
    _Helper(
        name="getCities",
        ts_params="code: string, regionCode?: string",
        ts_returns="City[]",
        js_params="code, regionCode",
        doc="Cities of a country, or of one of its regions when regionCode is given.",
        body=[
            "const regions = getRegions(code);",
            "if (regionCode === undefined) {",
            "  return regions.flatMap((region) => region.cities);",
            "}",
            "const region = regions.find((r) => r.code === regionCode);",
            "return region ? region.cities : [];",
        ],
    ),
    _Helper(
        name="getAllCities",
        ts_params="",
        ts_returns="City[]",
        js_params="",
        doc="Every city of every installed country.",
        body=[
            "return COUNTRY_CODES.flatMap((code) => getCities(code));",
        ],
    ),
    _Helper(
        name="getLocalizedName",
        ts_params="entity: { name?: LocalizedName } | null | undefined, lang: string",
        ts_returns="string",
        js_params="entity, lang",
        doc="Name in `lang`, falling back to English, then to the first available name.",
        body=[
            "const name = (entity && entity.name) || EMPTY_NAME;",
            "if (Object.prototype.hasOwnProperty.call(name, lang)) {",
            "  return name[lang];",
            "}",
            'if (Object.prototype.hasOwnProperty.call(name, "en")) {',
            '  return name["en"];',
            "}",
            "const keys = Object.keys(name);",
            'return keys.length > 0 ? name[keys[0]] : "";',
        ],
    ),
    _Helper(
        name="getCountryCodes",
        ts_params="",
        ts_returns="CountryCode[]",
        js_params="",
        doc="Installed country codes, upper-case and sorted.",
        body=[
            "return [...COUNTRY_CODES];",
        ],
    ),
]


class CodeGenerator:
    """Generates the accessor module for a project's installed datasets."""

    SECTION_RULE = "// " + "=" * 77

    def __init__(self, config: GeoDataConfig):
        self.config = config

    @property
    def typescript(self) -> bool:
        return self.config.typescript

    @property
    def output_path(self) -> Path:
        return self.config.output_path / self.config.module_name

    def generate(self) -> Path:
        """Scan the output directory and write the accessor module."""
        files = installed_dataset_files(self.config.output_path)
        content = self.generate_all(files)
        size = write_text_atomic(self.output_path, content)
        logger.debug("Wrote %s (%d countries, %d bytes)", self.output_path, len(files), size)
        return self.output_path

    def generate_all(self, files: Optional[Dict[str, str]] = None) -> str:
        """
        Render the module source.

        Args:
            files: code -> dataset file name; scanned from the output
                directory when omitted
        """
        if files is None:
            files = installed_dataset_files(self.config.output_path)
        codes = sorted(files)

        lines = [
            self.SECTION_RULE,
            "// AUTO-GENERATED BY geo-data - DO NOT EDIT MANUALLY",
            "// Run `geo-data generate` after changing the installed countries.",
            self.SECTION_RULE,
            "",
        ]
        lines.extend(self._generate_imports(codes, files))

        if self.typescript:
            lines.extend(self._generate_types(codes))

        lines.extend(self._generate_data(codes))
        lines.extend(self._generate_helpers())

        return "\n".join(lines).rstrip("\n") + "\n"

    def _section(self, title: str) -> List[str]:
        return [self.SECTION_RULE, f"// {title}", self.SECTION_RULE, ""]

    def _generate_imports(self, codes: List[str], files: Dict[str, str]) -> List[str]:
        if not codes:
            return []
        attributes = "" if self.typescript else ' with { type: "json" }'
        lines = [
            f'import {self._identifier(code)} from "./{files[code]}"{attributes};'
            for code in codes
        ]
        lines.append("")
        return lines

    def _generate_types(self, codes: List[str]) -> List[str]:
        union = " | ".join(f'"{code.upper()}"' for code in codes) or "never"
        return self._section("TYPES") + [
            "export type LocalizedName = Record<string, string>;",
            "",
            "export interface City {",
            "  name: LocalizedName;",
            "  latitude?: number;",
            "  longitude?: number;",
            "}",
            "",
            "export interface Region {",
            "  code: string;",
            "  name: LocalizedName;",
            "  cities: City[];",
            "}",
            "",
            "export interface Country {",
            "  code: string;",
            "  iso3?: string;",
            "  name: LocalizedName;",
            "  phone: string;",
            "  currency: string;",
            "  timezone: string;",
            "  flag: string;",
            "  regions: Region[];",
            "}",
            "",
            f"export type CountryCode = {union};",
            "",
        ]

    def _generate_data(self, codes: List[str]) -> List[str]:
        lines = self._section("DATA")
        code_list = "[" + ", ".join(f'"{code.upper()}"' for code in codes) + "]"

        if self.typescript:
            lines.append("export const countries: Record<CountryCode, Country> = {")
        else:
            lines.append("export const countries = {")
        for code in codes:
            value = self._identifier(code)
            if self.typescript:
                value += " as Country"
            lines.append(f"  {self._object_key(code.upper())}: {value},")
        lines.append("};")
        lines.append("")

        if self.typescript:
            lines.extend([
                f"const COUNTRY_CODES: readonly CountryCode[] = {code_list};",
                "const INSTALLED: ReadonlySet<string> = new Set<string>(COUNTRY_CODES);",
                "const byCode: Record<string, Country | undefined> = countries;",
                "const EMPTY_NAME: LocalizedName = {};",
            ])
        else:
            lines.extend([
                f"const COUNTRY_CODES = {code_list};",
                "const INSTALLED = new Set(COUNTRY_CODES);",
                "const byCode = countries;",
                "const EMPTY_NAME = {};",
            ])
        lines.append("")
        return lines

    def _generate_helpers(self) -> List[str]:
        lines = self._section("HELPERS")
        for helper in _HELPERS:
            lines.append(f"/** {helper.doc} */")
            if self.typescript:
                lines.append(
                    f"export function {helper.name}({helper.ts_params}): {helper.ts_returns} {{"
                )
            else:
                lines.append(f"export function {helper.name}({helper.js_params}) {{")
            lines.extend(f"  {line}" for line in helper.body)
            lines.append("}")
            lines.append("")
        return lines

    def _identifier(self, code: str) -> str:
        """Import binding for a dataset; suffixed so 'do' or 'in' stay legal."""
        base = re.sub(r"[^A-Za-z0-9_$]", "_", code)
        if base[:1].isdigit():
            base = "_" + base
        return f"{base}Data"

    def _object_key(self, key: str) -> str:
        if _IDENTIFIER_KEY.match(key):
            return key
        return '"' + key.replace("\\", "\\\\").replace('"', '\\"') + '"'


def generate(config: GeoDataConfig) -> Path:
    """Regenerate the accessor module for a project."""
    return CodeGenerator(config).generate()
