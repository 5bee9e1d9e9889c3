"""
geo-data Configuration
======================

Two layers of configuration:

- GeoDataConfig: per-project settings stored in geo-data.json (or
  geo-data.yaml) at the project root: where datasets go, which languages
  to keep, whether to keep coordinates and whether to emit TypeScript.
- RegistrySettings: per-process settings resolved from the environment:
  registry location, cache root and fetch timeout.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from geo_data.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE = "geo-data.json"
CONFIG_CANDIDATES = ("geo-data.json", "geo-data.yaml", "geo-data.yml")
CONFIG_SCHEMA_URL = "https://raw.githubusercontent.com/H4ck3r-x0/geo-data/main/schema.json"

DEFAULT_REGISTRY = "https://cdn.jsdelivr.net/gh/H4ck3r-x0/geo-data@main/registry"
REGISTRY_ENV_VAR = "GEO_DATA_REGISTRY"
CACHE_DIR_ENV_VAR = "GEO_DATA_CACHE_DIR"

VALID_LANGUAGES = (
    "en", "ar", "de", "es", "fr", "hi", "it", "ja", "ko",
    "nl", "pl", "pt", "pt-BR", "ru", "tr", "uk", "zh",
)


# =============================================================================
# PROJECT CONFIG
# =============================================================================

@dataclass
class GeoDataConfig:
    """Project configuration."""
    output_dir: str
    languages: List[str] = field(default_factory=lambda: ["en"])
    include_coordinates: bool = False
    typescript: bool = False
    schema: Optional[str] = CONFIG_SCHEMA_URL

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    @property
    def module_name(self) -> str:
        """File name of the generated accessor module."""
        return "index.ts" if self.typescript else "index.js"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.schema:
            data["$schema"] = self.schema
        data.update({
            "outputDir": self.output_dir,
            "languages": list(self.languages),
            "includeCoordinates": self.include_coordinates,
            "typescript": self.typescript,
        })
        return data

    @classmethod
    def from_file(cls, path: Path) -> "GeoDataConfig":
        """Load and validate a config file (JSON or YAML)."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix in (".yaml", ".yml"):
                    raw = yaml.safe_load(f)
                else:
                    raw = json.load(f)
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not parse {path.name}: {e}") from e
        return validate_config(raw)

    def save(self, path: Optional[Path] = None) -> Path:
        """Save configuration; YAML when the target has a YAML suffix."""
        path = path or (Path.cwd() / CONFIG_FILE)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")
        return path


def validate_config(raw: Any) -> GeoDataConfig:
    """
    Validate raw config data.

    Unknown language codes are allowed but logged as warnings.

    Raises:
        ConfigError: on the first invalid value
    """
    if not isinstance(raw, dict):
        raise ConfigError("Config must be an object")

    output_dir = raw.get("outputDir")
    if not isinstance(output_dir, str) or not output_dir.strip():
        raise ConfigError("outputDir must be a non-empty string")

    languages = raw.get("languages")
    if not isinstance(languages, list) or not languages:
        raise ConfigError("languages must be a non-empty array")
    if not all(isinstance(lang, str) for lang in languages):
        raise ConfigError("languages must contain only strings")

    for key in ("includeCoordinates", "typescript"):
        if not isinstance(raw.get(key), bool):
            raise ConfigError(f"{key} must be a boolean")

    schema = raw.get("$schema")
    if schema is not None and not isinstance(schema, str):
        raise ConfigError("$schema must be a string")

    for lang in languages:
        if lang not in VALID_LANGUAGES:
            logger.warning('Unknown language code "%s"', lang)

    return GeoDataConfig(
        output_dir=output_dir,
        languages=list(languages),
        include_coordinates=raw["includeCoordinates"],
        typescript=raw["typescript"],
        schema=schema,
    )


class ConfigStatus(str, Enum):
    """Outcome of looking up the project config."""
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass
class ConfigResult:
    """Project config lookup result."""
    status: ConfigStatus
    config: Optional[GeoDataConfig] = None
    path: Optional[Path] = None
    error: Optional[str] = None


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """Find the project config file in standard locations."""
    root = cwd or Path.cwd()
    for name in CONFIG_CANDIDATES:
        candidate = root / name
        if candidate.exists():
            return candidate
    return None


def get_config_result(cwd: Optional[Path] = None) -> ConfigResult:
    """Load the project config, distinguishing missing from invalid."""
    path = find_config_file(cwd)
    if path is None:
        return ConfigResult(status=ConfigStatus.NOT_FOUND)

    try:
        config = GeoDataConfig.from_file(path)
    except (ConfigError, OSError) as e:
        return ConfigResult(status=ConfigStatus.INVALID, path=path, error=str(e))

    return ConfigResult(status=ConfigStatus.OK, config=config, path=path)


def detect_defaults(cwd: Optional[Path] = None) -> GeoDataConfig:
    """Sensible defaults for a project, based on what it contains."""
    root = cwd or Path.cwd()
    has_src = (root / "src").is_dir()
    has_tsconfig = (root / "tsconfig.json").exists()

    return GeoDataConfig(
        output_dir="./src/data/geo" if has_src else "./data/geo",
        languages=["en"],
        include_coordinates=False,
        typescript=has_tsconfig,
    )


# =============================================================================
# PROCESS SETTINGS
# =============================================================================

@dataclass
class RegistrySettings:
    """Where the registry lives and how to reach it."""
    registry_base: str = DEFAULT_REGISTRY
    cache_dir: Path = field(default_factory=lambda: Path.home() / ".cache" / "geo-data")
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "RegistrySettings":
        """Resolve settings from GEO_DATA_REGISTRY / GEO_DATA_CACHE_DIR."""
        settings = cls()
        registry = os.environ.get(REGISTRY_ENV_VAR)
        if registry:
            settings.registry_base = registry
        cache_dir = os.environ.get(CACHE_DIR_ENV_VAR)
        if cache_dir:
            settings.cache_dir = Path(cache_dir).expanduser()
        return settings


# Resolved once per process
_settings: Optional[RegistrySettings] = None


def get_settings() -> RegistrySettings:
    """Get or resolve the process-wide registry settings."""
    global _settings
    if _settings is None:
        _settings = RegistrySettings.from_env()
    return _settings


def set_settings(settings: Optional[RegistrySettings]) -> None:
    """Override (or with None, reset) the process-wide settings."""
    global _settings
    _settings = settings
