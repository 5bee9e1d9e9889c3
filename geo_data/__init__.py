"""
geo-data
========

Copy only the countries you need.

Materializes selected countries of the geo-data registry (countries ->
regions -> cities, with multilingual names and optional coordinates) into
a project, keeps them in sync with the registry, works offline from a
local cache, and generates a typed accessor module over whatever is
installed.

Quick Start:
    from geo_data import CountryInstaller, get_config_result

    result = get_config_result()
    installer = CountryInstaller(result.config)
    report = installer.add(["sa", "ae"])
    for outcome in report.outcomes:
        print(outcome)
"""

__version__ = "1.0.0"

from geo_data.errors import (
    ConfigError,
    GeoDataError,
    NetworkError,
    NotFoundError,
    ValidationError,
)

from geo_data.core import (
    GeoDataConfig,
    RegistrySettings,
    get_config_result,
    get_settings,
)

from geo_data.registry import (
    CodeGenerator,
    CountryInstaller,
    RegistryService,
    Resolution,
    ResolveStatus,
    generate,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "ConfigError",
    "GeoDataError",
    "NetworkError",
    "NotFoundError",
    "ValidationError",
    # Core
    "GeoDataConfig",
    "RegistrySettings",
    "get_config_result",
    "get_settings",
    # Registry
    "CodeGenerator",
    "CountryInstaller",
    "RegistryService",
    "Resolution",
    "ResolveStatus",
    "generate",
]
