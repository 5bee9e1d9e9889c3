"""
Registry Module
===============

Access to the geo-data registry and the files it materializes.

Components:
- schemas: typed records (index, datasets, regions, cities)
- validator: shape validation of untyped payloads
- cache: timestamped SQLite cache of validated payloads
- fetch: bounded-time retrieval from a URL or a local mirror
- filter: language / coordinate projection of datasets
- service: the fetch -> validate -> cache -> stale fallback pipeline
- codegen: the generated index.ts / index.js accessor module
- installer: add / update / remove countries in a project

Usage:
    from geo_data.core.config import get_config_result
    from geo_data.registry import RegistryService, generate

    config = get_config_result().config
    service = RegistryService()

    index = service.resolve_index()
    if index.ok:
        print(sorted(index.value.countries))

    dataset = service.resolve_dataset("sa", config)
    if dataset.ok:
        print(dataset.value.name["en"])

    generate(config)
"""

from .schemas import (
    City,
    CountryDataset,
    CountrySummary,
    LocalizedName,
    Region,
    RegistryIndex,
)

from .validator import (
    ValidationResult,
    validate,
    validate_dataset,
    validate_index,
)

from .cache import (
    CacheEntry,
    CacheStats,
    CacheStore,
)

from .fetch import (
    FetchClient,
    is_remote,
)

from .filter import (
    filter_name,
    project,
)

from .service import (
    RegistryService,
    Resolution,
    ResolveStatus,
)

from .codegen import (
    CodeGenerator,
    generate,
    get_installed_countries,
)

from .installer import (
    CountryInstaller,
    InstallOutcome,
    InstallReport,
    InstallStatus,
)

__all__ = [
    # Schemas
    "City",
    "CountryDataset",
    "CountrySummary",
    "LocalizedName",
    "Region",
    "RegistryIndex",
    # Validator
    "ValidationResult",
    "validate",
    "validate_dataset",
    "validate_index",
    # Cache
    "CacheEntry",
    "CacheStats",
    "CacheStore",
    # Fetch
    "FetchClient",
    "is_remote",
    # Filter
    "filter_name",
    "project",
    # Service
    "RegistryService",
    "Resolution",
    "ResolveStatus",
    # Codegen
    "CodeGenerator",
    "generate",
    "get_installed_countries",
    # Installer
    "CountryInstaller",
    "InstallOutcome",
    "InstallReport",
    "InstallStatus",
]
