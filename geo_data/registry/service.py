"""
Registry Service
================

Resolves the registry index and individual country datasets through the
fetch -> validate -> cache pipeline.

Policy, shared by both entry points:
1. Local registry: fetch, validate, return. No caching.
2. Remote registry: serve a fresh cache entry when there is one.
3. Otherwise fetch. On NetworkError fall back to the cache regardless of
   age (one warning), or re-raise when nothing is cached.
4. Validate what was fetched. Invalid payloads are reported and never
   cached.
5. Cache the validated payload, then return it.

Because only validated payloads reach the cache, every cache hit (fresh
or stale) is served without re-validation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Literal, Optional, TypeVar

from geo_data.core.config import GeoDataConfig, RegistrySettings, get_settings
from geo_data.errors import NetworkError, NotFoundError
from .cache import CacheStats, CacheStore
from .fetch import FetchClient, is_remote, join_location
from .filter import project
from .schemas import CountryDataset, RegistryIndex
from .validator import ValidationResult, validate_dataset, validate_index

logger = logging.getLogger(__name__)

T = TypeVar("T")

INDEX_CACHE_KEY = "registry-index"
INDEX_MAX_AGE_SECONDS = 60 * 60
DATASET_MAX_AGE_SECONDS = 24 * 60 * 60

Source = Literal["local", "cache", "network", "stale-cache"]


class ResolveStatus(str, Enum):
    """Outcome tags shared by registry lookups."""
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass
class Resolution(Generic[T]):
    """Result of resolving the index or a dataset."""
    status: ResolveStatus
    value: Optional[T] = None
    message: Optional[str] = None
    source: Optional[Source] = None

    @property
    def ok(self) -> bool:
        return self.status == ResolveStatus.OK


def dataset_cache_key(code: str) -> str:
    return f"country-{code.lower()}"


class RegistryService:
    """Cached, validated access to the geo-data registry."""

    def __init__(
        self,
        settings: Optional[RegistrySettings] = None,
        cache: Optional[CacheStore] = None,
        client: Optional[FetchClient] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache or CacheStore(self.settings.cache_dir)
        self.client = client or FetchClient(timeout=self.settings.timeout)

    @property
    def is_remote(self) -> bool:
        return is_remote(self.settings.registry_base)

    def index_location(self) -> str:
        return join_location(self.settings.registry_base, "index.json")

    def dataset_location(self, code: str) -> str:
        return join_location(self.settings.registry_base, "countries", f"{code.lower()}.json")

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def resolve_index(self) -> Resolution[RegistryIndex]:
        """
        Resolve the registry index (code -> summary).

        Raises:
            NetworkError: when the registry is unreachable and nothing is cached
        """
        return self._resolve(
            location=self.index_location(),
            cache_key=INDEX_CACHE_KEY,
            max_age=INDEX_MAX_AGE_SECONDS,
            validator=validate_index,
            from_cache=RegistryIndex.from_dict,
            label="Registry index",
        )

    def resolve_dataset(
        self,
        code: str,
        config: GeoDataConfig,
        index: Optional[RegistryIndex] = None,
    ) -> Resolution[CountryDataset]:
        """
        Resolve one country's dataset, projected for the given config.

        Args:
            code: Country code (case-insensitive)
            config: Project config driving the projection
            index: When given, codes missing from it resolve to NOT_FOUND
                without touching the cache or the network

        Raises:
            NetworkError: when the registry is unreachable and nothing is cached
        """
        code = code.lower()
        if index is not None:
            try:
                index.get_summary(code)
            except NotFoundError as e:
                return Resolution(status=ResolveStatus.NOT_FOUND, message=str(e))

        resolution = self._resolve(
            location=self.dataset_location(code),
            cache_key=dataset_cache_key(code),
            max_age=DATASET_MAX_AGE_SECONDS,
            validator=validate_dataset,
            from_cache=CountryDataset.from_dict,
            label=f'Country data for "{code}"',
        )
        if resolution.ok:
            resolution.value = project(resolution.value, config)
        return resolution

    def clear_cache(self) -> None:
        """Drop every cached payload."""
        self.cache.clear()

    def cache_stats(self) -> Optional[CacheStats]:
        """Cache size summary, or None when nothing is cached."""
        return self.cache.stats()

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _resolve(
        self,
        location: str,
        cache_key: str,
        max_age: float,
        validator: Callable[[Any], ValidationResult[T]],
        from_cache: Callable[[Any], T],
        label: str,
    ) -> Resolution[T]:
        if not self.is_remote:
            return self._validated(self.client.fetch(location), validator, label, source="local")

        cached = self.cache.get(cache_key, max_age)
        if cached is not None:
            return Resolution(status=ResolveStatus.OK, value=from_cache(cached), source="cache")

        try:
            payload = self.client.fetch(location)
        except NetworkError as e:
            stale = self.cache.get_ignoring_age(cache_key)
            if stale is None:
                raise
            logger.warning("Network unavailable, using cached data (%s)", e)
            return Resolution(status=ResolveStatus.OK, value=from_cache(stale), source="stale-cache")

        resolution = self._validated(payload, validator, label, source="network")
        if resolution.ok:
            self.cache.put(cache_key, resolution.value.to_dict())
        return resolution

    def _validated(
        self,
        payload: Any,
        validator: Callable[[Any], ValidationResult[T]],
        label: str,
        source: Source,
    ) -> Resolution[T]:
        result = validator(payload)
        if not result.passed:
            logger.warning("%s failed validation: %s", label, result.message)
            return Resolution(status=ResolveStatus.INVALID, message=result.message, source=source)
        return Resolution(status=ResolveStatus.OK, value=result.value, source=source)
