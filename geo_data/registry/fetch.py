"""
Registry Fetch Client
=====================

Bounded-time retrieval of registry payloads from a remote URL or a local
directory. Every failure surfaces as NetworkError so the registry service
can fall back to its stale cache.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

import httpx

from geo_data.errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def is_remote(location: Union[str, Path]) -> bool:
    """True for http(s) URLs, False for local paths."""
    text = str(location)
    return text.startswith("http://") or text.startswith("https://")


def join_location(base: str, *parts: str) -> str:
    """Join path segments onto a URL or a local directory."""
    if is_remote(base):
        return "/".join([base.rstrip("/"), *parts])
    return str(Path(base).joinpath(*parts))


class FetchClient:
    """Fetches and decodes JSON payloads."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.timeout = timeout

    def fetch(self, location: str) -> Any:
        """
        Fetch a JSON payload.

        Args:
            location: http(s) URL or local file path

        Returns:
            The decoded JSON, not yet validated

        Raises:
            NetworkError: on timeout, connection failure, non-success
                status, unreadable file or undecodable body
        """
        if is_remote(location):
            return self._fetch_remote(location)
        return self._fetch_local(location)

    def _fetch_remote(self, url: str) -> Any:
        logger.debug("Fetching %s", url)
        try:
            response = httpx.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.TimeoutException:
            raise NetworkError(
                f"Timed out after {self.timeout:g}s fetching {url}", location=url
            ) from None
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to fetch {url}: {e}", location=url) from e

        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"Failed to fetch {url}: {response.status_code}",
                location=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(
                f"Invalid JSON from {url}: {e}",
                location=url,
                status_code=response.status_code,
            ) from e

    def _fetch_local(self, path: str) -> Any:
        logger.debug("Reading %s", path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise NetworkError(f"Failed to read {path}: {e}", location=path) from e
        except ValueError as e:
            raise NetworkError(f"Invalid JSON in {path}: {e}", location=path) from e
