"""Catalog provider client for title metadata, discovery and availability.

This module wraps the TMDb v3 API. It provides:

- An async HTTP client with bearer authentication and a bounded timeout
- Typed helpers for discover, trending, multi-search and title details
- Concurrent hydration of title ids with per-item failure isolation
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from whattowatch.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)

PLACEHOLDER_POSTER = "/placeholder-poster.png"


class CatalogError(RuntimeError):
    """Raised when the catalog provider cannot satisfy a request."""


@dataclass(frozen=True)
class CatalogConfig:
    """Immutable configuration for catalog operations."""

    base_url: str
    access_token: str
    image_base_url: str
    timeout_seconds: float
    watch_region: str


@dataclass(frozen=True)
class TitleKey:
    """Identifies a catalog title across media types."""

    movie_id: str
    media_type: str


def load_catalog_config() -> CatalogConfig:
    """Build configuration object from global settings."""

    return CatalogConfig(
        base_url=settings.tmdb_base_url,
        access_token=settings.tmdb_access_token,
        image_base_url=settings.tmdb_image_base_url,
        timeout_seconds=float(settings.tmdb_http_timeout_seconds),
        watch_region=settings.watch_region,
    )


def poster_url(path: str | None, size: str = "w500") -> str:
    """Return an absolute poster URL, or the placeholder when the title has none."""
    if not path:
        return PLACEHOLDER_POSTER
    return f"{settings.tmdb_image_base_url}/{size}{path}"


def release_year(details: Mapping[str, Any]) -> int:
    """Return the release (or first air) year of a title, 0 when unknown."""
    date_str = details.get("release_date") or details.get("first_air_date") or ""
    try:
        return int(date_str[:4])
    except ValueError:
        return 0


def display_title(details: Mapping[str, Any]) -> str:
    return details.get("title") or details.get("name") or "Unknown"


class CatalogClient:
    """HTTP client wrapper for catalog provider interactions."""

    def __init__(
        self,
        config: CatalogConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_catalog_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                headers = {"Content-Type": "application/json;charset=utf-8"}
                if self.config.access_token:
                    headers["Authorization"] = f"Bearer {self.config.access_token}"
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    headers=headers,
                    transport=self._transport,
                )
        return self._client

    async def _get(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        client = await self._ensure_client()
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise CatalogError(f"Catalog request failed: {exc}") from exc

        if response.status_code >= 400:
            raise CatalogError(
                f"Catalog API error: {response.status_code} {response.reason_phrase}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise CatalogError("Catalog returned a non-JSON response") from exc

    async def discover(self, media_type: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """Run a faceted discover query for one media type."""
        return await self._get(f"/discover/{media_type}", params)

    async def trending(self, page: int = 1) -> dict[str, Any]:
        """Return the mixed movie/tv trending feed for today."""
        return await self._get("/trending/all/day", {"page": str(page)})

    async def search_multi(self, query: str, page: int = 1) -> dict[str, Any]:
        """Free-text search across movies, shows and people."""
        return await self._get(
            "/search/multi",
            {"query": query, "page": str(page), "include_adult": "false"},
        )

    async def details(self, movie_id: str, media_type: str) -> dict[str, Any]:
        """Fetch full details for a single title."""
        return await self._get(f"/{media_type}/{movie_id}")

    async def list_watch_providers(self) -> list[dict[str, Any]]:
        """Return the streaming services available in the configured region.

        Sorted by the provider's display priority, then by name.
        """
        payload = await self._get(
            "/watch/providers/movie", {"watch_region": self.config.watch_region}
        )
        providers = list(payload.get("results") or [])
        providers.sort(
            key=lambda p: (
                p.get("display_priority") if p.get("display_priority") is not None else 999,
                p.get("provider_name") or "",
            )
        )
        return providers

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


async def hydrate_titles(
    catalog: CatalogClient, keys: Iterable[TitleKey]
) -> list[tuple[TitleKey, dict[str, Any]]]:
    """Resolve title keys to details concurrently.

    A failed lookup drops only that title. Surviving titles keep input order.
    """
    key_list = list(keys)
    results = await asyncio.gather(
        *(catalog.details(key.movie_id, key.media_type) for key in key_list),
        return_exceptions=True,
    )

    hydrated: list[tuple[TitleKey, dict[str, Any]]] = []
    for key, result in zip(key_list, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.warning(
                "Error hydrating %s/%s: %s", key.media_type, key.movie_id, result
            )
            continue
        hydrated.append((key, result))
    return hydrated


class _CatalogClientSingleton:
    """Singleton wrapper for CatalogClient."""

    _instance: CatalogClient | None = None

    @classmethod
    def get_instance(cls) -> CatalogClient:
        """Get or create the singleton CatalogClient instance."""
        if cls._instance is None:
            cls._instance = CatalogClient()
        return cls._instance


def get_catalog_client() -> CatalogClient:
    """Return a singleton catalog client instance."""
    return _CatalogClientSingleton.get_instance()
