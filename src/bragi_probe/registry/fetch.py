"""HTTP access for probes, behind a small fetcher protocol."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Protocol

import httpx

from bragi_probe.registry.errors import DecodeFailure, TransportFailure


class Fetcher(Protocol):
    """Capability the prober needs from the transport layer."""

    async def reach(self, url: str) -> None: ...

    async def fetch_json(self, url: str) -> Any: ...


class HttpxFetcher:
    """Fetcher backed by httpx.

    Used as an async context manager, a single client is shared by every
    request of a probing pass. Outside a context each request opens its own
    short-lived client.
    """

    def __init__(self, timeout: float = 5.0, client: httpx.AsyncClient | None = None) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpxFetcher:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.get(url)
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.get(url)
        except httpx.TimeoutException as exc:
            raise TransportFailure(f"Timeout after {self._timeout}s", url) from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Request failed: {exc}", url) from exc
        except httpx.InvalidURL as exc:
            raise TransportFailure(f"Invalid URL: {exc}", url) from exc

    async def reach(self, url: str) -> None:
        """Succeed if *url* answers with any HTTP response at all."""
        await self._get(url)

    async def fetch_json(self, url: str) -> Any:
        resp = await self._get(url)
        if not resp.is_success:
            raise TransportFailure(f"HTTP {resp.status_code}", url)
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeFailure(f"Response body is not JSON: {exc}", url) from exc
