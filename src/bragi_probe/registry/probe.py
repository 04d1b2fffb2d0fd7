"""Probe orchestration: reachability, service status, then index enumeration.

Each stage returns a StageResult instead of raising, and ``probe`` composes
them in order. Failures in the first two stages collapse the whole record to
``service_unreachable``; a failure while listing indices only leaves the
backend sub-record marked unreachable.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from urllib.parse import urlsplit

from bragi_probe.config.models import DEFAULT_INDEX_PREFIX
from bragi_probe.registry.errors import DecodeFailure, LabelMalformed, ProbeError
from bragi_probe.registry.fetch import Fetcher
from bragi_probe.registry.labels import decode_index_label, parse_document_count
from bragi_probe.registry.models import (
    Availability,
    BackendAvailability,
    BackendStatus,
    IndexMetadata,
    ServiceStatus,
)

T = TypeVar("T")

STATUS_PATH = "/status"
INDICES_PATH = "/_cat/indices?format=json"

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one probe stage: a value, or the failure that stopped it."""

    value: T | None = None
    error: ProbeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProbeError) -> StageResult[T]:
        return cls(error=error)


def unreachable(name: str, url: str) -> ServiceStatus:
    """The record reported when the service itself cannot be queried."""
    return ServiceStatus(label=name, url=url, version="", availability=Availability.SERVICE_UNREACHABLE)


def split_backend_url(raw: str, default_prefix: str = DEFAULT_INDEX_PREFIX) -> tuple[str, str]:
    """Split a backend URL into its ``scheme://host[:port]`` base and index prefix.

    The prefix is the first path segment, or *default_prefix* when the URL
    has no path. Raises DecodeFailure for URLs without a scheme or host, or
    with an invalid port.
    """
    try:
        parts = urlsplit(raw.strip())
        port = parts.port
    except ValueError as exc:
        raise DecodeFailure(f"Backend URL not parsable: {exc}", raw) from exc
    host = parts.hostname
    if not parts.scheme or not host:
        raise DecodeFailure("Backend URL not parsable: missing scheme or host", raw)

    if ":" in host:
        host = f"[{host}]"
    base = f"{parts.scheme}://{host}"
    if port is not None and _DEFAULT_PORTS.get(parts.scheme) != port:
        base = f"{base}:{port}"

    segments = [s for s in parts.path.split("/") if s]
    return base, segments[0] if segments else default_prefix


class EnvironmentProber:
    """Runs the probe chain for one environment at a time."""

    def __init__(
        self,
        fetcher: Fetcher,
        logger: logging.Logger | None = None,
        default_prefix: str = DEFAULT_INDEX_PREFIX,
    ) -> None:
        self._fetcher = fetcher
        self._logger = logger or logging.getLogger(__name__)
        self._default_prefix = default_prefix

    async def probe(self, name: str, base_url: str) -> ServiceStatus:
        """Return the best-effort status of environment *name* at *base_url*."""
        reached = await self.check_reachable(base_url)
        if not reached.ok:
            self._logger.warning("Environment %s unreachable at %s: %s", name, base_url, reached.error)
            return unreachable(name, base_url)

        service = await self.check_service_status(name, base_url)
        if not service.ok or service.value is None:
            self._logger.warning("Environment %s status not readable: %s", name, service.error)
            return unreachable(name, base_url)

        status = service.value
        assert status.backend is not None
        backend = await self.enumerate_indices(status.backend)
        if not backend.ok or backend.value is None:
            self._logger.warning("Backend of %s unreachable at %s: %s", name, status.backend.url, backend.error)
            return status

        self._logger.info(
            "Environment %s available (version %s, %d indices)",
            name,
            status.version,
            len(backend.value.indices),
        )
        return replace(status, backend=backend.value)

    async def check_reachable(self, base_url: str) -> StageResult[str]:
        self._logger.debug("GET %s", base_url)
        try:
            await self._fetcher.reach(base_url)
        except ProbeError as exc:
            return StageResult.failure(exc)
        return StageResult.success(base_url)

    async def check_service_status(self, name: str, base_url: str) -> StageResult[ServiceStatus]:
        """Query ``{base_url}/status`` and build an available record with a pending backend."""
        status_url = base_url.rstrip("/") + STATUS_PATH
        self._logger.debug("GET %s", status_url)
        try:
            body = await self._fetcher.fetch_json(status_url)
            version, backend_raw = self._read_status_body(body, status_url)
            backend_url, prefix = split_backend_url(backend_raw, self._default_prefix)
        except ProbeError as exc:
            return StageResult.failure(exc)

        # Backend stays unreachable until its indices have been listed.
        backend = BackendStatus(
            label=f"elasticsearch_{name}",
            url=backend_url,
            index_prefix=prefix,
            availability=BackendAvailability.UNREACHABLE,
        )
        return StageResult.success(
            ServiceStatus(
                label=name,
                url=base_url,
                version=version,
                availability=Availability.AVAILABLE,
                backend=backend,
            )
        )

    @staticmethod
    def _read_status_body(body: Any, url: str) -> tuple[str, str]:
        if not isinstance(body, Mapping):
            raise DecodeFailure("Status body is not a JSON object", url)
        version = body.get("version")
        backend_raw = body.get("es")
        if not isinstance(version, str) or not version:
            raise DecodeFailure("Status body has no version", url)
        if not isinstance(backend_raw, str):
            raise DecodeFailure("Status body has no backend URL", url)
        if not isinstance(body.get("status"), str):
            raise DecodeFailure("Status body has no status", url)
        return version, backend_raw

    async def enumerate_indices(self, backend: BackendStatus) -> StageResult[BackendStatus]:
        """List the backend's indices, returning an available backend on success."""
        indices_url = backend.url + INDICES_PATH
        self._logger.debug("GET %s", indices_url)
        try:
            body = await self._fetcher.fetch_json(indices_url)
        except ProbeError as exc:
            return StageResult.failure(exc)
        if not isinstance(body, list):
            return StageResult.failure(DecodeFailure("Index listing is not a JSON array", indices_url))

        observed_at = datetime.now(UTC)
        indices: list[IndexMetadata] = []
        for record in body:
            decoded = self._decode_record(record, observed_at)
            if decoded.ok and decoded.value is not None:
                indices.append(decoded.value)
            else:
                self._logger.warning("Skipping index on %s: %s", backend.label, decoded.error)

        return StageResult.success(
            replace(
                backend,
                availability=BackendAvailability.AVAILABLE,
                indices=tuple(indices),
                observed_at=observed_at,
            )
        )

    @staticmethod
    def _decode_record(record: Any, observed_at: datetime) -> StageResult[IndexMetadata]:
        if not isinstance(record, Mapping) or not isinstance(record.get("index"), str):
            return StageResult.failure(DecodeFailure(f"Index record without a name: {record!r}"))
        try:
            metadata = decode_index_label(
                record["index"],
                document_count=parse_document_count(record.get("docs.count")),
                observed_at=observed_at,
            )
        except LabelMalformed as exc:
            return StageResult.failure(exc)
        return StageResult.success(metadata)
