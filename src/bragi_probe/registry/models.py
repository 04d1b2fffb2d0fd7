"""Immutable status records produced by a probe."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Optional


def _now() -> datetime:
    return datetime.now(UTC)


def _iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


class Availability(StrEnum):
    """Overall state of a probed service."""

    AVAILABLE = "available"
    SERVICE_UNREACHABLE = "service_unreachable"
    BACKEND_UNREACHABLE = "backend_unreachable"


class BackendAvailability(StrEnum):
    AVAILABLE = "available"
    UNREACHABLE = "unreachable"


class PrivacyTier(StrEnum):
    PRIVATE = "private"
    PUBLIC = "public"


@dataclass(frozen=True)
class IndexMetadata:
    """Metadata decoded from a single backend index name."""

    label: str
    service_type: str
    coverage_region: str
    privacy_tier: PrivacyTier
    created_at: datetime
    document_count: int = 0
    observed_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "label": self.label,
            "serviceType": self.service_type,
            "coverageRegion": self.coverage_region,
        }
        # Only restricted indices carry the tier in the rendered output.
        if self.privacy_tier is not PrivacyTier.PUBLIC:
            data["privacyTier"] = self.privacy_tier.value
        data.update(
            {
                "createdAt": _iso(self.created_at),
                "documentCount": self.document_count,
                "observedAt": _iso(self.observed_at),
            }
        )
        return data


@dataclass(frozen=True)
class BackendStatus:
    """State of the index cluster behind a service."""

    label: str
    url: str
    index_prefix: str
    cluster_name: str = ""
    availability: BackendAvailability = BackendAvailability.UNREACHABLE
    version: str = ""
    indices: tuple[IndexMetadata, ...] = ()
    observed_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "url": self.url,
            "clusterName": self.cluster_name,
            "availability": self.availability.value,
            "version": self.version,
            "indices": [i.to_dict() for i in self.indices],
            "indexPrefix": self.index_prefix,
            "observedAt": _iso(self.observed_at),
        }


@dataclass(frozen=True)
class ServiceStatus:
    """Full status of one probed environment."""

    label: str
    url: str
    version: str = ""
    availability: Availability = Availability.SERVICE_UNREACHABLE
    observed_at: datetime = field(default_factory=_now)
    backend: Optional[BackendStatus] = None

    @property
    def reachable(self) -> bool:
        return self.availability is not Availability.SERVICE_UNREACHABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "url": self.url,
            "version": self.version,
            "availability": self.availability.value,
            "observedAt": _iso(self.observed_at),
            "backend": self.backend.to_dict() if self.backend else None,
        }


@dataclass(frozen=True)
class EnvironmentsReport:
    """Aggregate answer to the environment listing query."""

    environments: tuple[ServiceStatus, ...] = ()

    @property
    def environments_count(self) -> int:
        return len(self.environments)

    def to_dict(self) -> dict[str, Any]:
        return {
            "environments": [e.to_dict() for e in self.environments],
            "environmentsCount": self.environments_count,
        }
