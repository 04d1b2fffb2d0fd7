"""Pydantic models for bragi-probe configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_INDEX_PREFIX = "munin"


class EnvironmentEntry(BaseModel):
    """A named deployment of the search service."""

    env: str
    url: str


class HttpConfig(BaseModel):
    """Transport settings shared by every probe request."""

    request_timeout: float = Field(default=5.0, gt=0)


class ProbeIdentity(BaseModel):
    """Top-level identity metadata."""

    name: str = "bragi-probe"
    version: str = "0.2.0"


class ProbeConfig(BaseModel):
    """Root configuration model for .bragi-probe.yaml."""

    probe: ProbeIdentity = Field(default_factory=ProbeIdentity)
    http: HttpConfig = Field(default_factory=HttpConfig)
    index_prefix_default: str = DEFAULT_INDEX_PREFIX
    log_level: str = "INFO"
    environments: list[EnvironmentEntry] = Field(default_factory=list)

    @field_validator("environments")
    @classmethod
    def _unique_names(cls, value: list[EnvironmentEntry]) -> list[EnvironmentEntry]:
        seen: set[str] = set()
        for entry in value:
            if entry.env in seen:
                raise ValueError(f"duplicate environment name '{entry.env}'")
            seen.add(entry.env)
        return value

    def registry(self) -> dict[str, str]:
        """Environment name to base URL, in declaration order."""
        return {e.env: e.url for e in self.environments}
