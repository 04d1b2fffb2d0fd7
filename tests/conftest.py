"""Shared fixtures for bragi-probe tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from bragi_probe.config.models import ProbeConfig
from bragi_probe.registry.errors import DecodeFailure, TransportFailure


SAMPLE_CONFIG: Dict[str, Any] = {
    "probe": {"name": "bragi-probe", "version": "0.2.0"},
    "http": {"request_timeout": 2.5},
    "index_prefix_default": "munin",
    "environments": [
        {"env": "prod", "url": "http://bragi.prod"},
        {"env": "staging", "url": "http://bragi.staging"},
    ],
}

SERVICE_STATUS_BODY: Dict[str, Any] = {
    "version": "v1.12.0",
    "es": "http://es.prod:9200/munin",
    "status": "good",
}

INDICES_BODY = [
    {"health": "green", "status": "open", "index": "munin_poi_priv.fr_20210101_120000", "docs.count": "42"},
    {"health": "green", "status": "open", "index": "munin_addr_be_20200615_083000", "docs.count": "1000"},
]


class FakeFetcher:
    """In-memory Fetcher: routes map a URL to a JSON body or an exception to raise."""

    def __init__(self, routes: Dict[str, Any] | None = None) -> None:
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: list[str] = []

    def _lookup(self, url: str) -> Any:
        self.calls.append(url)
        if url not in self.routes:
            raise TransportFailure("Connection refused", url)
        value = self.routes[url]
        if isinstance(value, Exception):
            raise value
        return value

    async def reach(self, url: str) -> None:
        self._lookup(url)

    async def fetch_json(self, url: str) -> Any:
        return self._lookup(url)


def healthy_routes(base: str = "http://bragi.prod") -> Dict[str, Any]:
    return {
        base: "",
        f"{base}/status": dict(SERVICE_STATUS_BODY),
        "http://es.prod:9200/_cat/indices?format=json": list(INDICES_BODY),
    }


@pytest.fixture()
def sample_config() -> ProbeConfig:
    """Return a parsed ProbeConfig from sample data."""
    return ProbeConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def sample_config_dict() -> Dict[str, Any]:
    """Return raw sample config dict."""
    return dict(SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .bragi-probe.yaml and return the path."""
    path = tmp_path / ".bragi-probe.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher(healthy_routes())


@pytest.fixture()
def bad_json() -> DecodeFailure:
    return DecodeFailure("Response body is not JSON", "http://bragi.prod/status")
