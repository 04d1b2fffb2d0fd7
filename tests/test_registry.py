"""Tests for the environment registry."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from conftest import FakeFetcher, healthy_routes

from bragi_probe.config.models import ProbeConfig
from bragi_probe.registry.models import Availability, ServiceStatus
from bragi_probe.registry.probe import EnvironmentProber
from bragi_probe.registry.registry import EnvironmentRegistry


@pytest.fixture()
def prober() -> EnvironmentProber:
    return EnvironmentProber(FakeFetcher(healthy_routes("http://bragi.prod")))


class TestEnvironmentRegistry:
    def test_environment_names(self, sample_config: ProbeConfig):
        reg = EnvironmentRegistry(sample_config)
        assert reg.environment_names == ["prod", "staging"]

    def test_get_url(self, sample_config: ProbeConfig):
        reg = EnvironmentRegistry(sample_config)
        assert reg.get_url("staging") == "http://bragi.staging"
        assert reg.get_url("unknown") is None

    @pytest.mark.asyncio
    async def test_probe_one(self, sample_config: ProbeConfig, prober: EnvironmentProber):
        status = await EnvironmentRegistry(sample_config, prober=prober).probe_one("prod")
        assert status is not None
        assert status.availability is Availability.AVAILABLE

    @pytest.mark.asyncio
    async def test_probe_one_unknown(self, sample_config: ProbeConfig, prober: EnvironmentProber):
        assert await EnvironmentRegistry(sample_config, prober=prober).probe_one("nope") is None

    @pytest.mark.asyncio
    async def test_probe_all_in_config_order(self, sample_config: ProbeConfig, prober: EnvironmentProber):
        statuses = await EnvironmentRegistry(sample_config, prober=prober).probe_all()
        assert [s.label for s in statuses] == ["prod", "staging"]
        assert statuses[0].availability is Availability.AVAILABLE
        assert statuses[1].availability is Availability.SERVICE_UNREACHABLE

    @pytest.mark.asyncio
    async def test_list_environments(self, sample_config: ProbeConfig, prober: EnvironmentProber):
        report = await EnvironmentRegistry(sample_config, prober=prober).list_environments()
        assert report.environments_count == 2
        assert report.to_dict()["environmentsCount"] == 2

    @pytest.mark.asyncio
    async def test_default_prober_uses_configured_timeout(self, sample_config: ProbeConfig):
        reg = EnvironmentRegistry(sample_config)
        with patch("bragi_probe.registry.registry.HttpxFetcher") as mock_cls:
            mock_cls.return_value.__aenter__.return_value = FakeFetcher()
            statuses = await reg.probe_all()
        mock_cls.assert_called_once_with(timeout=2.5)
        assert all(s.availability is Availability.SERVICE_UNREACHABLE for s in statuses)

    def test_probe_all_sync(self, sample_config: ProbeConfig):
        reg = EnvironmentRegistry(sample_config)
        expected = [ServiceStatus(label="prod", url="http://bragi.prod")]
        with patch.object(EnvironmentRegistry, "probe_all", return_value=expected):
            assert reg.probe_all_sync() == expected
