"""Environment registry: binds configured environments to the prober."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Dict, List, Optional, Tuple

from bragi_probe.config.models import ProbeConfig
from bragi_probe.registry.fetch import HttpxFetcher
from bragi_probe.registry.models import EnvironmentsReport, ServiceStatus
from bragi_probe.registry.probe import EnvironmentProber

logger = logging.getLogger(__name__)


async def probe_environments(
    prober: EnvironmentProber,
    environments: Iterable[Tuple[str, str]],
) -> List[ServiceStatus]:
    """Probe every (name, url) pair concurrently, keeping input order."""
    pairs = list(environments)
    tasks = [prober.probe(name, url) for name, url in pairs]
    return list(await asyncio.gather(*tasks))


class EnvironmentRegistry:
    """Registry of search-service environments with probing support."""

    def __init__(self, config: ProbeConfig, prober: Optional[EnvironmentProber] = None) -> None:
        self._config = config
        self._environments: Dict[str, str] = config.registry()
        self._prober = prober

    @property
    def environment_names(self) -> List[str]:
        return list(self._environments.keys())

    def get_url(self, name: str) -> Optional[str]:
        return self._environments.get(name)

    async def _run(self, pairs: List[Tuple[str, str]]) -> List[ServiceStatus]:
        if self._prober is not None:
            return await probe_environments(self._prober, pairs)
        async with HttpxFetcher(timeout=self._config.http.request_timeout) as fetcher:
            prober = EnvironmentProber(
                fetcher,
                logger=logging.getLogger("bragi_probe.registry.probe"),
                default_prefix=self._config.index_prefix_default,
            )
            return await probe_environments(prober, pairs)

    async def probe_one(self, name: str) -> Optional[ServiceStatus]:
        url = self._environments.get(name)
        if url is None:
            return None
        statuses = await self._run([(name, url)])
        return statuses[0]

    async def probe_all(self) -> List[ServiceStatus]:
        logger.debug("Probing %d environment(s)", len(self._environments))
        return await self._run(list(self._environments.items()))

    async def list_environments(self) -> EnvironmentsReport:
        return EnvironmentsReport(environments=tuple(await self.probe_all()))

    def probe_one_sync(self, name: str) -> Optional[ServiceStatus]:
        return asyncio.run(self.probe_one(name))

    def probe_all_sync(self) -> List[ServiceStatus]:
        return asyncio.run(self.probe_all())
