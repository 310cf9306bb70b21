"""Two-stage concurrent fan-out: regions per identity, then instances per (identity, region)."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Iterable
from concurrent.futures import Executor, ThreadPoolExecutor

from .config import DiscoveryConfig
from .discovery import InstanceProvider
from .discovery.filters import TargetFilter
from .discovery.instances import fetch_instances
from .discovery.models import Diagnostic, Identity, RegionQueryOutcome
from .discovery.regions import resolve_regions

logger = logging.getLogger(__name__)


class FanOutCoordinator:
    """Schedules region resolution and instance listing for every identity.

    Stage A (one task per identity) is consumed in completion order. Every
    region it yields immediately launches a Stage-B task; Stage-B outcomes
    are then delivered strictly in launch order, so all regions of one
    identity come out contiguously. There are no timeouts: a hung call holds
    back every outcome launched after it.

    Without an ``executor`` every blocking provider call gets its own thread:
    each batch of launches is given a pool exactly as wide as the batch. A
    caller-supplied executor caps the number of calls in flight instead.
    """

    def __init__(
        self,
        provider: InstanceProvider,
        settings: DiscoveryConfig,
        target_filter: TargetFilter | None = None,
        executor: Executor | None = None,
    ):
        self._provider = provider
        self._settings = settings
        self._filter = target_filter or TargetFilter(settings)
        self._executor = executor
        self._pools: list[ThreadPoolExecutor] = []

    def _pool_for(self, calls: int) -> Executor | None:
        if self._executor is not None:
            return self._executor
        if calls == 0:
            return None
        pool = ThreadPoolExecutor(max_workers=calls, thread_name_prefix="fleet-discovery")
        self._pools.append(pool)
        return pool

    def _release_pools(self) -> None:
        for pool in self._pools:
            pool.shutdown(wait=False)
        self._pools.clear()

    async def outcomes(
        self, identities: Iterable[Identity]
    ) -> AsyncIterator[RegionQueryOutcome | Diagnostic]:
        """Yield Stage-A diagnostics as they occur, then Stage-B outcomes in launch order."""
        start = time.monotonic()
        identities = list(identities)
        accepted = [identity for identity in identities if self._filter.accepts_profile(identity.name)]
        by_name = {identity.name: identity for identity in accepted}

        try:
            stage_a = self._pool_for(len(accepted))
            resolvers = [
                asyncio.create_task(
                    resolve_regions(self._provider, identity, self._settings.bootstrap_region, stage_a)
                )
                for identity in accepted
            ]

            fetchers: list[asyncio.Task[RegionQueryOutcome]] = []
            for next_resolved in asyncio.as_completed(resolvers):
                discovery = await next_resolved
                for diagnostic in discovery.diagnostics:
                    yield diagnostic

                identity = by_name[discovery.identity_name]
                regions = [region for region in discovery.regions if self._filter.accepts_region(region)]
                stage_b = self._pool_for(len(regions))
                for region in regions:
                    fetchers.append(asyncio.create_task(
                        fetch_instances(
                            self._provider, identity, region,
                            self._settings.include_addressless, stage_b,
                        )
                    ))

            logger.info("Launched %d region queries for %d profiles", len(fetchers), len(resolvers))
            for task in fetchers:
                yield await task
        finally:
            self._release_pools()

        logger.info("Discovery complete", extra={"elapsed_seconds": round(time.monotonic() - start, 2)})
