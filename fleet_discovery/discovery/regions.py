"""Resolve the set of regions one identity can query."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor

from ..exceptions import ProviderError
from . import InstanceProvider
from .models import Diagnostic, Identity, RegionDiscovery

logger = logging.getLogger(__name__)

# Any regional endpoint answers DescribeRegions
DEFAULT_BOOTSTRAP_REGION = "us-east-1"


async def resolve_regions(
    provider: InstanceProvider,
    identity: Identity,
    bootstrap_region: str = DEFAULT_BOOTSTRAP_REGION,
    executor: Executor | None = None,
) -> RegionDiscovery:
    """List the identity's regions through the bootstrap endpoint.

    Provider failures become a diagnostic and an empty region set; they are
    never raised. Nameless or unrecognised regions are skipped one by one.
    """
    loop = asyncio.get_running_loop()
    try:
        names = await loop.run_in_executor(executor, provider.list_regions, identity, bootstrap_region)
    except ProviderError as exc:
        logger.debug("Region listing failed for profile %s: %s", identity.name, exc,
                     extra={"profile": identity.name})
        return RegionDiscovery(
            identity_name=identity.name,
            diagnostics=(Diagnostic(identity.name, None, str(exc)),),
        )

    regions: list[str] = []
    diagnostics: list[Diagnostic] = []
    for name in names or []:
        if not name:
            diagnostics.append(Diagnostic(identity.name, None, "Region name not found"))
        elif not provider.recognizes_region(name):
            diagnostics.append(Diagnostic(identity.name, name, f"Region cannot be parsed: {name}"))
        else:
            regions.append(name)

    logger.info("Resolved %d regions for profile %s", len(regions), identity.name,
                extra={"profile": identity.name, "total_regions": len(regions)})
    return RegionDiscovery(
        identity_name=identity.name,
        regions=tuple(regions),
        diagnostics=tuple(diagnostics),
    )
