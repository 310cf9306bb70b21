"""Fetch the instance listing for one (identity, region) pair and project it to display records."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from typing import Any

from ..exceptions import ProviderError
from . import InstanceProvider
from .models import SENTINEL, Identity, InstanceRecord, RegionQueryOutcome

logger = logging.getLogger(__name__)


async def fetch_instances(
    provider: InstanceProvider,
    identity: Identity,
    region: str,
    include_addressless: bool = False,
    executor: Executor | None = None,
) -> RegionQueryOutcome:
    """List the region's instances with the identity's keys. Never raises ProviderError."""
    loop = asyncio.get_running_loop()
    try:
        response = await loop.run_in_executor(executor, provider.list_instances, identity, region)
    except ProviderError as exc:
        logger.debug("Instance listing failed for %s/%s: %s", identity.name, region, exc,
                     extra={"profile": identity.name, "region": region})
        return RegionQueryOutcome.failure(identity.name, region, f"Region failure in {region}: {exc}")

    return project_instances(response, identity.name, region, include_addressless)


def project_instances(
    response: dict[str, Any],
    identity_name: str,
    region: str,
    include_addressless: bool = False,
) -> RegionQueryOutcome:
    """Turn a raw DescribeInstances page into a success or failure outcome."""
    reservations = response.get("Reservations")
    if reservations is None:
        return RegionQueryOutcome.failure(identity_name, region, "No reservations")

    records: list[InstanceRecord] = []
    for reservation in reservations:
        for raw in reservation.get("Instances") or []:
            address = raw.get("PublicIpAddress")
            if not address:
                if not include_addressless:
                    continue
                address = SENTINEL
            records.append(InstanceRecord(
                display_name=instance_name(raw),
                address=address,
                region=region,
                identity_name=identity_name,
            ))

    logger.info("Found %d instances in %s/%s", len(records), identity_name, region,
                extra={"profile": identity_name, "region": region, "total_instances": len(records)})
    return RegionQueryOutcome.success(identity_name, region, records)


def instance_name(raw: dict[str, Any]) -> str:
    """Value of the first ``Name`` tag that carries a value, in provider order."""
    for tag in raw.get("Tags") or []:
        if tag.get("Key") == "Name" and tag.get("Value") is not None:
            return tag["Value"]
    return SENTINEL
