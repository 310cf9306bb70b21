"""AWS boto3 provider for listing regions and EC2 instances per credential profile."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import ProviderError
from .models import Identity

logger = logging.getLogger(__name__)


class EC2Provider:
    """Lists regions and instances with the static keys of one identity at a time.

    A fresh ``boto3.Session`` is built for every call: sessions are not
    thread-safe and calls run concurrently on a worker pool.
    """

    def __init__(self) -> None:
        self._known_regions: frozenset[str] | None = None

    def list_regions(self, identity: Identity, bootstrap_region: str) -> list[str | None]:
        """Enumerate the regions enabled for the identity's account."""
        try:
            response = self._client(identity, bootstrap_region).describe_regions()
        except (ClientError, BotoCoreError) as exc:
            raise ProviderError(
                f"Error getting regions: {exc}", operation="describe_regions", region=bootstrap_region
            ) from exc

        regions = [entry.get("RegionName") for entry in response.get("Regions") or []]
        logger.debug(
            "Profile %s can query %d regions", identity.name, len(regions),
            extra={"profile": identity.name, "total_regions": len(regions)},
        )
        return regions

    def recognizes_region(self, region: str) -> bool:
        """Check the region against every partition botocore ships endpoint data for."""
        if self._known_regions is None:
            session = boto3.Session()
            known: set[str] = set()
            for partition in session.get_available_partitions():
                known.update(session.get_available_regions("ec2", partition_name=partition))
            self._known_regions = frozenset(known)
        return region in self._known_regions

    def list_instances(self, identity: Identity, region: str) -> dict[str, Any]:
        """Return the first page of DescribeInstances for the region, unfiltered."""
        try:
            return self._client(identity, region).describe_instances()
        except (ClientError, BotoCoreError) as exc:
            raise ProviderError(str(exc), operation="describe_instances", region=region) from exc

    @staticmethod
    def _client(identity: Identity, region: str):
        session = boto3.Session(
            aws_access_key_id=identity.access_key,
            aws_secret_access_key=identity.secret_key,
            region_name=region,
        )
        return session.client("ec2")
