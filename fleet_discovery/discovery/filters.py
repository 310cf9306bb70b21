"""Exact-match profile and region filtering for the discovery fan-out."""

from __future__ import annotations

import logging

from ..config import DiscoveryConfig

logger = logging.getLogger(__name__)


class TargetFilter:
    """Accepts profiles and regions equal to the configured names (empty = accept all)."""

    def __init__(self, discovery_config: DiscoveryConfig):
        self._profile = discovery_config.profile
        self._region = discovery_config.region

    def accepts_profile(self, name: str) -> bool:
        if self._profile and name != self._profile:
            logger.debug("Profile %s skipped by profile filter %s", name, self._profile)
            return False
        return True

    def accepts_region(self, region: str) -> bool:
        if self._region and region != self._region:
            logger.debug("Region %s skipped by region filter %s", region, self._region)
            return False
        return True
