"""Group ordered discovery outcomes by profile and region into report events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .discovery.models import (
    Diagnostic,
    InstanceRecord,
    ProfileGroup,
    RegionGroup,
    RegionQueryOutcome,
)


@dataclass(frozen=True)
class ProfileHeader:
    identity_name: str
    first: bool


@dataclass(frozen=True)
class RegionHeader:
    identity_name: str
    region: str


@dataclass(frozen=True)
class InstanceLine:
    record: InstanceRecord

    def __str__(self) -> str:
        return str(self.record)


@dataclass(frozen=True)
class DiagnosticLine:
    diagnostic: Diagnostic

    def __str__(self) -> str:
        return str(self.diagnostic)


ReportEvent = Union[ProfileHeader, RegionHeader, InstanceLine, DiagnosticLine]


class ReportAggregator:
    """Turns the coordinator's ordered stream into grouping events.

    A profile header opens whenever a non-empty outcome belongs to a
    different identity than the last one printed; every non-empty outcome
    opens a region header. Empty outcomes produce nothing. Failures become
    diagnostic lines and leave the grouping cursor untouched.
    """

    def __init__(self) -> None:
        self._current: ProfileGroup | None = None
        self._report: list[ProfileGroup] = []
        self.failures = 0

    @property
    def report(self) -> list[ProfileGroup]:
        """Profile groups opened so far, in output order."""
        return self._report

    def add(self, item: RegionQueryOutcome | Diagnostic) -> list[ReportEvent]:
        if isinstance(item, Diagnostic):
            self.failures += 1
            return [DiagnosticLine(item)]
        if not item.ok:
            self.failures += 1
            return [DiagnosticLine(item.diagnostic())]
        if not item.records:
            return []

        events: list[ReportEvent] = []
        if self._current is None or self._current.identity_name != item.identity_name:
            events.append(ProfileHeader(item.identity_name, first=self._current is None))
            self._current = ProfileGroup(item.identity_name)
            self._report.append(self._current)

        group = RegionGroup(item.region, list(item.records))
        self._current.regions.append(group)
        events.append(RegionHeader(item.identity_name, item.region))
        events.extend(InstanceLine(record) for record in group.records)
        return events
