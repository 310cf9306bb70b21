"""Data models for identities, discovered instances and per-region outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field

# Placeholder for a missing Name tag or, when requested, a missing public address
SENTINEL = "N/A"


@dataclass(frozen=True)
class Identity:
    """A named static credential pair from the shared credentials file."""

    name: str
    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class InstanceRecord:
    """Display metadata for one instance."""

    display_name: str
    address: str
    region: str
    identity_name: str

    def __str__(self) -> str:
        return f"{self.display_name} - {self.address}"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem for one identity, optionally scoped to a region."""

    identity_name: str
    region: str | None
    cause: str

    def __str__(self) -> str:
        where = f"{self.identity_name}/{self.region}" if self.region else self.identity_name
        return f"{where}: {self.cause}"


@dataclass(frozen=True)
class RegionDiscovery:
    """Regions one identity can query, plus anything skipped along the way."""

    identity_name: str
    regions: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class RegionQueryOutcome:
    """Result of listing instances for one (identity, region) pair.

    A success carries a (possibly empty) tuple of records; a failure carries
    the cause in ``error`` and no records.
    """

    identity_name: str
    region: str
    records: tuple[InstanceRecord, ...] = ()
    error: str | None = None

    @classmethod
    def success(cls, identity_name: str, region: str, records) -> RegionQueryOutcome:
        return cls(identity_name=identity_name, region=region, records=tuple(records))

    @classmethod
    def failure(cls, identity_name: str, region: str, cause: str) -> RegionQueryOutcome:
        return cls(identity_name=identity_name, region=region, error=cause)

    @property
    def ok(self) -> bool:
        return self.error is None

    def diagnostic(self) -> Diagnostic | None:
        if self.ok:
            return None
        return Diagnostic(self.identity_name, self.region, self.error)


@dataclass
class RegionGroup:
    """Instances of one identity in one region, in provider order."""

    region: str
    records: list[InstanceRecord] = field(default_factory=list)


@dataclass
class ProfileGroup:
    """A contiguous run of region groups belonging to one identity."""

    identity_name: str
    regions: list[RegionGroup] = field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return sum(len(group.records) for group in self.regions)
