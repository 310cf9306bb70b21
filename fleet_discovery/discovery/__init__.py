"""Instance discovery package — provider Protocol and public exports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import Identity


@runtime_checkable
class InstanceProvider(Protocol):
    """Protocol that every cloud provider backend must satisfy.

    Methods are blocking; the coordinator runs them on a worker pool.
    Failures are raised as ``ProviderError``.
    """

    def list_regions(self, identity: Identity, bootstrap_region: str) -> list[str | None]:
        """Return the region names the identity can enumerate (None for a nameless entry)."""
        ...

    def recognizes_region(self, region: str) -> bool:
        """Return True if the client knows how to address the region."""
        ...

    def list_instances(self, identity: Identity, region: str) -> dict[str, Any]:
        """Return the first page of the raw instance listing for one region."""
        ...
