"""Protocol definitions for data sources.

Each protocol defines the interface that concrete data source implementations must satisfy.
"""

from typing import Protocol, runtime_checkable

from emlakmetrik.models.regional import RegionalDefaults


@runtime_checkable
class RegionalDefaultsSource(Protocol):
    async def lookup(self, location: str) -> RegionalDefaults:
        """Market defaults for a free-text "City, District, Neighborhood" location."""
        ...

    async def lookup_components(
        self, city: str, district: str | None = None, neighborhood: str | None = None
    ) -> RegionalDefaults:
        """Market defaults for an already-parsed location."""
        ...
