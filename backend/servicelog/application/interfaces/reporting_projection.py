"""Abstract interface (port) for the denormalised service log reporting projection."""

from abc import ABC, abstractmethod


class ReportingProjection(ABC):
    """A refresh-on-demand cache of live service logs joined with their names."""

    @abstractmethod
    async def refresh(self) -> int:
        """Rebuild the projection; returns the number of rows written."""
        ...

    @abstractmethod
    async def is_available(self) -> bool:
        ...

    @abstractmethod
    async def last_refreshed_at(self) -> str | None:
        ...
