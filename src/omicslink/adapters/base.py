"""Base interface for OmicsLink table adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from omicslink.models import OmicsTable


class TableAdapter(ABC):
    """Adapter that reads one exported archive table into an :class:`OmicsTable`."""

    name: str

    @abstractmethod
    def read(self) -> OmicsTable:
        """Return the table held by the adapter source."""
