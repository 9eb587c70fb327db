"""Base class for harmonized cohort storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from omicslink.models import CohortBundle


class CohortStorage(ABC):
    """Persists harmonized cohort tables for reproducible analyses."""

    @abstractmethod
    def persist(self, bundle: CohortBundle) -> None:
        """Persist every table of the bundle in backend-specific format."""
