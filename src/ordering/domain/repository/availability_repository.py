"""Abstract read-only repository over ingested branch stock."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ordering.domain.model.availability import AvailabilityRow, Branch


class AvailabilityRepository(ABC):

    @abstractmethod
    def list_branches(self) -> list[Branch]:
        """Return every branch that reports stock."""

    @abstractmethod
    def list_rows(self, product_ids: Iterable[str]) -> list[AvailabilityRow]:
        """Return all stock rows for the given products, across branches."""
