"""Abstract repository for discount profiles and special discounts.

Both are maintained by admin tooling; the engine only reads them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ordering.domain.model.discount import DiscountProfile, SpecialDiscount


class DiscountRepository(ABC):

    @abstractmethod
    def get_profile(self, profile_id: str) -> DiscountProfile | None:
        """Return a discount profile by ID, or None."""

    @abstractmethod
    def list_special_discounts(self, user_id: str) -> list[SpecialDiscount]:
        """Return every special discount recorded for a user."""
