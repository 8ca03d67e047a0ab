"""Discount catalog records: tiered profiles and per-user overrides.

Both are written by admin tooling and are read-only inside a request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ordering.domain.exceptions import ValidationError


class DiscountTier(Enum):
    NONE = "none"
    SMALL_WHOLESALE = "small-wholesale"
    WHOLESALE = "wholesale"
    LARGE_WHOLESALE = "large-wholesale"

    @staticmethod
    def parse(raw: str) -> DiscountTier:
        try:
            return DiscountTier(raw.strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown discount tier: {raw!r}") from exc


@dataclass(frozen=True)
class DiscountProfile:
    """A tier template of default discount percents keyed by product group."""

    id: str
    tier: DiscountTier
    name: str = ""
    default_discounts: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "default_discounts", MappingProxyType(dict(self.default_discounts))
        )

    def percent_for(self, group_id: str) -> Decimal | None:
        return self.default_discounts.get(group_id)


@dataclass(frozen=True)
class SpecialDiscount:
    """A per-user override of the profile default for one product group."""

    user_id: str
    product_group_id: str
    percent: Decimal
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
