"""Domain service: Discount Resolver.

Maps (user discount data, product) to the price the user pays. Precedence
is a fixed two-level override:

  1. the user's special discount for the product's group,
  2. the default of the user's discount profile for that group,
  3. no discount.

The resolver is a pure function over an explicit ``DiscountSnapshot``;
loading the snapshot is the caller's job, so the rules can be tested with
plain fixture data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping

from ordering.domain.model.discount import DiscountProfile, SpecialDiscount
from ordering.domain.model.product import Product
from ordering.domain.model.value_objects import Money, round_half_up

_HUNDRED = Decimal("100")


def normalize_percent(value: Decimal) -> Decimal:
    """Clamp a stored percent into [0, 100] and round it to two places."""
    if value < 0:
        return Decimal("0")
    if value > _HUNDRED:
        return _HUNDRED
    return round_half_up(value)


def apply_percent(price: Money, percent: Decimal) -> Money:
    """Discounted price, half-up rounded to cents and never below zero."""
    discounted = price.amount * (1 - normalize_percent(percent) / _HUNDRED)
    if discounted < 0:
        discounted = Decimal("0")
    return Money(round_half_up(discounted))


@dataclass(frozen=True)
class DiscountSnapshot:
    """Read-only discount data of one user for the duration of a request."""

    profile_discounts: Mapping[str, Decimal] = field(default_factory=dict)
    special_discounts: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "profile_discounts", MappingProxyType(dict(self.profile_discounts))
        )
        object.__setattr__(
            self, "special_discounts", MappingProxyType(dict(self.special_discounts))
        )

    @staticmethod
    def empty() -> DiscountSnapshot:
        return DiscountSnapshot()

    @staticmethod
    def build(
        profile: DiscountProfile | None,
        special_discounts: Iterable[SpecialDiscount] = (),
    ) -> DiscountSnapshot:
        """Normalise stored records into lookup tables.

        If several special discounts exist for one group, the most recently
        created one is active.
        """
        defaults: dict[str, Decimal] = {}
        if profile is not None:
            for group_id, percent in profile.default_discounts.items():
                defaults[group_id] = normalize_percent(percent)

        specials: dict[str, Decimal] = {}
        for record in sorted(special_discounts, key=lambda sd: sd.created_at):
            specials[record.product_group_id] = normalize_percent(record.percent)

        return DiscountSnapshot(profile_discounts=defaults, special_discounts=specials)


@dataclass(frozen=True)
class ResolvedPrice:
    base_price: Money
    discounted_price: Money
    percent: Decimal


def resolve_percent(snapshot: DiscountSnapshot, group_id: str) -> Decimal:
    special = snapshot.special_discounts.get(group_id)
    if special is not None:
        return special
    default = snapshot.profile_discounts.get(group_id)
    if default is not None:
        return default
    return Decimal("0")


def resolve_price(snapshot: DiscountSnapshot, product: Product) -> ResolvedPrice:
    percent = resolve_percent(snapshot, product.group_id)
    return ResolvedPrice(
        base_price=product.base_price,
        discounted_price=apply_percent(product.base_price, percent),
        percent=percent,
    )
