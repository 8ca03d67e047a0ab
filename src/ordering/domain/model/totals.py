"""Aggregate totals over priced lines.

Totals are a derived view: they are recomputed from the lines on every read
and never stored next to them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from ordering.domain.model.value_objects import Money, Quantity


class PricedLine(Protocol):
    quantity: Quantity
    unit_price: Money
    unit_price_with_discount: Money
    weight: Decimal
    volume: Decimal


@dataclass(frozen=True)
class Totals:
    quantity: Decimal
    weight: Decimal
    volume: Decimal
    original_price: Money
    discounted_price: Money


def compute_totals(lines: Iterable[PricedLine]) -> Totals:
    quantity = Decimal("0")
    weight = Decimal("0")
    volume = Decimal("0")
    original = Money.zero()
    discounted = Money.zero()
    for line in lines:
        qty = line.quantity.value
        quantity += qty
        weight += line.weight * qty
        volume += line.volume * qty
        original = original + line.unit_price * qty
        discounted = discounted + line.unit_price_with_discount * qty
    return Totals(
        quantity=quantity,
        weight=weight,
        volume=volume,
        original_price=original,
        discounted_price=discounted,
    )
