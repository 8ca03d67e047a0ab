"""Product aggregate.

Products live independently of carts and orders. The authoritative copy is
maintained by catalog tooling; carts and orders only snapshot from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ordering.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Catalog tooling may change a price at any time; carts pick the new price
    up on their next mutation and orders never see it.
    """

    id: str
    code: str
    name: str
    group_id: str
    base_price: Money
    weight: Decimal = Decimal("0")
    volume: Decimal = Decimal("0")
