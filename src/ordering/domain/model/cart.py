"""Cart aggregate: the per-user basket that precedes an order.

One cart per user, created lazily. Line prices are captured at the moment of
the last mutation so that what the user sees stays stable until they touch
the cart again; totals are always recomputed from the lines.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from ordering.domain.exceptions import NotFoundError
from ordering.domain.model.totals import Totals, compute_totals
from ordering.domain.model.value_objects import Money, Quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartItem:
    id: str
    product_id: str
    quantity: Quantity
    unit_price: Money = field(default_factory=Money.zero)
    discount_percent: Decimal = Decimal("0")
    unit_price_with_discount: Money = field(default_factory=Money.zero)
    weight: Decimal = Decimal("0")
    volume: Decimal = Decimal("0")
    added_at: datetime = field(default_factory=_now)

    @property
    def line_total(self) -> Money:
        return self.unit_price_with_discount * self.quantity.value

    def capture_pricing(
        self,
        unit_price: Money,
        discount_percent: Decimal,
        unit_price_with_discount: Money,
        weight: Decimal,
        volume: Decimal,
    ) -> bool:
        """Overwrite the price snapshot. Returns True if anything changed."""
        snapshot = (unit_price, discount_percent, unit_price_with_discount, weight, volume)
        current = (
            self.unit_price,
            self.discount_percent,
            self.unit_price_with_discount,
            self.weight,
            self.volume,
        )
        if snapshot == current:
            return False
        (
            self.unit_price,
            self.discount_percent,
            self.unit_price_with_discount,
            self.weight,
            self.volume,
        ) = snapshot
        return True


@dataclass
class Cart:
    """Aggregate root for a user's cart.

    ``version`` increases on every mutation and never resets, so a
    (user, version) pair identifies one concrete cart content. Order
    conversion uses it to recognise a cart it has already turned into an
    order.

    ``stored_version`` is the version the repository last loaded or saved
    (None for a cart that was never persisted).
    """

    user_id: str
    items: list[CartItem] = field(default_factory=list)
    version: int = 0
    updated_at: datetime = field(default_factory=_now)
    stored_version: int | None = field(default=None, compare=False, repr=False)

    # --- Queries --------------------------------------------------------------

    @property
    def totals(self) -> Totals:
        return compute_totals(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def find_by_product(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # --- Mutations ------------------------------------------------------------

    def add(self, product_id: str, quantity: Quantity) -> CartItem:
        """Add ``quantity`` of a product; an existing line accumulates."""
        item = self.find_by_product(product_id)
        if item is not None:
            item.quantity = item.quantity + quantity
        else:
            item = CartItem(id=uuid.uuid4().hex, product_id=product_id, quantity=quantity)
            self.items.append(item)
        self._touch()
        return item

    def set_quantity(self, item_id: str, quantity: Decimal) -> CartItem | None:
        """Overwrite a line's quantity; zero or less removes the line.

        Returns the updated line, or None when it was removed.
        """
        item = self.find_item(item_id)
        if item is None:
            raise NotFoundError(f"Cart item '{item_id}' not found")
        if quantity <= 0:
            self.remove(item_id)
            return None
        item.quantity = Quantity(quantity)
        self._touch()
        return item

    def remove(self, item_id: str) -> bool:
        """Remove a line if present. Returns False (and changes nothing) otherwise."""
        item = self.find_item(item_id)
        if item is None:
            return False
        self.items.remove(item)
        self._touch()
        return True

    def replace_items(self, lines: list[tuple[str, Quantity]]) -> None:
        """Swap the whole content for the given (product_id, quantity) lines."""
        self.items = [
            CartItem(id=uuid.uuid4().hex, product_id=product_id, quantity=quantity)
            for product_id, quantity in lines
        ]
        self._touch()

    def clear(self) -> None:
        self.items = []
        self._touch()

    # --- Internal helpers -----------------------------------------------------

    def _touch(self) -> None:
        self.version += 1
        self.updated_at = _now()
