"""Abstract repository for Order aggregate and the order-number sequence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ordering.domain.model.order import Order, OrderType, PaymentMethod


@dataclass(frozen=True)
class OrderCriteria:
    """Filters for an order-history query.

    ``creator_ids`` is the visibility set resolved for the caller; None
    means unrestricted. Every other field is an optional caller filter
    intersected with it.
    """

    creator_ids: frozenset[str] | None = None
    created_by_user_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    order_type: OrderType | None = None
    payment_method: PaymentMethod | None = None

    def matches(self, order: Order) -> bool:
        if self.creator_ids is not None and order.created_by_user_id not in self.creator_ids:
            return False
        if self.created_by_user_id is not None and order.created_by_user_id != self.created_by_user_id:
            return False
        if self.start_date is not None and order.created_at < self.start_date:
            return False
        if self.end_date is not None and order.created_at > self.end_date:
            return False
        if self.order_type is not None and order.order_type != self.order_type:
            return False
        if self.payment_method is not None and order.payment_method != self.payment_method:
            return False
        return True


def history_sort_key(order: Order) -> tuple[datetime, int, int]:
    """Sort key for history listings; use with ``reverse=True`` (newest first).

    Orders created in the same instant are ordered by the numeric sequence
    part of their order number, then by id.
    """
    _, _, suffix = order.order_number.rpartition("-")
    sequence = int(suffix) if suffix.isdigit() else -1
    return order.created_at, sequence, order.id or 0


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def find_by_source_cart(self, user_id: str, cart_version: int) -> Order | None:
        """Return the order converted from this exact cart version, if any."""

    @abstractmethod
    def save(self, order: Order) -> Order:
        """Persist a new order and return it with its ID assigned.

        Raises DuplicateOrderNumberError if the order number is taken, and
        ConcurrentModificationError if an order from the same user and
        source cart version is already stored.
        """

    @abstractmethod
    def find(
        self, criteria: OrderCriteria, offset: int, limit: int
    ) -> tuple[list[Order], int]:
        """Return one page of matching orders, newest first, and the total match count."""


class OrderNumberSequence(ABC):

    @abstractmethod
    def next_value(self) -> int:
        """Atomically allocate the next sequence value (never returns the same twice)."""
