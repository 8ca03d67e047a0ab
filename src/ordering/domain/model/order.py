"""Order aggregate: the immutable result of converting a cart.

An order is a snapshot: line prices, manager and shipping department are
copied at conversion time so later catalog or profile changes never rewrite
history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from ordering.domain.exceptions import ValidationError
from ordering.domain.model.totals import Totals, compute_totals
from ordering.domain.model.value_objects import Money, Quantity


class OrderType(Enum):
    CURRENT = "current"
    DEFERRED = "deferred"

    @staticmethod
    def parse(raw: str | None) -> OrderType:
        try:
            return OrderType((raw or "").strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown order type: {raw!r}") from exc


class PaymentMethod(Enum):
    CASH = "cash"
    CASHLESS = "cashless"

    @staticmethod
    def parse(raw: str | None) -> PaymentMethod:
        try:
            return PaymentMethod((raw or "").strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown payment method: {raw!r}") from exc


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_COMMENT_LENGTH = 1000
ORDER_NUMBER_PREFIX = "ORD"


def format_order_number(year: int, sequence_value: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}-{year}-{sequence_value:06d}"


@dataclass(frozen=True)
class OrderLineItem:
    """Price snapshot of one product at conversion time."""

    product_id: str
    product_code: str
    product_name: str
    quantity: Quantity
    unit_price: Money
    discount_percent: Decimal
    unit_price_with_discount: Money
    weight: Decimal = Decimal("0")
    volume: Decimal = Decimal("0")

    @property
    def line_total(self) -> Money:
        return self.unit_price_with_discount * self.quantity.value


@dataclass(frozen=True)
class Order:
    """Aggregate root for submitted orders.

    Use ``Order.create()`` for new orders; it enforces the business rules.
    The plain constructor is what repositories use to reconstitute
    persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    created_by_user_id: str
    items: tuple[OrderLineItem, ...]
    order_type: OrderType
    payment_method: PaymentMethod
    manager_user_id: str | None = None
    shipping_department_id: str | None = None
    comment: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source_cart_version: int | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        created_by_user_id: str,
        items: list[OrderLineItem],
        order_type: OrderType,
        payment_method: PaymentMethod,
        manager_user_id: str | None = None,
        shipping_department_id: str | None = None,
        comment: str | None = None,
        source_cart_version: int | None = None,
        created_at: datetime | None = None,
    ) -> Order:
        if not items:
            raise ValidationError("Order must contain at least one item")
        if not order_number:
            raise ValidationError("Order number is required")

        return Order(
            id=None,
            order_number=order_number,
            created_by_user_id=created_by_user_id,
            items=tuple(items),
            order_type=order_type,
            payment_method=payment_method,
            manager_user_id=manager_user_id,
            shipping_department_id=shipping_department_id,
            comment=normalize_comment(comment),
            created_at=created_at or datetime.now(timezone.utc),
            source_cart_version=source_cart_version,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def totals(self) -> Totals:
        return compute_totals(self.items)


def normalize_comment(comment: str | None) -> str | None:
    if comment is None:
        return None
    comment = comment.strip()
    if not comment:
        return None
    if len(comment) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment is too long ({len(comment)} > {MAX_COMMENT_LENGTH} characters)"
        )
    return comment
