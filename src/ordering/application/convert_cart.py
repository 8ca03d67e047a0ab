"""Application service: Convert Cart to Order use case.

Snapshots the caller's cart into an immutable order and empties the cart.

The order is the source of truth. It is persisted first; the cart is
cleared afterwards. If clearing fails even after retries the order still
stands: a repeated conversion of the same cart version returns that
order instead of creating a second one, and any other cart operation
empties the stale cart before touching it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from ordering.application.cart_pricing import load_discount_snapshot, require_user
from ordering.application.concurrency import UserLocks, run_with_retry
from ordering.application.dto import OrderDTO
from ordering.application.mappers import order_to_dto
from ordering.domain.exceptions import (
    ConcurrentModificationError,
    DuplicateOrderNumberError,
    EmptyCartError,
    NotFoundError,
    SequenceExhaustedError,
)
from ordering.domain.model.cart import Cart
from ordering.domain.model.order import (
    Order,
    OrderLineItem,
    OrderType,
    PaymentMethod,
    format_order_number,
    normalize_comment,
)
from ordering.domain.model.user import User
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.order_repository import (
    OrderNumberSequence,
    OrderRepository,
)
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.discount_resolver import resolve_price

logger = logging.getLogger(__name__)

CONVERSION_ATTEMPTS = 3
ORDER_NUMBER_ATTEMPTS = 3
CART_CLEAR_ATTEMPTS = 3


class ConvertCartHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        discount_repo: DiscountRepository,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        sequence: OrderNumberSequence,
        locks: UserLocks,
    ) -> None:
        self._user_repo = user_repo
        self._product_repo = product_repo
        self._discount_repo = discount_repo
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._sequence = sequence
        self._locks = locks

    def handle(
        self,
        user_id: str,
        order_type: str,
        payment_method: str,
        comment: str | None = None,
    ) -> OrderDTO:
        """Convert the caller's cart into an order.

        Steps:
        1. Validate order parameters (nothing is touched on failure).
        2. Reject an empty cart with EmptyCartError.
        3. Re-resolve every line against current prices and discounts.
        4. Persist the order under a freshly allocated order number.
        5. Clear the cart.
        """
        parsed_type = OrderType.parse(order_type)
        parsed_payment = PaymentMethod.parse(payment_method)
        comment = normalize_comment(comment)
        user = require_user(self._user_repo, user_id)

        def _log_conflict(attempt: int, exc: BaseException) -> None:
            logger.warning(
                "Conversion for user %s raced another writer (attempt %d/%d): %s",
                user_id,
                attempt,
                CONVERSION_ATTEMPTS,
                exc,
            )

        order, created = run_with_retry(
            lambda: self._convert(user, parsed_type, parsed_payment, comment),
            attempts=CONVERSION_ATTEMPTS,
            retry_on=(ConcurrentModificationError,),
            on_retry=_log_conflict,
        )
        if created:
            logger.info(
                "Order %s created by user %s: %d line(s), total %s",
                order.order_number,
                user_id,
                len(order.items),
                order.totals.discounted_price,
            )
        return order_to_dto(order)

    # --- Steps ----------------------------------------------------------------

    def _convert(
        self,
        user: User,
        order_type: OrderType,
        payment_method: PaymentMethod,
        comment: str | None,
    ) -> tuple[Order, bool]:
        """Returns the order and whether it was created by this call."""
        with self._locks.hold(user.id):
            cart = self._cart_repo.get_by_user(user.id)
            if cart is None or cart.is_empty:
                raise EmptyCartError("Cart is empty")

            existing = self._order_repo.find_by_source_cart(user.id, cart.version)
            if existing is not None:
                logger.warning(
                    "Cart of user %s (version %d) was already converted into %s; "
                    "clearing it instead of creating a duplicate",
                    user.id,
                    cart.version,
                    existing.order_number,
                )
                self._clear_cart(user.id, existing)
                return existing, False

            lines = self._snapshot_lines(user, cart)
            order = self._persist(user, cart, lines, order_type, payment_method, comment)
            self._clear_cart(user.id, order)
            return order, True

    def _snapshot_lines(self, user: User, cart: Cart) -> list[OrderLineItem]:
        snapshot = load_discount_snapshot(user, self._discount_repo)
        lines: list[OrderLineItem] = []
        for item in cart.items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                raise NotFoundError(
                    f"Product '{item.product_id}' in the cart is no longer in the catalog"
                )
            price = resolve_price(snapshot, product)
            lines.append(
                OrderLineItem(
                    product_id=product.id,
                    product_code=product.code,
                    product_name=product.name,
                    quantity=item.quantity,
                    unit_price=price.base_price,
                    discount_percent=price.percent,
                    unit_price_with_discount=price.discounted_price,
                    weight=product.weight,
                    volume=product.volume,
                )
            )
        return lines

    def _persist(
        self,
        user: User,
        cart: Cart,
        lines: list[OrderLineItem],
        order_type: OrderType,
        payment_method: PaymentMethod,
        comment: str | None,
    ) -> Order:
        created_at = datetime.now(timezone.utc)

        def _attempt() -> Order:
            order_number = format_order_number(created_at.year, self._sequence.next_value())
            order = Order.create(
                order_number=order_number,
                created_by_user_id=user.id,
                items=lines,
                order_type=order_type,
                payment_method=payment_method,
                manager_user_id=user.manager_user_id,
                shipping_department_id=user.shipping_department_id,
                comment=comment,
                source_cart_version=cart.version,
                created_at=created_at,
            )
            return self._order_repo.save(order)

        def _log_collision(attempt: int, exc: BaseException) -> None:
            logger.warning(
                "Order number collision (attempt %d/%d): %s",
                attempt,
                ORDER_NUMBER_ATTEMPTS,
                exc,
            )

        try:
            return run_with_retry(
                _attempt,
                attempts=ORDER_NUMBER_ATTEMPTS,
                retry_on=(DuplicateOrderNumberError,),
                on_retry=_log_collision,
            )
        except DuplicateOrderNumberError as exc:
            logger.error("Order number sequence exhausted for user %s", user.id)
            raise SequenceExhaustedError(
                f"Could not allocate a unique order number after {ORDER_NUMBER_ATTEMPTS} attempts"
            ) from exc

    def _clear_cart(self, user_id: str, order: Order) -> None:
        def _attempt() -> None:
            cart = self._cart_repo.get_by_user(user_id)
            if cart is None or cart.version != order.source_cart_version:
                return
            cart.clear()
            self._cart_repo.save(cart)

        def _log_failure(attempt: int, exc: BaseException) -> None:
            logger.warning(
                "Clearing cart of user %s after order %s failed (attempt %d/%d): %s",
                user_id,
                order.order_number,
                attempt,
                CART_CLEAR_ATTEMPTS,
                exc,
            )

        try:
            run_with_retry(_attempt, attempts=CART_CLEAR_ATTEMPTS, on_retry=_log_failure)
        except Exception:
            # The order is already persisted; the stale cart is recognised by
            # its version and emptied on the next cart operation.
            logger.exception(
                "Cart of user %s could not be cleared after order %s",
                user_id,
                order.order_number,
            )
