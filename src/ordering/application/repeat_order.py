"""Application service: Repeat Order use case.

Loads a past order the caller may see and replaces the caller's cart with
its lines, priced as of now. The order itself is never modified.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ordering.application.cart_pricing import CartPricer, edit_cart, require_user
from ordering.application.concurrency import UserLocks
from ordering.application.dto import CartDTO
from ordering.application.mappers import cart_to_dto
from ordering.domain.exceptions import AuthorizationError, NotFoundError
from ordering.domain.model.cart import Cart
from ordering.domain.model.value_objects import Quantity
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.order_visibility import OrderVisibilityResolver

logger = logging.getLogger(__name__)


class RepeatOrderHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        discount_repo: DiscountRepository,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        locks: UserLocks,
    ) -> None:
        self._user_repo = user_repo
        self._product_repo = product_repo
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._pricer = CartPricer(product_repo, discount_repo)
        self._visibility = OrderVisibilityResolver(user_repo)
        self._locks = locks

    def handle(self, user_id: str, order_id: int) -> CartDTO:
        """Replace the caller's cart with the lines of ``order_id``.

        Lines of the same product are merged. Products that have left the
        catalog are skipped.
        """
        user = require_user(self._user_repo, user_id)
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        if not self._visibility.resolve(user, None).allows(order.created_by_user_id):
            raise AuthorizationError(f"Order {order_id} is not visible to user '{user_id}'")

        merged: dict[str, Decimal] = {}
        for item in order.items:
            merged[item.product_id] = merged.get(item.product_id, Decimal("0")) + item.quantity.value

        lines: list[tuple[str, Quantity]] = []
        for product_id, quantity in merged.items():
            if self._product_repo.get_by_id(product_id) is None:
                logger.info(
                    "Repeat of %s skips product %s: no longer in the catalog",
                    order.order_number,
                    product_id,
                )
                continue
            lines.append((product_id, Quantity(quantity)))

        def _replace(cart: Cart) -> bool:
            cart.replace_items(lines)
            self._pricer.reprice(user, cart)
            return True

        cart = edit_cart(self._cart_repo, self._order_repo, self._locks, user_id, _replace)

        logger.info(
            "User %s repeated order %s into a cart of %d line(s)",
            user_id,
            order.order_number,
            len(cart.items),
        )
        return cart_to_dto(cart, self._pricer.products_for(cart))
