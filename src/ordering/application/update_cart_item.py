"""Application service: Update Cart Item quantity use case."""

from __future__ import annotations

from decimal import Decimal

from ordering.application.cart_pricing import CartPricer, edit_cart, require_user
from ordering.application.concurrency import UserLocks
from ordering.application.dto import CartDTO
from ordering.application.mappers import cart_to_dto
from ordering.domain.model.cart import Cart
from ordering.domain.model.value_objects import to_decimal
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository


class UpdateCartItemHandler:

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
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._pricer = CartPricer(product_repo, discount_repo)
        self._locks = locks

    def handle(self, user_id: str, cart_item_id: str, quantity: str | Decimal) -> CartDTO:
        """Overwrite a line's quantity; zero or less removes the line."""
        qty = to_decimal(quantity, "quantity")
        user = require_user(self._user_repo, user_id)

        def _update(cart: Cart) -> bool:
            cart.set_quantity(cart_item_id, qty)
            self._pricer.reprice(user, cart)
            return True

        cart = edit_cart(self._cart_repo, self._order_repo, self._locks, user_id, _update)
        return cart_to_dto(cart, self._pricer.products_for(cart))
