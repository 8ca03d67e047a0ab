"""Application service: Remove Cart Item use case.

Removing a line that is not in the cart is a no-op, not an error.
"""

from __future__ import annotations

from ordering.application.cart_pricing import CartPricer, edit_cart, require_user
from ordering.application.concurrency import UserLocks
from ordering.application.dto import CartDTO
from ordering.application.mappers import cart_to_dto
from ordering.domain.model.cart import Cart
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository


class RemoveCartItemHandler:

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

    def handle(self, user_id: str, cart_item_id: str) -> CartDTO:
        user = require_user(self._user_repo, user_id)

        def _remove(cart: Cart) -> bool:
            if not cart.remove(cart_item_id):
                return False
            self._pricer.reprice(user, cart)
            return True

        cart = edit_cart(self._cart_repo, self._order_repo, self._locks, user_id, _remove)
        return cart_to_dto(cart, self._pricer.products_for(cart))
