"""Application service: Clear Cart use case."""

from __future__ import annotations

from ordering.application.cart_pricing import edit_cart, require_user
from ordering.application.concurrency import UserLocks
from ordering.application.dto import CartDTO
from ordering.application.mappers import cart_to_dto
from ordering.domain.model.cart import Cart
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.user_repository import UserRepository


class ClearCartHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        locks: UserLocks,
    ) -> None:
        self._user_repo = user_repo
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._locks = locks

    def handle(self, user_id: str) -> CartDTO:
        require_user(self._user_repo, user_id)

        def _clear(cart: Cart) -> bool:
            cart.clear()
            return True

        cart = edit_cart(self._cart_repo, self._order_repo, self._locks, user_id, _clear)
        return cart_to_dto(cart, {})
