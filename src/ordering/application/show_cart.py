"""Application service: Show Cart use case (get-or-create)."""

from __future__ import annotations

from ordering.application.cart_pricing import CartPricer, edit_cart, require_user
from ordering.application.concurrency import UserLocks
from ordering.application.dto import CartDTO
from ordering.application.mappers import cart_to_dto
from ordering.domain.exceptions import AuthorizationError
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository


class ShowCartHandler:

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

    def handle(self, user_id: str, owner_id: str | None = None) -> CartDTO:
        """Return the caller's cart, creating an empty one on first access.

        Prices are shown as captured at the last mutation; reading never
        reprices. Reading somebody else's cart is rejected.
        """
        if owner_id is not None and owner_id != user_id:
            raise AuthorizationError("Carts can only be read by their owner")
        require_user(self._user_repo, user_id)

        cart = edit_cart(
            self._cart_repo, self._order_repo, self._locks, user_id, lambda cart: False
        )
        return cart_to_dto(cart, self._pricer.products_for(cart))
