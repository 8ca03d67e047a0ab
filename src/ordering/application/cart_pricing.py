"""Cart support shared by the cart and order use cases.

Opens the caller's cart for one read-modify-write cycle, loads the caller's
discount data and the products behind cart lines, and re-captures each
line's price snapshot through the Discount Resolver.
"""

from __future__ import annotations

import logging
from typing import Callable

from ordering.application.concurrency import UserLocks, run_with_retry
from ordering.domain.exceptions import ConcurrentModificationError, NotFoundError
from ordering.domain.model.cart import Cart
from ordering.domain.model.product import Product
from ordering.domain.model.user import User
from ordering.domain.repository.cart_repository import CartRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.discount_resolver import DiscountSnapshot, resolve_price

logger = logging.getLogger(__name__)

CART_WRITE_ATTEMPTS = 3


def require_user(user_repo: UserRepository, user_id: str) -> User:
    user = user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User '{user_id}' not found")
    return user


def open_cart(
    cart_repo: CartRepository, order_repo: OrderRepository, user_id: str
) -> tuple[Cart, bool]:
    """Return the user's cart and whether it must be saved even if untouched.

    A missing cart comes back fresh. A cart whose current version was
    already turned into an order (its clear failed after conversion) comes
    back emptied.
    """
    cart = cart_repo.get_by_user(user_id)
    if cart is None:
        return Cart(user_id=user_id), True
    if not cart.is_empty:
        order = order_repo.find_by_source_cart(user_id, cart.version)
        if order is not None:
            logger.warning(
                "Cart of user %s (version %d) was already converted into %s; emptying it",
                user_id,
                cart.version,
                order.order_number,
            )
            cart.clear()
            return cart, True
    return cart, False


def edit_cart(
    cart_repo: CartRepository,
    order_repo: OrderRepository,
    locks: UserLocks,
    user_id: str,
    mutate: Callable[[Cart], bool],
) -> Cart:
    """Run one read-modify-write cycle on the user's cart and return the cart.

    ``mutate`` reports whether it changed the cart. A write that lost to
    another process is replayed on a freshly loaded cart.
    """

    def _attempt() -> Cart:
        with locks.hold(user_id):
            cart, dirty = open_cart(cart_repo, order_repo, user_id)
            if mutate(cart) or dirty:
                cart_repo.save(cart)
            return cart

    def _log_conflict(attempt: int, exc: BaseException) -> None:
        logger.warning(
            "Cart of user %s changed concurrently (attempt %d/%d): %s",
            user_id,
            attempt,
            CART_WRITE_ATTEMPTS,
            exc,
        )

    return run_with_retry(
        _attempt,
        attempts=CART_WRITE_ATTEMPTS,
        retry_on=(ConcurrentModificationError,),
        on_retry=_log_conflict,
    )


def load_discount_snapshot(user: User, discount_repo: DiscountRepository) -> DiscountSnapshot:
    profile = None
    if user.discount_profile_id is not None:
        profile = discount_repo.get_profile(user.discount_profile_id)
    return DiscountSnapshot.build(profile, discount_repo.list_special_discounts(user.id))


class CartPricer:

    def __init__(
        self,
        product_repo: ProductRepository,
        discount_repo: DiscountRepository,
    ) -> None:
        self._product_repo = product_repo
        self._discount_repo = discount_repo

    def products_for(self, cart: Cart) -> dict[str, Product]:
        """Current catalog entries behind the cart's lines (missing ones omitted)."""
        products: dict[str, Product] = {}
        for item in cart.items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is not None:
                products[product.id] = product
        return products

    def reprice(self, user: User, cart: Cart) -> dict[str, Product]:
        """Capture current prices on every line.

        Lines whose product has left the catalog are dropped. Returns the
        product lookup used, for mapping the cart to a DTO.
        """
        products = self.products_for(cart)
        for item in list(cart.items):
            if item.product_id not in products:
                cart.remove(item.id)

        snapshot = load_discount_snapshot(user, self._discount_repo)
        for item in cart.items:
            product = products[item.product_id]
            price = resolve_price(snapshot, product)
            item.capture_pricing(
                unit_price=price.base_price,
                discount_percent=price.percent,
                unit_price_with_discount=price.discounted_price,
                weight=product.weight,
                volume=product.volume,
            )
        return products
