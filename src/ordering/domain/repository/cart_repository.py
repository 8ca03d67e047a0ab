"""Abstract repository for Cart aggregate.

Callers serialise read-modify-write cycles per user inside one process (see
``ordering.application.concurrency``). Across processes the repository
guards each write optimistically: a cart remembers the version it was loaded
at, and ``save`` refuses it if the stored cart has moved on since.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ordering.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_by_user(self, user_id: str) -> Cart | None:
        """Return the user's cart, or None if it was never created."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist the cart, replacing any previous state.

        Raises ConcurrentModificationError when the stored cart is not the
        one ``cart`` was loaded from. On success ``cart.stored_version`` is
        advanced to ``cart.version``.
        """
