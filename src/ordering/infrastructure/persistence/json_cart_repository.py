"""JSON-file-backed implementation of CartRepository.

All carts share one document keyed by user id.
"""

from __future__ import annotations

from pathlib import Path

from ordering.domain.exceptions import ConcurrentModificationError
from ordering.domain.model.cart import Cart, CartItem
from ordering.domain.model.value_objects import Money, Quantity
from ordering.domain.repository.cart_repository import CartRepository
from ordering.infrastructure.persistence.json_file import (
    JsonFileStore,
    dump_datetime,
    dump_decimal,
    load_datetime,
    load_decimal,
)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path, empty={})

    # --- CartRepository interface ---------------------------------------------

    def get_by_user(self, user_id: str) -> Cart | None:
        raw = self._store.load().get(user_id)
        if raw is None:
            return None
        return self._to_domain(user_id, raw)

    def save(self, cart: Cart) -> None:
        with self._store.transaction():
            carts = self._store.load()
            stored = carts.get(cart.user_id)
            if stored is not None and stored.get("version", 0) != cart.stored_version:
                raise ConcurrentModificationError(
                    f"Cart of user {cart.user_id} changed since it was loaded "
                    f"(stored version {stored.get('version', 0)}, loaded {cart.stored_version})"
                )
            carts[cart.user_id] = self._to_raw(cart)
            self._store.persist(carts)
        cart.stored_version = cart.version

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "version": cart.version,
            "updated_at": dump_datetime(cart.updated_at),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "quantity": dump_decimal(item.quantity.value),
                    "unit_price": dump_decimal(item.unit_price.amount),
                    "discount_percent": dump_decimal(item.discount_percent),
                    "unit_price_with_discount": dump_decimal(item.unit_price_with_discount.amount),
                    "weight": dump_decimal(item.weight),
                    "volume": dump_decimal(item.volume),
                    "added_at": dump_datetime(item.added_at),
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(user_id: str, raw: dict) -> Cart:
        items = [
            CartItem(
                id=i["id"],
                product_id=i["product_id"],
                quantity=Quantity(load_decimal(i["quantity"])),
                unit_price=Money(load_decimal(i.get("unit_price"))),
                discount_percent=load_decimal(i.get("discount_percent")),
                unit_price_with_discount=Money(load_decimal(i.get("unit_price_with_discount"))),
                weight=load_decimal(i.get("weight")),
                volume=load_decimal(i.get("volume")),
                added_at=load_datetime(i["added_at"]),
            )
            for i in raw.get("items", [])
        ]
        return Cart(
            user_id=user_id,
            items=items,
            version=raw.get("version", 0),
            updated_at=load_datetime(raw["updated_at"]),
            stored_version=raw.get("version", 0),
        )
