"""JSON-file-backed implementations of OrderRepository and OrderNumberSequence."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ordering.domain.exceptions import ConcurrentModificationError, DuplicateOrderNumberError
from ordering.domain.model.order import Order, OrderLineItem, OrderType, PaymentMethod
from ordering.domain.model.value_objects import Money, Quantity
from ordering.domain.repository.order_repository import (
    OrderCriteria,
    OrderNumberSequence,
    OrderRepository,
    history_sort_key,
)
from ordering.infrastructure.persistence.json_file import (
    JsonFileStore,
    dump_datetime,
    dump_decimal,
    load_datetime,
    load_decimal,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path, empty=[])

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._store.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def find_by_source_cart(self, user_id: str, cart_version: int) -> Order | None:
        for raw in self._store.load():
            if (
                raw["created_by_user_id"] == user_id
                and raw.get("source_cart_version") == cart_version
            ):
                return self._to_domain(raw)
        return None

    def save(self, order: Order) -> Order:
        with self._store.transaction():
            orders = self._store.load()
            if any(raw["order_number"] == order.order_number for raw in orders):
                raise DuplicateOrderNumberError(
                    f"Order number {order.order_number} is already taken"
                )
            if order.source_cart_version is not None and any(
                raw["created_by_user_id"] == order.created_by_user_id
                and raw.get("source_cart_version") == order.source_cart_version
                for raw in orders
            ):
                raise ConcurrentModificationError(
                    f"Cart version {order.source_cart_version} of user "
                    f"{order.created_by_user_id} was already converted"
                )
            next_id = max((raw["id"] for raw in orders), default=0) + 1
            saved = replace(order, id=next_id)
            orders.append(self._to_raw(saved))
            self._store.persist(orders)
        return saved

    def find(
        self, criteria: OrderCriteria, offset: int, limit: int
    ) -> tuple[list[Order], int]:
        matching = [
            order
            for order in (self._to_domain(raw) for raw in self._store.load())
            if criteria.matches(order)
        ]
        matching.sort(key=history_sort_key, reverse=True)
        return matching[offset : offset + limit], len(matching)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "created_by_user_id": order.created_by_user_id,
            "manager_user_id": order.manager_user_id,
            "shipping_department_id": order.shipping_department_id,
            "order_type": order.order_type.value,
            "payment_method": order.payment_method.value,
            "comment": order.comment,
            "created_at": dump_datetime(order.created_at),
            "source_cart_version": order.source_cart_version,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_code": item.product_code,
                    "product_name": item.product_name,
                    "quantity": dump_decimal(item.quantity.value),
                    "unit_price": dump_decimal(item.unit_price.amount),
                    "discount_percent": dump_decimal(item.discount_percent),
                    "unit_price_with_discount": dump_decimal(item.unit_price_with_discount.amount),
                    "weight": dump_decimal(item.weight),
                    "volume": dump_decimal(item.volume),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = tuple(
            OrderLineItem(
                product_id=i["product_id"],
                product_code=i["product_code"],
                product_name=i["product_name"],
                quantity=Quantity(load_decimal(i["quantity"])),
                unit_price=Money(load_decimal(i["unit_price"])),
                discount_percent=load_decimal(i["discount_percent"]),
                unit_price_with_discount=Money(load_decimal(i["unit_price_with_discount"])),
                weight=load_decimal(i.get("weight")),
                volume=load_decimal(i.get("volume")),
            )
            for i in raw["items"]
        )
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            created_by_user_id=raw["created_by_user_id"],
            items=items,
            order_type=OrderType(raw["order_type"]),
            payment_method=PaymentMethod(raw["payment_method"]),
            manager_user_id=raw.get("manager_user_id"),
            shipping_department_id=raw.get("shipping_department_id"),
            comment=raw.get("comment"),
            created_at=load_datetime(raw["created_at"]),
            source_cart_version=raw.get("source_cart_version"),
        )


class JsonOrderNumberSequence(OrderNumberSequence):
    """Monotonic counter persisted as ``{"last_value": n}``."""

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path, empty={"last_value": 0})

    def next_value(self) -> int:
        with self._store.transaction():
            value = int(self._store.load().get("last_value", 0)) + 1
            self._store.persist({"last_value": value})
        return value
