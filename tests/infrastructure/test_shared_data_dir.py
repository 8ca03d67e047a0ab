"""Two independently opened containers writing to one data directory.

Each container stands in for a separate CLI process: it has its own
repositories, its own file-store thread locks and its own ``UserLocks``.
"""

import json
import threading
from decimal import Decimal

import pytest

from ordering.application.add_to_cart import AddToCartHandler
from ordering.application.convert_cart import ConvertCartHandler
from ordering.domain.exceptions import EmptyCartError
from ordering.infrastructure import bootstrap


@pytest.fixture
def containers(tmp_path, monkeypatch):
    (tmp_path / "users.json").write_text(json.dumps([{"id": "u1"}]))
    (tmp_path / "products.json").write_text(json.dumps([
        {"id": "p1", "code": "HAM-1", "name": "Hammer", "group_id": "tools", "base_price": "10.00"},
        {"id": "p2", "code": "PNT-1", "name": "Paint", "group_id": "paint", "base_price": "5.00"},
    ]))
    monkeypatch.setenv(bootstrap.DATA_DIR_ENV, str(tmp_path))
    bootstrap.reset()
    first = bootstrap.container()
    bootstrap.reset()
    second = bootstrap.container()
    yield first, second
    bootstrap.reset()


def _add(c: bootstrap.Container) -> AddToCartHandler:
    return AddToCartHandler(c.users, c.products, c.discounts, c.carts, c.orders, c.locks)


def _convert(c: bootstrap.Container) -> ConvertCartHandler:
    return ConvertCartHandler(
        c.users, c.products, c.discounts, c.carts, c.orders, c.order_numbers, c.locks
    )


class TestSharedDataDirectory:

    def test_containers_are_independent(self, containers):
        first, second = containers
        assert first is not second
        assert first.locks is not second.locks

    def test_write_from_other_container_is_not_overwritten(self, containers):
        first, second = containers
        _add(first).handle("u1", "p1", "1")
        _add(second).handle("u1", "p2", "1")
        dto = _add(first).handle("u1", "p1", "1")
        assert {i.product_id: i.quantity for i in dto.items} == {"p1": Decimal("2"), "p2": Decimal("1")}

    def test_simultaneous_conversions_create_one_order(self, containers, tmp_path):
        first, second = containers
        _add(first).handle("u1", "p1", "3")
        outcomes = []

        def submit(c: bootstrap.Container) -> None:
            try:
                outcomes.append(_convert(c).handle("u1", "current", "cash").order_number)
            except EmptyCartError:
                outcomes.append("empty")

        threads = [threading.Thread(target=submit, args=(c,)) for c in (first, second)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        orders = json.loads((tmp_path / "orders.json").read_text())
        assert len(orders) == 1
        assert orders[0]["order_number"] in outcomes
        assert first.carts.get_by_user("u1").is_empty
