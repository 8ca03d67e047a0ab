"""Integration tests for order history, order detail and creator options.

Uses in-memory fake repositories, no file I/O.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ordering.application.dto import OrderHistoryFilter
from ordering.application.order_history import (
    MAX_PAGE_SIZE,
    ListFilterableCreatorsHandler,
    OrderHistoryHandler,
)
from ordering.application.show_order import ShowOrderHandler
from ordering.domain.exceptions import AuthorizationError, NotFoundError, ValidationError
from ordering.domain.model.order import Order, OrderLineItem, OrderType, PaymentMethod
from ordering.domain.model.user import Role, User
from ordering.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeOrderRepository, FakeUserRepository

T0 = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

USERS = [
    User(id="admin", roles=frozenset({Role.ADMIN}), display_name="Zoe Admin"),
    User(id="m1", roles=frozenset({Role.MANAGER}), display_name="Mia Manager"),
    User(id="m2", roles=frozenset({Role.MANAGER}), display_name="Max Manager"),
    User(id="d1", roles=frozenset({Role.DEPARTMENT}), display_name="Dora", shipping_department_id="north"),
    User(id="c1", manager_user_id="m1", display_name="Carl", shipping_department_id="north"),
    User(id="c2", manager_user_id="m1", display_name="Anna"),
    User(id="c3", manager_user_id="m2", display_name="Bob", shipping_department_id="south"),
]


def _order(
    number: str,
    creator: str,
    created_at: datetime = T0,
    order_type: OrderType = OrderType.CURRENT,
    payment: PaymentMethod = PaymentMethod.CASH,
) -> Order:
    return Order(
        id=None,
        order_number=number,
        created_by_user_id=creator,
        items=(
            OrderLineItem(
                product_id="p1",
                product_code="HAM-1",
                product_name="Hammer",
                quantity=Quantity.of("1"),
                unit_price=Money.of("10.00"),
                discount_percent=Decimal("0"),
                unit_price_with_discount=Money.of("10.00"),
            ),
        ),
        order_type=order_type,
        payment_method=payment,
        created_at=created_at,
    )


def _setup(orders: list[Order] | None = None):
    users = FakeUserRepository(USERS)
    order_repo = FakeOrderRepository()
    if orders is None:
        orders = [
            _order("ORD-2024-000001", "c1", T0),
            _order("ORD-2024-000002", "c2", T0 + timedelta(hours=1)),
            _order("ORD-2024-000003", "c3", T0 + timedelta(hours=2)),
            _order("ORD-2024-000004", "m1", T0 + timedelta(hours=3)),
            _order("ORD-2024-000005", "admin", T0 + timedelta(hours=4)),
        ]
    saved = [order_repo.save(o) for o in orders]
    return OrderHistoryHandler(users, order_repo), users, order_repo, saved


def _creators(page) -> set[str]:
    return {o.created_by_user_id for o in page.orders}


class TestHistoryScope:

    def test_customer_sees_own_orders(self):
        handler, *_ = _setup()
        assert _creators(handler.handle("c1")) == {"c1"}

    def test_customer_asking_for_all_still_sees_own(self):
        handler, *_ = _setup()
        page = handler.handle("c1", OrderHistoryFilter(scope="all"))
        assert _creators(page) == {"c1"}
        assert page.total_count == 1

    def test_manager_default_is_own_and_managed(self):
        handler, *_ = _setup()
        assert _creators(handler.handle("m1")) == {"m1", "c1", "c2"}

    def test_manager_all_is_downgraded(self):
        handler, *_ = _setup()
        assert _creators(handler.handle("m1", OrderHistoryFilter(scope="all"))) == {"m1", "c1", "c2"}

    def test_manager_managed_only(self):
        handler, *_ = _setup()
        assert _creators(handler.handle("m1", OrderHistoryFilter(scope="managed"))) == {"c1", "c2"}

    def test_manager_my_only(self):
        handler, *_ = _setup()
        assert _creators(handler.handle("m1", OrderHistoryFilter(scope="my"))) == {"m1"}

    def test_department_sees_its_department(self):
        handler, *_ = _setup()
        assert _creators(handler.handle("d1")) == {"c1"}

    def test_admin_sees_everything(self):
        handler, *_ = _setup()
        assert handler.handle("admin").total_count == 5

    def test_created_by_outside_scope_yields_nothing(self):
        handler, *_ = _setup()
        page = handler.handle("m1", OrderHistoryFilter(created_by_user_id="c3"))
        assert page.orders == []
        assert page.total_count == 0

    def test_created_by_inside_scope(self):
        handler, *_ = _setup()
        page = handler.handle("m1", OrderHistoryFilter(created_by_user_id="c2"))
        assert _creators(page) == {"c2"}

    def test_unknown_caller(self):
        handler, *_ = _setup()
        with pytest.raises(NotFoundError):
            handler.handle("ghost")


class TestHistoryFilters:

    def test_date_range_is_inclusive(self):
        handler, *_ = _setup()
        page = handler.handle(
            "admin",
            OrderHistoryFilter(start_date=T0 + timedelta(hours=1), end_date=T0 + timedelta(hours=3)),
        )
        assert [o.order_number for o in page.orders] == [
            "ORD-2024-000004",
            "ORD-2024-000003",
            "ORD-2024-000002",
        ]

    def test_start_after_end_rejected(self):
        handler, *_ = _setup()
        with pytest.raises(ValidationError, match="Start date"):
            handler.handle("admin", OrderHistoryFilter(start_date=T0, end_date=T0 - timedelta(days=1)))

    def test_order_type_and_payment_filters(self):
        handler, *_ = _setup([
            _order("ORD-2024-000001", "c1", order_type=OrderType.DEFERRED),
            _order("ORD-2024-000002", "c1", payment=PaymentMethod.CASHLESS),
            _order("ORD-2024-000003", "c1"),
        ])
        deferred = handler.handle("c1", OrderHistoryFilter(order_type="deferred"))
        cashless = handler.handle("c1", OrderHistoryFilter(payment_method="cashless"))
        assert [o.order_number for o in deferred.orders] == ["ORD-2024-000001"]
        assert [o.order_number for o in cashless.orders] == ["ORD-2024-000002"]

    def test_unknown_order_type_filter_rejected(self):
        handler, *_ = _setup()
        with pytest.raises(ValidationError, match="Unknown order type"):
            handler.handle("c1", OrderHistoryFilter(order_type="urgent"))


class TestHistoryOrderingAndPaging:

    def test_newest_first_with_number_tie_break(self):
        handler, *_ = _setup([
            _order("ORD-2024-000001", "c1", T0),
            _order("ORD-2024-000003", "c1", T0),
            _order("ORD-2024-000002", "c1", T0 + timedelta(minutes=5)),
        ])
        page = handler.handle("c1")
        assert [o.order_number for o in page.orders] == [
            "ORD-2024-000002",
            "ORD-2024-000003",
            "ORD-2024-000001",
        ]

    def test_tie_break_compares_sequence_numerically(self):
        handler, *_ = _setup([
            _order("ORD-2026-999999", "c1", T0),
            _order("ORD-2026-1000000", "c1", T0),
        ])
        page = handler.handle("c1")
        assert [o.order_number for o in page.orders] == ["ORD-2026-1000000", "ORD-2026-999999"]

    def test_pagination(self):
        handler, *_ = _setup([
            _order(f"ORD-2024-{n:06d}", "c1", T0 + timedelta(minutes=n)) for n in range(1, 26)
        ])
        page = handler.handle("c1", OrderHistoryFilter(page=2, page_size=10))
        assert page.total_count == 25
        assert len(page.orders) == 10
        assert page.orders[0].order_number == "ORD-2024-000015"

    def test_last_partial_page(self):
        handler, *_ = _setup([
            _order(f"ORD-2024-{n:06d}", "c1", T0 + timedelta(minutes=n)) for n in range(1, 26)
        ])
        assert len(handler.handle("c1", OrderHistoryFilter(page=3, page_size=10)).orders) == 5

    def test_page_past_end_is_empty(self):
        handler, *_ = _setup()
        page = handler.handle("admin", OrderHistoryFilter(page=9, page_size=10))
        assert page.orders == []
        assert page.total_count == 5

    def test_default_page_size(self):
        handler, *_ = _setup()
        assert handler.handle("admin").page_size == 20

    @pytest.mark.parametrize("page, size", [(0, 20), (-1, 20), (1, 0)])
    def test_invalid_paging_rejected(self, page, size):
        handler, *_ = _setup()
        with pytest.raises(ValidationError):
            handler.handle("admin", OrderHistoryFilter(page=page, page_size=size))

    def test_page_size_is_capped(self):
        handler, *_ = _setup()
        assert handler.handle("admin", OrderHistoryFilter(page_size=10_000)).page_size == MAX_PAGE_SIZE


class TestShowOrder:

    def test_owner_can_read(self):
        _, users, orders, saved = _setup()
        dto = ShowOrderHandler(users, orders).handle("c1", saved[0].id)
        assert dto.order_number == "ORD-2024-000001"

    def test_manager_can_read_managed_customers_order(self):
        _, users, orders, saved = _setup()
        assert ShowOrderHandler(users, orders).handle("m1", saved[1].id).created_by_user_id == "c2"

    def test_manager_cannot_read_foreign_customer(self):
        _, users, orders, saved = _setup()
        with pytest.raises(AuthorizationError):
            ShowOrderHandler(users, orders).handle("m1", saved[2].id)

    def test_customer_cannot_read_other_customer(self):
        _, users, orders, saved = _setup()
        with pytest.raises(AuthorizationError):
            ShowOrderHandler(users, orders).handle("c2", saved[0].id)

    def test_department_reads_orders_of_its_department(self):
        _, users, orders, saved = _setup()
        assert ShowOrderHandler(users, orders).handle("d1", saved[0].id).created_by_user_id == "c1"

    def test_department_cannot_read_other_department(self):
        _, users, orders, saved = _setup()
        with pytest.raises(AuthorizationError):
            ShowOrderHandler(users, orders).handle("d1", saved[2].id)

    def test_admin_reads_anything(self):
        _, users, orders, saved = _setup()
        assert ShowOrderHandler(users, orders).handle("admin", saved[2].id).created_by_user_id == "c3"

    def test_missing_order(self):
        _, users, orders, _ = _setup()
        with pytest.raises(NotFoundError, match="Order 999 not found"):
            ShowOrderHandler(users, orders).handle("admin", 999)


class TestFilterableCreators:

    def test_customer_gets_only_self(self):
        handler = ListFilterableCreatorsHandler(FakeUserRepository(USERS))
        assert [o.id for o in handler.handle("c1")] == ["c1"]

    def test_manager_gets_self_and_managed_sorted_by_name(self):
        handler = ListFilterableCreatorsHandler(FakeUserRepository(USERS))
        assert [o.display_name for o in handler.handle("m1")] == ["Anna", "Carl", "Mia Manager"]

    def test_department_gets_its_members(self):
        handler = ListFilterableCreatorsHandler(FakeUserRepository(USERS))
        assert [o.display_name for o in handler.handle("d1")] == ["Carl", "Dora"]

    def test_admin_gets_everyone(self):
        handler = ListFilterableCreatorsHandler(FakeUserRepository(USERS))
        assert {o.id for o in handler.handle("admin")} == {u.id for u in USERS}
