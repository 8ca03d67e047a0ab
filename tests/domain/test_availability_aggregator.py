"""Unit tests for the availability aggregator."""

from datetime import datetime, timezone
from decimal import Decimal

from ordering.domain.model.availability import AvailabilityRow, Branch
from ordering.domain.model.product import Product
from ordering.domain.model.value_objects import Money
from ordering.domain.service.availability_aggregator import aggregate, order_branches

MON = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)
TUE = datetime(2024, 3, 5, 8, 0, tzinfo=timezone.utc)

NORTH = Branch(id="b1", code="02", name="North")
SOUTH = Branch(id="b2", code="01", name="South")


def _product(pid: str, code: str) -> Product:
    return Product(id=pid, code=code, name=code, group_id="tools", base_price=Money.of("1"))


def _row(pid: str, bid: str, qty: str, as_of: datetime = MON) -> AvailabilityRow:
    return AvailabilityRow(product_id=pid, branch_id=bid, quantity=Decimal(qty), as_of=as_of)


class TestColumns:

    def test_branches_sorted_by_display_name(self):
        assert [b.id for b in order_branches([NORTH, SOUTH])] == ["b2", "b1"]

    def test_ties_broken_by_id(self):
        twin_a = Branch(id="x2", name="Depot")
        twin_b = Branch(id="x1", name="Depot")
        assert [b.id for b in order_branches([twin_a, twin_b])] == ["x1", "x2"]

    def test_display_name(self):
        assert NORTH.display_name == "02 North"
        assert Branch(id="b9", name="Yard").display_name == "Yard"


class TestAggregate:

    def test_totals_equal_sum_of_cells(self):
        table = aggregate(
            "tools",
            [_product("p1", "A")],
            [NORTH, SOUTH],
            [_row("p1", "b1", "4"), _row("p1", "b2", "6")],
        )
        row = table.products[0]
        assert row.total_quantity == Decimal("10")
        assert sum(c.quantity for c in row.per_branch) == row.total_quantity

    def test_missing_cells_are_zero(self):
        table = aggregate("tools", [_product("p1", "A")], [NORTH, SOUTH], [_row("p1", "b1", "4")])
        cells = {c.branch_id: c.quantity for c in table.products[0].per_branch}
        assert cells == {"b1": Decimal("4"), "b2": Decimal("0")}

    def test_product_without_rows_has_zero_row(self):
        table = aggregate("tools", [_product("p1", "A")], [NORTH], [])
        assert table.products[0].total_quantity == Decimal("0")
        assert table.products[0].last_updated_at is None
        assert table.last_updated_at is None

    def test_rows_for_unknown_branches_ignored(self):
        table = aggregate("tools", [_product("p1", "A")], [NORTH], [_row("p1", "gone", "99")])
        assert table.products[0].total_quantity == Decimal("0")

    def test_duplicate_cells_are_summed(self):
        table = aggregate(
            "tools",
            [_product("p1", "A")],
            [NORTH],
            [_row("p1", "b1", "1"), _row("p1", "b1", "2", TUE)],
        )
        assert table.products[0].total_quantity == Decimal("3")
        assert table.products[0].last_updated_at == TUE

    def test_every_row_has_every_column(self):
        table = aggregate(
            "tools",
            [_product("p1", "A"), _product("p2", "B")],
            [NORTH, SOUTH],
            [_row("p2", "b2", "5")],
        )
        for row in table.products:
            assert [c.branch_id for c in row.per_branch] == [b.id for b in table.branches]

    def test_products_sorted_by_code(self):
        table = aggregate("tools", [_product("p1", "Z"), _product("p2", "A")], [NORTH], [])
        assert [p.product.code for p in table.products] == ["A", "Z"]

    def test_last_updated_is_newest_row(self):
        table = aggregate(
            "tools",
            [_product("p1", "A"), _product("p2", "B")],
            [NORTH],
            [_row("p1", "b1", "1", MON), _row("p2", "b1", "1", TUE)],
        )
        assert table.last_updated_at == TUE
