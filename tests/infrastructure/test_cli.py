"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from ordering.infrastructure import bootstrap
from ordering.infrastructure.cli.main import cli


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    files = {
        "users.json": [
            {"id": "u1", "display_name": "Una", "discount_profile_id": "w", "has_full_access": True},
            {"id": "u2", "product_group_access_ids": []},
        ],
        "products.json": [
            {"id": "p1", "code": "HAM-1", "name": "Hammer", "group_id": "tools", "base_price": "100.00"},
        ],
        "discount_profiles.json": [
            {"id": "w", "tier": "wholesale", "default_discounts": {"tools": "25"}},
        ],
        "branches.json": [{"id": "b1", "code": "01", "name": "Main"}],
        "availability.json": [
            {"product_id": "p1", "branch_id": "b1", "quantity": "8", "as_of": "2024-02-01T12:00:00+00:00"},
        ],
    }
    for name, content in files.items():
        (tmp_path / name).write_text(json.dumps(content), encoding="utf-8")
    monkeypatch.setenv(bootstrap.DATA_DIR_ENV, str(tmp_path))
    bootstrap.reset()
    yield tmp_path
    bootstrap.reset()


def _run(*args: str):
    return CliRunner().invoke(cli, list(args))


class TestCartCommands:

    def test_add_and_show(self, data_dir):
        result = _run("cart", "add", "--user", "u1", "--product", "p1", "--qty", "2")
        assert result.exit_code == 0, result.output
        assert "HAM-1" in result.output
        assert "150.00" in result.output

        shown = _run("cart", "show", "--user", "u1")
        assert "HAM-1" in shown.output

    def test_domain_error_exits_with_message(self, data_dir):
        result = _run("cart", "add", "--user", "u1", "--product", "nope")
        assert result.exit_code == 1
        assert "Product 'nope' not found" in result.output

    def test_clear(self, data_dir):
        _run("cart", "add", "--user", "u1", "--product", "p1")
        result = _run("cart", "clear", "--user", "u1")
        assert "Cart is empty." in result.output


class TestOrderCommands:

    def test_checkout_then_history(self, data_dir):
        _run("cart", "add", "--user", "u1", "--product", "p1", "--qty", "1")
        result = _run("order", "checkout", "--user", "u1", "--payment", "cashless", "--comment", "hi")
        assert result.exit_code == 0, result.output
        assert "ORD-" in result.output

        history = _run("order", "history", "--user", "u1")
        assert history.exit_code == 0, history.output
        assert "1 order(s) in total" in history.output

        stored = json.loads((data_dir / "orders.json").read_text())
        assert stored[0]["payment_method"] == "cashless"

    def test_checkout_empty_cart(self, data_dir):
        result = _run("order", "checkout", "--user", "u1", "--payment", "cash")
        assert result.exit_code == 1
        assert "Cart is empty" in result.output

    def test_repeat(self, data_dir):
        _run("cart", "add", "--user", "u1", "--product", "p1", "--qty", "3")
        _run("order", "checkout", "--user", "u1", "--payment", "cash")
        result = _run("order", "repeat", "--user", "u1", "--id", "1")
        assert result.exit_code == 0, result.output
        assert "HAM-1" in result.output

    def test_history_with_date_range(self, data_dir):
        result = _run("order", "history", "--user", "u1", "--from", "2000-01-01", "--to", "2000-01-02")
        assert result.exit_code == 0, result.output
        assert "No orders found." in result.output


class TestCatalogCommands:

    def test_products_hidden_prices(self, data_dir):
        result = _run("catalog", "products", "--user", "u2", "--group", "tools")
        assert result.exit_code == 0, result.output
        assert "HAM-1" in result.output
        assert "100.00" not in result.output

    def test_lookup(self, data_dir):
        result = _run("catalog", "lookup", "--user", "u1", "ham-1:2", "XYZ")
        assert result.exit_code == 0, result.output
        assert "75.00" in result.output
        assert "ERROR: Product with code 'XYZ' not found" in result.output

    def test_availability(self, data_dir):
        result = _run("availability", "group", "--user", "u1", "--group", "tools")
        assert result.exit_code == 0, result.output
        assert "01 Main" in result.output
        assert "Updated: 2024-02-01T12:00:00+00:00" in result.output
