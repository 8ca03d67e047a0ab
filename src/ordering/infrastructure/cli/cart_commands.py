"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from ordering.application.add_to_cart import AddToCartHandler
from ordering.application.clear_cart import ClearCartHandler
from ordering.application.dto import CartDTO, TotalsDTO
from ordering.application.remove_cart_item import RemoveCartItemHandler
from ordering.application.show_cart import ShowCartHandler
from ordering.application.update_cart_item import UpdateCartItemHandler
from ordering.domain.exceptions import DomainException
from ordering.infrastructure.bootstrap import container


def display_totals(totals: TotalsDTO) -> None:
    click.echo(
        f"  Quantity: {totals.total_quantity}  Weight: {totals.total_weight}  "
        f"Volume: {totals.total_volume}"
    )
    click.echo(f"  {'Total (list)':<27} {totals.total_original_price:>20}")
    click.echo(f"  {'Total (with discount)':<27} {totals.total_discounted_price:>20}")


def display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    click.echo(f"Cart of {dto.user_id}  (version {dto.version})")
    if not dto.items:
        click.echo("Cart is empty.")
        return

    click.echo()
    click.echo(
        f"  {'Item':<32} {'Code':<10} {'Qty':>6} {'Price':>10} {'Disc%':>6} {'Net':>10} {'Total':>11}"
    )
    click.echo(f"  {'-'*91}")
    for item in dto.items:
        click.echo(
            f"  {item.id:<32} {item.product_code:<10} {item.quantity:>6} "
            f"{item.unit_price:>10} {item.discount_percent:>6} "
            f"{item.unit_price_with_discount:>10} {item.line_total:>11}"
        )
    click.echo(f"  {'-'*91}")
    display_totals(dto.totals)


def _cart_handler_deps() -> dict:
    c = container()
    return {
        "user_repo": c.users,
        "product_repo": c.products,
        "discount_repo": c.discounts,
        "cart_repo": c.carts,
        "order_repo": c.orders,
        "locks": c.locks,
    }


@click.command("show")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
def cart_show(user_id: str) -> None:
    """Show your cart."""
    handler = ShowCartHandler(**_cart_handler_deps())

    try:
        dto = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("add")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default="1", show_default=True, help="Quantity to add.")
def cart_add(user_id: str, product_id: str, quantity: str) -> None:
    """Add a product to your cart."""
    handler = AddToCartHandler(**_cart_handler_deps())

    try:
        dto = handler.handle(user_id, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("update")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@click.option("--qty", "quantity", required=True, help="New quantity (0 removes the line).")
def cart_update(user_id: str, item_id: str, quantity: str) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartItemHandler(**_cart_handler_deps())

    try:
        dto = handler.handle(user_id, item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("remove")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
def cart_remove(user_id: str, item_id: str) -> None:
    """Remove a line from your cart."""
    handler = RemoveCartItemHandler(**_cart_handler_deps())

    try:
        dto = handler.handle(user_id, item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)


@click.command("clear")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
def cart_clear(user_id: str) -> None:
    """Empty your cart."""
    c = container()
    handler = ClearCartHandler(
        user_repo=c.users, cart_repo=c.carts, order_repo=c.orders, locks=c.locks
    )

    try:
        dto = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)
