"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime, time, timezone

import click

from ordering.application.convert_cart import ConvertCartHandler
from ordering.application.dto import OrderDTO, OrderHistoryFilter
from ordering.application.order_history import (
    DEFAULT_PAGE_SIZE,
    ListFilterableCreatorsHandler,
    OrderHistoryHandler,
)
from ordering.application.repeat_order import RepeatOrderHandler
from ordering.application.show_order import ShowOrderHandler
from ordering.domain.exceptions import DomainException
from ordering.infrastructure.bootstrap import container
from ordering.infrastructure.cli.cart_commands import display_cart, display_totals

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


def _as_utc(value: datetime | None, end_of_day: bool = False) -> datetime | None:
    """Dates typed on the command line are UTC; a bare end date covers the whole day."""
    if value is None:
        return None
    if end_of_day and value.time() == time.min:
        value = datetime.combine(value.date(), time.max)
    return value.replace(tzinfo=timezone.utc)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (#{dto.id}, {dto.order_type}, {dto.payment_method})")
    click.echo(f"Created by: {dto.created_by_user_id}")
    click.echo(f"Created:    {dto.created_at.isoformat()}")
    if dto.manager_user_id:
        click.echo(f"Manager:    {dto.manager_user_id}")
    if dto.shipping_department_id:
        click.echo(f"Shipping:   {dto.shipping_department_id}")
    if dto.comment:
        click.echo(f"Comment:    {dto.comment}")
    click.echo()

    click.echo(
        f"  {'Code':<10} {'Product':<24} {'Qty':>6} {'Price':>10} {'Disc%':>6} {'Net':>10} {'Total':>11}"
    )
    click.echo(f"  {'-'*83}")
    for item in dto.items:
        click.echo(
            f"  {item.product_code:<10} {item.product_name:<24} {item.quantity:>6} "
            f"{item.unit_price:>10} {item.discount_percent:>6} "
            f"{item.unit_price_with_discount:>10} {item.line_total:>11}"
        )
    click.echo(f"  {'-'*83}")
    display_totals(dto.totals)


@click.command("checkout")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option(
    "--type",
    "order_type",
    type=click.Choice(["current", "deferred"], case_sensitive=False),
    default="current",
    show_default=True,
    help="Order type.",
)
@click.option(
    "--payment",
    "payment_method",
    type=click.Choice(["cash", "cashless"], case_sensitive=False),
    required=True,
    help="Payment method.",
)
@click.option("--comment", default=None, help="Optional comment (max 1000 characters).")
def order_checkout(user_id: str, order_type: str, payment_method: str, comment: str | None) -> None:
    """Turn your cart into an order."""
    c = container()
    handler = ConvertCartHandler(
        user_repo=c.users,
        product_repo=c.products,
        discount_repo=c.discounts,
        cart_repo=c.carts,
        order_repo=c.orders,
        sequence=c.order_numbers,
        locks=c.locks,
    )

    try:
        dto = handler.handle(user_id, order_type, payment_method, comment)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created.")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(user_id: str, order_id: int) -> None:
    """Show details of an order you may see."""
    c = container()
    handler = ShowOrderHandler(user_repo=c.users, order_repo=c.orders)

    try:
        dto = handler.handle(user_id, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("history")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option(
    "--scope",
    type=click.Choice(["my", "managed", "my-and-managed", "all"], case_sensitive=False),
    default=None,
    help="Whose orders to list (defaults by role).",
)
@click.option("--created-by", default=None, help="Only orders created by this user.")
@click.option("--from", "start_date", type=click.DateTime(formats=_DATE_FORMATS), default=None)
@click.option("--to", "end_date", type=click.DateTime(formats=_DATE_FORMATS), default=None)
@click.option("--type", "order_type", type=click.Choice(["current", "deferred"]), default=None)
@click.option("--payment", "payment_method", type=click.Choice(["cash", "cashless"]), default=None)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
def order_history(
    user_id: str,
    scope: str | None,
    created_by: str | None,
    start_date: datetime | None,
    end_date: datetime | None,
    order_type: str | None,
    payment_method: str | None,
    page: int,
    page_size: int,
) -> None:
    """List orders visible to you, newest first."""
    c = container()
    handler = OrderHistoryHandler(user_repo=c.users, order_repo=c.orders)
    filters = OrderHistoryFilter(
        scope=scope,
        created_by_user_id=created_by,
        start_date=_as_utc(start_date),
        end_date=_as_utc(end_date, end_of_day=True),
        order_type=order_type,
        payment_method=payment_method,
        page=page,
        page_size=page_size,
    )

    try:
        result = handler.handle(user_id, filters)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(
        f"{'ID':<6} {'Number':<16} {'Created':<20} {'By':<14} {'Type':<9} {'Payment':<9} {'Total':>12}"
    )
    click.echo("-" * 92)
    for dto in result.orders:
        click.echo(
            f"{dto.id:<6} {dto.order_number:<16} {dto.created_at:%Y-%m-%d %H:%M:%S} "
            f"{dto.created_by_user_id:<14} {dto.order_type:<9} {dto.payment_method:<9} "
            f"{dto.totals.total_discounted_price:>12}"
        )
    click.echo(
        f"Page {result.page} ({result.page_size} per page), {result.total_count} order(s) in total"
    )


@click.command("creators")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
def order_creators(user_id: str) -> None:
    """List the users you can filter the history by."""
    handler = ListFilterableCreatorsHandler(user_repo=container().users)

    try:
        options = handler.handle(user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for option in options:
        click.echo(f"{option.id:<20} {option.display_name}")


@click.command("repeat")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to repeat.")
def order_repeat(user_id: str, order_id: int) -> None:
    """Replace your cart with the lines of a past order."""
    c = container()
    handler = RepeatOrderHandler(
        user_repo=c.users,
        product_repo=c.products,
        discount_repo=c.discounts,
        cart_repo=c.carts,
        order_repo=c.orders,
        locks=c.locks,
    )

    try:
        dto = handler.handle(user_id, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(dto)
