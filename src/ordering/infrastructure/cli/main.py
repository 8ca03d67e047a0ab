import logging

import click

from ordering.infrastructure.cli.availability_commands import availability_group
from ordering.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from ordering.infrastructure.cli.catalog_commands import catalog_lookup, catalog_products
from ordering.infrastructure.cli.order_commands import (
    order_checkout,
    order_creators,
    order_history,
    order_repeat,
    order_show,
)


@click.group()
@click.option("-v", "--verbose", count=True, help="-v for INFO, -vv for DEBUG logging.")
def cli(verbose: int) -> None:
    """Ordering: B2B cart, checkout and order history"""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def cart() -> None:
    """Manage your cart."""


@cli.group()
def order() -> None:
    """Check out and browse orders."""


@cli.group()
def catalog() -> None:
    """Browse the product catalog."""


@cli.group()
def availability() -> None:
    """Show branch stock."""


# Register subcommands
cart.add_command(cart_show)
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
order.add_command(order_checkout)
order.add_command(order_show)
order.add_command(order_history)
order.add_command(order_creators)
order.add_command(order_repeat)
catalog.add_command(catalog_products)
catalog.add_command(catalog_lookup)
availability.add_command(availability_group)
