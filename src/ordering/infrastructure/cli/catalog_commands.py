"""CLI commands for catalog browsing."""

from __future__ import annotations

import click

from ordering.application.browse_catalog import BrowseCatalogHandler, LookupProductsByCodeHandler
from ordering.application.dto import CatalogProductDTO, ProductLookupLine
from ordering.domain.exceptions import DomainException
from ordering.infrastructure.bootstrap import container


def _hidden(value: object) -> str:
    return "-" if value is None else str(value)


def _display_row(p: CatalogProductDTO) -> None:
    click.echo(
        f"{p.id:<10} {p.code:<12} {p.name:<28} {_hidden(p.price):>10} "
        f"{_hidden(p.discount_percent):>6} {_hidden(p.price_with_discount):>10} "
        f"{_hidden(p.availability):>8}"
    )


def _display_header() -> None:
    click.echo(
        f"{'ID':<10} {'Code':<12} {'Name':<28} {'Price':>10} {'Disc%':>6} {'Net':>10} {'Stock':>8}"
    )
    click.echo("-" * 90)


def _parse_lookup_line(raw: str) -> ProductLookupLine:
    """Parse 'CODE' or 'CODE:QTY'."""
    if ":" in raw:
        code, quantity = raw.rsplit(":", 1)
        return ProductLookupLine(code=code.strip(), quantity=quantity.strip())
    return ProductLookupLine(code=raw.strip())


@click.command("products")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--group", "group_id", required=True, help="Product group ID.")
def catalog_products(user_id: str, group_id: str) -> None:
    """List the products of a group."""
    c = container()
    handler = BrowseCatalogHandler(
        user_repo=c.users,
        product_repo=c.products,
        discount_repo=c.discounts,
        availability_repo=c.availability,
    )

    try:
        rows = handler.handle(user_id, group_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No products found.")
        return

    _display_header()
    for row in rows:
        _display_row(row)


@click.command("lookup")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.argument("lines", nargs=-1, required=True)
def catalog_lookup(user_id: str, lines: tuple[str, ...]) -> None:
    """Look products up by code, given as CODE or CODE:QTY."""
    c = container()
    handler = LookupProductsByCodeHandler(
        user_repo=c.users,
        product_repo=c.products,
        discount_repo=c.discounts,
        availability_repo=c.availability,
    )

    try:
        results = handler.handle(user_id, [_parse_lookup_line(raw) for raw in lines])
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_header()
    for result in results:
        if result.is_error:
            click.echo(f"{'':<10} {result.code:<12} ERROR: {result.error_message}")
        else:
            _display_row(result.product)
