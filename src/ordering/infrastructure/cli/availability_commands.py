"""CLI commands for branch stock."""

from __future__ import annotations

import click

from ordering.application.show_availability import ShowGroupAvailabilityHandler
from ordering.domain.exceptions import DomainException
from ordering.infrastructure.bootstrap import container


@click.command("group")
@click.option("--user", "user_id", required=True, help="Authenticated user ID.")
@click.option("--group", "group_id", required=True, help="Product group ID.")
def availability_group(user_id: str, group_id: str) -> None:
    """Show stock per branch for every product of a group."""
    c = container()
    handler = ShowGroupAvailabilityHandler(
        user_repo=c.users,
        product_repo=c.products,
        availability_repo=c.availability,
    )

    try:
        table = handler.handle(user_id, group_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not table.products:
        click.echo("No products found.")
        return

    header = f"{'Code':<12} {'Total':>8}"
    for branch in table.branches:
        header += f" {branch.display_name[:12]:>12}"
    click.echo(header)
    click.echo("-" * len(header))
    for row in table.products:
        line = f"{row.product_code:<12} {row.total_quantity:>8}"
        for branch in table.branches:
            line += f" {row.per_branch[branch.id]:>12}"
        click.echo(line)

    if table.last_updated_at is not None:
        click.echo(f"Updated: {table.last_updated_at.isoformat()}")
