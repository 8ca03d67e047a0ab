"""Domain service: Availability Aggregator.

Merges per-branch stock rows for the products of one group into a table
with a fixed column per branch and a computed total per product.

Access control is NOT done here: callers check the access gate before
asking for a table.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ordering.domain.model.availability import (
    AvailabilityRow,
    Branch,
    BranchQuantity,
    GroupAvailabilityTable,
    ProductAvailability,
)
from ordering.domain.model.product import Product


def order_branches(branches: Iterable[Branch]) -> list[Branch]:
    """Stable column order: display name ascending, id as tie-breaker."""
    unique = {branch.id: branch for branch in branches}
    return sorted(unique.values(), key=lambda b: (b.display_name.casefold(), b.id))


def aggregate(
    group_id: str,
    products: Iterable[Product],
    branches: Iterable[Branch],
    rows: Iterable[AvailabilityRow],
) -> GroupAvailabilityTable:
    columns = order_branches(branches)
    column_ids = {branch.id for branch in columns}

    # product_id -> branch_id -> (quantity, last as_of)
    cells: dict[str, dict[str, tuple[Decimal, datetime]]] = {}
    for row in rows:
        if row.branch_id not in column_ids:
            continue
        per_product = cells.setdefault(row.product_id, {})
        quantity, as_of = per_product.get(row.branch_id, (Decimal("0"), row.as_of))
        per_product[row.branch_id] = (quantity + row.quantity, max(as_of, row.as_of))

    table_updated: datetime | None = None
    product_rows: list[ProductAvailability] = []
    for product in sorted(products, key=lambda p: (p.code, p.id)):
        per_product = cells.get(product.id, {})
        per_branch = tuple(
            BranchQuantity(
                branch_id=branch.id,
                quantity=per_product.get(branch.id, (Decimal("0"), None))[0],
            )
            for branch in columns
        )
        stamps = [as_of for _, as_of in per_product.values()]
        updated = max(stamps) if stamps else None
        if updated is not None and (table_updated is None or updated > table_updated):
            table_updated = updated

        product_rows.append(
            ProductAvailability(
                product=product,
                total_quantity=sum((cell.quantity for cell in per_branch), Decimal("0")),
                per_branch=per_branch,
                last_updated_at=updated,
            )
        )

    return GroupAvailabilityTable(
        group_id=group_id,
        branches=tuple(columns),
        products=tuple(product_rows),
        last_updated_at=table_updated,
    )
