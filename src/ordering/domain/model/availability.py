"""Branch stock: raw rows from ingestion and the aggregated group table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ordering.domain.model.product import Product


@dataclass(frozen=True)
class Branch:
    id: str
    code: str = ""
    name: str = ""

    @property
    def display_name(self) -> str:
        if self.code and self.name:
            return f"{self.code} {self.name}"
        return self.name or self.code or self.id


@dataclass(frozen=True)
class AvailabilityRow:
    """Stock of one product in one branch, as of an ingestion run."""

    product_id: str
    branch_id: str
    quantity: Decimal
    as_of: datetime


@dataclass(frozen=True)
class BranchQuantity:
    branch_id: str
    quantity: Decimal


@dataclass(frozen=True)
class ProductAvailability:
    product: Product
    total_quantity: Decimal
    per_branch: tuple[BranchQuantity, ...]
    last_updated_at: datetime | None = None


@dataclass(frozen=True)
class GroupAvailabilityTable:
    """Fixed column set: every product row carries a cell for every branch."""

    group_id: str
    branches: tuple[Branch, ...]
    products: tuple[ProductAvailability, ...]
    last_updated_at: datetime | None = None
