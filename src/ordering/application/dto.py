"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other caller) and the application
layer without exposing domain internals. Amounts are Decimals; formatting
is left to the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


# --- Shared -------------------------------------------------------------------


@dataclass(frozen=True)
class TotalsDTO:
    total_quantity: Decimal
    total_weight: Decimal
    total_volume: Decimal
    total_original_price: Decimal
    total_discounted_price: Decimal


# --- Cart ---------------------------------------------------------------------


@dataclass(frozen=True)
class CartItemDTO:
    id: str
    product_id: str
    product_code: str
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    discount_percent: Decimal
    unit_price_with_discount: Decimal
    line_total: Decimal
    weight: Decimal
    volume: Decimal
    added_at: datetime


@dataclass(frozen=True)
class CartDTO:
    """Output: the complete cart, items and totals, after any cart operation."""

    user_id: str
    version: int
    updated_at: datetime
    items: list[CartItemDTO]
    totals: TotalsDTO


# --- Orders -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    product_code: str
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    discount_percent: Decimal
    unit_price_with_discount: Decimal
    line_total: Decimal
    weight: Decimal
    volume: Decimal


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    created_by_user_id: str
    manager_user_id: str | None
    shipping_department_id: str | None
    order_type: str
    payment_method: str
    comment: str | None
    created_at: datetime
    items: list[OrderLineItemDTO]
    totals: TotalsDTO


@dataclass(frozen=True)
class OrderHistoryFilter:
    """Input: caller-supplied filters for the order history.

    ``scope`` is one of ``my``, ``managed``, ``my-and-managed``, ``all``;
    None lets the caller's role pick the default.
    """

    scope: str | None = None
    created_by_user_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    order_type: str | None = None
    payment_method: str | None = None
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class OrderHistoryPage:
    orders: list[OrderDTO]
    total_count: int
    page: int
    page_size: int


@dataclass(frozen=True)
class CreatorOptionDTO:
    id: str
    display_name: str


# --- Catalog ------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogProductDTO:
    """A catalog row. Price and stock fields are None when the user may not see them."""

    id: str
    group_id: str
    code: str
    name: str
    weight: Decimal
    volume: Decimal
    price: Decimal | None = None
    discount_percent: Decimal | None = None
    price_with_discount: Decimal | None = None
    availability: Decimal | None = None
    availability_updated_at: datetime | None = None


@dataclass(frozen=True)
class ProductLookupLine:
    """Input: a product code and the quantity the customer wants."""

    code: str
    quantity: str | Decimal = "1"


@dataclass(frozen=True)
class ProductLookupResultDTO:
    code: str
    requested_quantity: Decimal | None
    product: CatalogProductDTO | None = None
    error_message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error_message is not None


# --- Availability -------------------------------------------------------------


@dataclass(frozen=True)
class BranchDTO:
    id: str
    code: str
    name: str
    display_name: str


@dataclass(frozen=True)
class AvailabilityRowDTO:
    product_id: str
    product_code: str
    product_name: str
    total_quantity: Decimal
    per_branch: dict[str, Decimal] = field(default_factory=dict)
    last_updated_at: datetime | None = None


@dataclass(frozen=True)
class AvailabilityTableDTO:
    group_id: str
    branches: list[BranchDTO]
    products: list[AvailabilityRowDTO]
    last_updated_at: datetime | None = None
