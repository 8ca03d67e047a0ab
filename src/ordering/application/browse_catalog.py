"""Application services: catalog browsing and lookup by product code.

Prices and stock are only filled in when the access gate lets the user
see them; otherwise those fields stay None so a client can tell "hidden"
from "zero".
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ordering.application.cart_pricing import load_discount_snapshot, require_user
from ordering.application.dto import (
    CatalogProductDTO,
    ProductLookupLine,
    ProductLookupResultDTO,
)
from ordering.domain.exceptions import ValidationError
from ordering.domain.model.product import Product
from ordering.domain.model.user import User
from ordering.domain.model.value_objects import to_decimal
from ordering.domain.repository.availability_repository import AvailabilityRepository
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.access_gate import (
    can_access_group,
    can_see_pricing_and_stock,
    ensure_group_access,
)
from ordering.domain.service.discount_resolver import resolve_price


class _CatalogRows:
    """Builds catalog rows for one user, with or without price and stock."""

    def __init__(
        self,
        user: User,
        discount_repo: DiscountRepository,
        availability_repo: AvailabilityRepository,
    ) -> None:
        self._user = user
        self._discount_repo = discount_repo
        self._availability_repo = availability_repo

    def build(self, products: Iterable[Product]) -> list[CatalogProductDTO]:
        products = list(products)
        if not can_see_pricing_and_stock(self._user):
            return [_bare_row(p) for p in products]

        snapshot = load_discount_snapshot(self._user, self._discount_repo)
        stock: dict[str, tuple[Decimal, datetime | None]] = {}
        for row in self._availability_repo.list_rows(p.id for p in products):
            quantity, as_of = stock.get(row.product_id, (Decimal("0"), None))
            latest = row.as_of if as_of is None else max(as_of, row.as_of)
            stock[row.product_id] = (quantity + row.quantity, latest)

        rows = []
        for product in products:
            price = resolve_price(snapshot, product)
            quantity, as_of = stock.get(product.id, (Decimal("0"), None))
            rows.append(
                CatalogProductDTO(
                    id=product.id,
                    group_id=product.group_id,
                    code=product.code,
                    name=product.name,
                    weight=product.weight,
                    volume=product.volume,
                    price=price.base_price.amount,
                    discount_percent=price.percent,
                    price_with_discount=price.discounted_price.amount,
                    availability=quantity,
                    availability_updated_at=as_of,
                )
            )
        return rows


def _bare_row(product: Product) -> CatalogProductDTO:
    return CatalogProductDTO(
        id=product.id,
        group_id=product.group_id,
        code=product.code,
        name=product.name,
        weight=product.weight,
        volume=product.volume,
    )


class BrowseCatalogHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        discount_repo: DiscountRepository,
        availability_repo: AvailabilityRepository,
    ) -> None:
        self._user_repo = user_repo
        self._product_repo = product_repo
        self._discount_repo = discount_repo
        self._availability_repo = availability_repo

    def handle(self, user_id: str, group_id: str) -> list[CatalogProductDTO]:
        """List the products of a group, sorted by code.

        A user without any grant sees the products without prices or stock.
        A user with grants may only open the groups granted to them.
        """
        user = require_user(self._user_repo, user_id)
        if can_see_pricing_and_stock(user):
            ensure_group_access(user, group_id)

        products = sorted(self._product_repo.list_by_group(group_id), key=lambda p: (p.code, p.id))
        rows = _CatalogRows(user, self._discount_repo, self._availability_repo)
        return rows.build(products)


class LookupProductsByCodeHandler:
    """Resolve pasted ``code, quantity`` lines to catalog rows.

    Problems with a single line (unknown code, group not granted, bad
    quantity) are reported on that line instead of failing the whole call.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        discount_repo: DiscountRepository,
        availability_repo: AvailabilityRepository,
    ) -> None:
        self._user_repo = user_repo
        self._product_repo = product_repo
        self._discount_repo = discount_repo
        self._availability_repo = availability_repo

    def handle(
        self, user_id: str, lines: Iterable[ProductLookupLine]
    ) -> list[ProductLookupResultDTO]:
        user = require_user(self._user_repo, user_id)
        gated = can_see_pricing_and_stock(user)
        rows = _CatalogRows(user, self._discount_repo, self._availability_repo)

        results: list[ProductLookupResultDTO] = []
        for line in lines:
            code = (line.code or "").strip()
            try:
                quantity = to_decimal(line.quantity, "quantity")
            except ValidationError as exc:
                results.append(_error(code, None, str(exc)))
                continue
            if quantity <= 0:
                results.append(_error(code, quantity, "Quantity must be greater than zero"))
                continue

            product = self._product_repo.get_by_code(code) if code else None
            if product is None:
                results.append(_error(code, quantity, f"Product with code '{code}' not found"))
                continue
            if gated and not can_access_group(user, product.group_id):
                results.append(
                    _error(code, quantity, f"Product '{code}' is not available to you")
                )
                continue

            results.append(
                ProductLookupResultDTO(
                    code=code,
                    requested_quantity=quantity,
                    product=rows.build([product])[0],
                )
            )
        return results


def _error(code: str, quantity: Decimal | None, message: str) -> ProductLookupResultDTO:
    return ProductLookupResultDTO(code=code, requested_quantity=quantity, error_message=message)
