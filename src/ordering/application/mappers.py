"""Domain -> DTO mapping shared by the handlers."""

from __future__ import annotations

from typing import Mapping

from ordering.application.dto import (
    AvailabilityRowDTO,
    AvailabilityTableDTO,
    BranchDTO,
    CartDTO,
    CartItemDTO,
    OrderDTO,
    OrderLineItemDTO,
    TotalsDTO,
)
from ordering.domain.model.availability import GroupAvailabilityTable
from ordering.domain.model.cart import Cart
from ordering.domain.model.order import Order
from ordering.domain.model.product import Product
from ordering.domain.model.totals import Totals


def totals_to_dto(totals: Totals) -> TotalsDTO:
    return TotalsDTO(
        total_quantity=totals.quantity,
        total_weight=totals.weight,
        total_volume=totals.volume,
        total_original_price=totals.original_price.amount,
        total_discounted_price=totals.discounted_price.amount,
    )


def cart_to_dto(cart: Cart, products: Mapping[str, Product]) -> CartDTO:
    items = []
    for item in cart.items:
        product = products.get(item.product_id)
        items.append(
            CartItemDTO(
                id=item.id,
                product_id=item.product_id,
                product_code=product.code if product else "",
                product_name=product.name if product else "",
                quantity=item.quantity.value,
                unit_price=item.unit_price.amount,
                discount_percent=item.discount_percent,
                unit_price_with_discount=item.unit_price_with_discount.amount,
                line_total=item.line_total.amount,
                weight=item.weight,
                volume=item.volume,
                added_at=item.added_at,
            )
        )
    return CartDTO(
        user_id=cart.user_id,
        version=cart.version,
        updated_at=cart.updated_at,
        items=items,
        totals=totals_to_dto(cart.totals),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        created_by_user_id=order.created_by_user_id,
        manager_user_id=order.manager_user_id,
        shipping_department_id=order.shipping_department_id,
        order_type=order.order_type.value,
        payment_method=order.payment_method.value,
        comment=order.comment,
        created_at=order.created_at,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_code=item.product_code,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=item.unit_price.amount,
                discount_percent=item.discount_percent,
                unit_price_with_discount=item.unit_price_with_discount.amount,
                line_total=item.line_total.amount,
                weight=item.weight,
                volume=item.volume,
            )
            for item in order.items
        ],
        totals=totals_to_dto(order.totals),
    )


def availability_to_dto(table: GroupAvailabilityTable) -> AvailabilityTableDTO:
    return AvailabilityTableDTO(
        group_id=table.group_id,
        branches=[
            BranchDTO(
                id=branch.id,
                code=branch.code,
                name=branch.name,
                display_name=branch.display_name,
            )
            for branch in table.branches
        ],
        products=[
            AvailabilityRowDTO(
                product_id=row.product.id,
                product_code=row.product.code,
                product_name=row.product.name,
                total_quantity=row.total_quantity,
                per_branch={cell.branch_id: cell.quantity for cell in row.per_branch},
                last_updated_at=row.last_updated_at,
            )
            for row in table.products
        ],
        last_updated_at=table.last_updated_at,
    )
