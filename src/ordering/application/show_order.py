"""Application service: Show Order use case."""

from __future__ import annotations

from ordering.application.cart_pricing import require_user
from ordering.application.dto import OrderDTO
from ordering.application.mappers import order_to_dto
from ordering.domain.exceptions import AuthorizationError, NotFoundError
from ordering.domain.repository.order_repository import OrderRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.order_visibility import OrderVisibilityResolver


class ShowOrderHandler:

    def __init__(self, user_repo: UserRepository, order_repo: OrderRepository) -> None:
        self._user_repo = user_repo
        self._order_repo = order_repo
        self._visibility = OrderVisibilityResolver(user_repo)

    def handle(self, user_id: str, order_id: int) -> OrderDTO:
        user = require_user(self._user_repo, user_id)
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        if not self._visibility.resolve(user, None).allows(order.created_by_user_id):
            raise AuthorizationError(f"Order {order_id} is not visible to user '{user_id}'")
        return order_to_dto(order)
