"""Application service: Order History use cases.

History is always a read over orders whose creator falls inside the
caller's visibility scope; caller filters can only narrow it further.
"""

from __future__ import annotations

from ordering.application.cart_pricing import require_user
from ordering.application.dto import CreatorOptionDTO, OrderHistoryFilter, OrderHistoryPage
from ordering.application.mappers import order_to_dto
from ordering.domain.exceptions import ValidationError
from ordering.domain.model.order import OrderType, PaymentMethod
from ordering.domain.model.user import User
from ordering.domain.repository.order_repository import OrderCriteria, OrderRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.order_visibility import OrderVisibilityResolver, VisibilityScope

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


class OrderHistoryHandler:

    def __init__(self, user_repo: UserRepository, order_repo: OrderRepository) -> None:
        self._user_repo = user_repo
        self._order_repo = order_repo
        self._visibility = OrderVisibilityResolver(user_repo)

    def handle(self, user_id: str, filters: OrderHistoryFilter | None = None) -> OrderHistoryPage:
        """Return one page of the caller's visible order history, newest first.

        Requesting a scope the caller's role does not allow silently falls
        back to the widest scope it does allow. A page past the end is empty.
        """
        filters = filters or OrderHistoryFilter()
        if filters.page < 1:
            raise ValidationError("Page must be 1 or greater")
        if filters.page_size < 1:
            raise ValidationError("Page size must be 1 or greater")
        page_size = min(filters.page_size, MAX_PAGE_SIZE)
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.start_date > filters.end_date
        ):
            raise ValidationError("Start date must not be after end date")

        user = require_user(self._user_repo, user_id)
        scope = self._visibility.resolve(user, VisibilityScope.parse(filters.scope))

        criteria = OrderCriteria(
            creator_ids=scope.creator_ids,
            created_by_user_id=filters.created_by_user_id or None,
            start_date=filters.start_date,
            end_date=filters.end_date,
            order_type=OrderType.parse(filters.order_type) if filters.order_type else None,
            payment_method=(
                PaymentMethod.parse(filters.payment_method) if filters.payment_method else None
            ),
        )
        orders, total = self._order_repo.find(
            criteria, offset=(filters.page - 1) * page_size, limit=page_size
        )
        return OrderHistoryPage(
            orders=[order_to_dto(o) for o in orders],
            total_count=total,
            page=filters.page,
            page_size=page_size,
        )


class ListFilterableCreatorsHandler:
    """Users the caller may pick in the history's ``created_by`` filter."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo
        self._visibility = OrderVisibilityResolver(user_repo)

    def handle(self, user_id: str) -> list[CreatorOptionDTO]:
        user = require_user(self._user_repo, user_id)
        scope = self._visibility.resolve(user, None)

        if scope.is_unrestricted:
            candidates = self._user_repo.list_all()
        else:
            candidates = [u for u in self._user_repo.list_all() if scope.allows(u.id)]

        return [
            CreatorOptionDTO(id=u.id, display_name=u.name)
            for u in sorted(candidates, key=_display_order)
        ]


def _display_order(user: User) -> tuple[str, str]:
    return user.name.casefold(), user.id
