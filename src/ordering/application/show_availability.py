"""Application service: Show Group Availability use case."""

from __future__ import annotations

from ordering.application.cart_pricing import require_user
from ordering.application.dto import AvailabilityTableDTO
from ordering.application.mappers import availability_to_dto
from ordering.domain.repository.availability_repository import AvailabilityRepository
from ordering.domain.repository.product_repository import ProductRepository
from ordering.domain.repository.user_repository import UserRepository
from ordering.domain.service.access_gate import (
    ensure_group_access,
    ensure_pricing_and_stock_visible,
)
from ordering.domain.service.availability_aggregator import aggregate


class ShowGroupAvailabilityHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        availability_repo: AvailabilityRepository,
    ) -> None:
        self._user_repo = user_repo
        self._product_repo = product_repo
        self._availability_repo = availability_repo

    def handle(self, user_id: str, group_id: str) -> AvailabilityTableDTO:
        """Return the per-branch stock table of a product group.

        Raises AuthorizationError unless the user may see stock and has
        been granted the group.
        """
        user = require_user(self._user_repo, user_id)
        ensure_pricing_and_stock_visible(user)
        ensure_group_access(user, group_id)

        products = self._product_repo.list_by_group(group_id)
        rows = self._availability_repo.list_rows(p.id for p in products)
        table = aggregate(group_id, products, self._availability_repo.list_branches(), rows)
        return availability_to_dto(table)
