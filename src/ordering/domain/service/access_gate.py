"""Domain service: Access Gate.

Decides whether a user may see prices and stock at all, and which product
groups they may browse. Evaluated on every call; grants are edited by
admins and must take effect immediately.
"""

from __future__ import annotations

from ordering.domain.exceptions import AuthorizationError
from ordering.domain.model.user import User


def can_see_pricing_and_stock(user: User) -> bool:
    return user.has_full_access or len(user.product_group_access_ids) > 0


def can_access_group(user: User, group_id: str) -> bool:
    if user.has_full_access:
        return True
    return group_id in user.product_group_access_ids


def ensure_pricing_and_stock_visible(user: User) -> None:
    if not can_see_pricing_and_stock(user):
        raise AuthorizationError(
            f"User '{user.id}' has no access to prices and stock"
        )


def ensure_group_access(user: User, group_id: str) -> None:
    if not can_access_group(user, group_id):
        raise AuthorizationError(
            f"Product group '{group_id}' is not available to user '{user.id}'"
        )
