"""Domain service: Order Visibility Resolver.

Maps (caller, requested scope) to the set of creator ids whose orders the
caller may read. The caller's highest privilege decides:

  - admin: every scope is honoured; ``all`` is unrestricted.
  - department: ``my`` is honoured; every other scope (and the default)
    covers the creators sharing the caller's shipping department, plus
    the caller.
  - manager: ``my``, ``managed`` and ``my-and-managed`` are honoured;
    ``all`` is downgraded to ``my-and-managed``.
  - anyone else: always their own orders, whatever was requested.

Unsupported requests are downgraded, never rejected, because ``my`` is
valid for everyone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ordering.domain.model.user import User
from ordering.domain.repository.user_repository import UserRepository


class VisibilityScope(Enum):
    MY = "my"
    MANAGED = "managed"
    MY_AND_MANAGED = "my-and-managed"
    ALL = "all"

    @staticmethod
    def parse(raw: str | None) -> VisibilityScope | None:
        """Parse a scope token; blank or unknown tokens yield None (role default)."""
        if raw is None:
            return None
        try:
            return VisibilityScope(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class CreatorScope:
    """Resolved visibility. ``creator_ids`` of None means unrestricted."""

    creator_ids: frozenset[str] | None

    @property
    def is_unrestricted(self) -> bool:
        return self.creator_ids is None

    def allows(self, creator_id: str) -> bool:
        return self.creator_ids is None or creator_id in self.creator_ids

    @staticmethod
    def unrestricted() -> CreatorScope:
        return CreatorScope(creator_ids=None)

    @staticmethod
    def only(*creator_ids: str) -> CreatorScope:
        return CreatorScope(creator_ids=frozenset(creator_ids))


class OrderVisibilityResolver:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def resolve(self, caller: User, requested: VisibilityScope | None) -> CreatorScope:
        if caller.is_admin:
            scope = requested or VisibilityScope.ALL
            if scope == VisibilityScope.ALL:
                return CreatorScope.unrestricted()
            return self._resolve_own_and_managed(caller, scope)

        if caller.is_department:
            if requested == VisibilityScope.MY:
                return CreatorScope.only(caller.id)
            return CreatorScope(creator_ids=self.department_user_ids(caller) | {caller.id})

        if caller.is_manager:
            scope = requested or VisibilityScope.MY_AND_MANAGED
            if scope == VisibilityScope.ALL:
                scope = VisibilityScope.MY_AND_MANAGED
            return self._resolve_own_and_managed(caller, scope)

        return CreatorScope.only(caller.id)

    def managed_user_ids(self, manager_user_id: str) -> frozenset[str]:
        return frozenset(u.id for u in self._user_repo.list_managed_by(manager_user_id))

    def department_user_ids(self, caller: User) -> frozenset[str]:
        if caller.shipping_department_id is None:
            return frozenset()
        return frozenset(
            u.id for u in self._user_repo.list_by_department(caller.shipping_department_id)
        )

    # --- Internal helpers -----------------------------------------------------

    def _resolve_own_and_managed(self, caller: User, scope: VisibilityScope) -> CreatorScope:
        if scope == VisibilityScope.MY:
            return CreatorScope.only(caller.id)
        managed = self.managed_user_ids(caller.id)
        if scope == VisibilityScope.MANAGED:
            # The caller's own orders stay out even if a bad record makes a
            # user their own manager.
            return CreatorScope(creator_ids=managed - {caller.id})
        return CreatorScope(creator_ids=managed | {caller.id})
