"""User: the identity as seen by the ordering engine.

Users are created and edited by admin tooling; the engine only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ordering.domain.exceptions import ValidationError


class Role(Enum):
    CUSTOMER = "customer"
    MANAGER = "manager"
    DEPARTMENT = "department"
    ADMIN = "admin"

    @staticmethod
    def parse(raw: str) -> Role:
        try:
            return Role(raw.strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown role: {raw!r}") from exc


@dataclass(frozen=True)
class User:
    """A customer or staff member.

    Invariant: a user with ``has_full_access`` carries no explicit
    product-group grants; full access supersedes the list.
    """

    id: str
    roles: frozenset[Role] = frozenset({Role.CUSTOMER})
    display_name: str = ""
    discount_profile_id: str | None = None
    manager_user_id: str | None = None
    shipping_department_id: str | None = None
    has_full_access: bool = False
    product_group_access_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("User id is required")
        object.__setattr__(self, "roles", frozenset(self.roles))
        if self.has_full_access:
            object.__setattr__(self, "product_group_access_ids", frozenset())
        else:
            object.__setattr__(
                self, "product_group_access_ids", frozenset(self.product_group_access_ids)
            )

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_manager(self) -> bool:
        return Role.MANAGER in self.roles

    @property
    def is_department(self) -> bool:
        return Role.DEPARTMENT in self.roles

    @property
    def name(self) -> str:
        return self.display_name or self.id
