"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from pathlib import Path

from ordering.domain.model.user import Role, User
from ordering.domain.repository.user_repository import UserRepository
from ordering.infrastructure.persistence.json_file import JsonFileStore


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path, empty=[])

    # --- UserRepository interface ---------------------------------------------

    def get_by_id(self, user_id: str) -> User | None:
        for raw in self._store.load():
            if raw["id"] == user_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[User]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def list_managed_by(self, manager_user_id: str) -> list[User]:
        return [
            self._to_domain(raw)
            for raw in self._store.load()
            if raw.get("manager_user_id") == manager_user_id
        ]

    def list_by_department(self, department_id: str) -> list[User]:
        return [
            self._to_domain(raw)
            for raw in self._store.load()
            if raw.get("shipping_department_id") == department_id
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=raw["id"],
            display_name=raw.get("display_name", ""),
            roles=frozenset(Role.parse(r) for r in raw.get("roles", ["customer"])),
            discount_profile_id=raw.get("discount_profile_id"),
            manager_user_id=raw.get("manager_user_id"),
            shipping_department_id=raw.get("shipping_department_id"),
            has_full_access=bool(raw.get("has_full_access", False)),
            product_group_access_ids=frozenset(raw.get("product_group_access_ids", [])),
        )
