"""Abstract repository for User records.

Defined in the domain layer so the domain never depends on
infrastructure. Users are maintained by admin tooling; the engine reads
them and resolves the one-level manager relation through a query.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ordering.domain.model.user import User


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: str) -> User | None:
        """Return a user by ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[User]:
        """Return every user."""

    @abstractmethod
    def list_managed_by(self, manager_user_id: str) -> list[User]:
        """Return the users whose ``manager_user_id`` equals the given id."""

    @abstractmethod
    def list_by_department(self, department_id: str) -> list[User]:
        """Return the users whose ``shipping_department_id`` equals the given id."""
