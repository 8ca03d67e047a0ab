"""Abstract repository for Product aggregate.

The catalog is maintained by the ERP import; the engine only reads it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ordering.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Product | None:
        """Return a product by code (case-insensitive), or None."""

    @abstractmethod
    def list_by_group(self, group_id: str) -> list[Product]:
        """Return every product of a product group."""
