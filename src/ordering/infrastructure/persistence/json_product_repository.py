"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from pathlib import Path

from ordering.domain.model.product import Product
from ordering.domain.model.value_objects import Money
from ordering.domain.repository.product_repository import ProductRepository
from ordering.infrastructure.persistence.json_file import JsonFileStore, load_decimal


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path, empty=[])

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._store.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Product | None:
        wanted = code.strip().casefold()
        for raw in self._store.load():
            if raw["code"].casefold() == wanted:
                return self._to_domain(raw)
        return None

    def list_by_group(self, group_id: str) -> list[Product]:
        return [
            self._to_domain(raw)
            for raw in self._store.load()
            if raw["group_id"] == group_id
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            group_id=raw["group_id"],
            base_price=Money(load_decimal(raw["base_price"])),
            weight=load_decimal(raw.get("weight")),
            volume=load_decimal(raw.get("volume")),
        )
