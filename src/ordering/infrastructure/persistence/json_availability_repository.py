"""JSON-file-backed implementation of AvailabilityRepository.

Both files are produced by the stock ingestion job; this side only reads.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ordering.domain.model.availability import AvailabilityRow, Branch
from ordering.domain.repository.availability_repository import AvailabilityRepository
from ordering.infrastructure.persistence.json_file import (
    JsonFileStore,
    load_datetime,
    load_decimal,
)


class JsonAvailabilityRepository(AvailabilityRepository):

    def __init__(self, branches_path: Path, availability_path: Path) -> None:
        self._branches = JsonFileStore(branches_path, empty=[])
        self._rows = JsonFileStore(availability_path, empty=[])

    def list_branches(self) -> list[Branch]:
        return [
            Branch(id=raw["id"], code=raw.get("code", ""), name=raw.get("name", ""))
            for raw in self._branches.load()
        ]

    def list_rows(self, product_ids: Iterable[str]) -> list[AvailabilityRow]:
        wanted = set(product_ids)
        return [
            AvailabilityRow(
                product_id=raw["product_id"],
                branch_id=raw["branch_id"],
                quantity=load_decimal(raw["quantity"]),
                as_of=load_datetime(raw["as_of"]),
            )
            for raw in self._rows.load()
            if raw["product_id"] in wanted
        ]
