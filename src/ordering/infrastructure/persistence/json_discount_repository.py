"""JSON-file-backed implementation of DiscountRepository.

Profiles and special discounts live in two files because admin tooling
edits them independently.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from ordering.domain.model.discount import DiscountProfile, DiscountTier, SpecialDiscount
from ordering.domain.repository.discount_repository import DiscountRepository
from ordering.infrastructure.persistence.json_file import (
    JsonFileStore,
    load_datetime,
    load_decimal,
)

# Records without a timestamp lose to any dated one for the same group.
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


class JsonDiscountRepository(DiscountRepository):

    def __init__(self, profiles_path: Path, special_discounts_path: Path) -> None:
        self._profiles = JsonFileStore(profiles_path, empty=[])
        self._specials = JsonFileStore(special_discounts_path, empty=[])

    # --- DiscountRepository interface -----------------------------------------

    def get_profile(self, profile_id: str) -> DiscountProfile | None:
        for raw in self._profiles.load():
            if raw["id"] == profile_id:
                return self._profile_to_domain(raw)
        return None

    def list_special_discounts(self, user_id: str) -> list[SpecialDiscount]:
        return [
            self._special_to_domain(raw)
            for raw in self._specials.load()
            if raw["user_id"] == user_id
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _profile_to_domain(raw: dict) -> DiscountProfile:
        return DiscountProfile(
            id=raw["id"],
            tier=DiscountTier.parse(raw.get("tier", "none")),
            name=raw.get("name", ""),
            default_discounts={
                group_id: load_decimal(percent)
                for group_id, percent in raw.get("default_discounts", {}).items()
            },
        )

    @staticmethod
    def _special_to_domain(raw: dict) -> SpecialDiscount:
        return SpecialDiscount(
            user_id=raw["user_id"],
            product_group_id=raw["product_group_id"],
            percent=load_decimal(raw["percent"]),
            created_at=load_datetime(raw.get("created_at")) or _UNDATED,
        )
