"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Repositories are built once per data directory and reused, so every
handler in the process shares the same file locks and the same per-user
cart locks.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from ordering.application.concurrency import UserLocks
from ordering.infrastructure.persistence.json_availability_repository import (
    JsonAvailabilityRepository,
)
from ordering.infrastructure.persistence.json_cart_repository import JsonCartRepository
from ordering.infrastructure.persistence.json_discount_repository import (
    JsonDiscountRepository,
)
from ordering.infrastructure.persistence.json_order_repository import (
    JsonOrderNumberSequence,
    JsonOrderRepository,
)
from ordering.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from ordering.infrastructure.persistence.json_user_repository import JsonUserRepository

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "ORDERING_DATA_DIR"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


@dataclass(frozen=True)
class Container:
    users: JsonUserRepository
    products: JsonProductRepository
    discounts: JsonDiscountRepository
    carts: JsonCartRepository
    orders: JsonOrderRepository
    order_numbers: JsonOrderNumberSequence
    availability: JsonAvailabilityRepository
    locks: UserLocks


@lru_cache(maxsize=None)
def _build(directory: Path) -> Container:
    logger.debug("Opening data directory %s", directory)
    return Container(
        users=JsonUserRepository(directory / "users.json"),
        products=JsonProductRepository(directory / "products.json"),
        discounts=JsonDiscountRepository(
            directory / "discount_profiles.json",
            directory / "special_discounts.json",
        ),
        carts=JsonCartRepository(directory / "carts.json"),
        orders=JsonOrderRepository(directory / "orders.json"),
        order_numbers=JsonOrderNumberSequence(directory / "order_sequence.json"),
        availability=JsonAvailabilityRepository(
            directory / "branches.json",
            directory / "availability.json",
        ),
        locks=UserLocks(),
    )


def container() -> Container:
    return _build(data_dir().resolve())


def reset() -> None:
    """Forget every cached repository (the next call reopens the data directory)."""
    _build.cache_clear()
