"""Unit tests for the discount resolver.

Pure functions over explicit snapshots: no repositories involved.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from ordering.domain.model.discount import DiscountProfile, DiscountTier, SpecialDiscount
from ordering.domain.model.product import Product
from ordering.domain.model.value_objects import Money
from ordering.domain.service.discount_resolver import (
    DiscountSnapshot,
    apply_percent,
    normalize_percent,
    resolve_percent,
    resolve_price,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _product(group_id: str = "tools", price: str = "100.00") -> Product:
    return Product(id="p1", code="HAM-1", name="Hammer", group_id=group_id, base_price=Money.of(price))


def _profile(**defaults: str) -> DiscountProfile:
    return DiscountProfile(
        id="wholesale",
        tier=DiscountTier.WHOLESALE,
        default_discounts={group: Decimal(p) for group, p in defaults.items()},
    )


class TestNormalizePercent:

    def test_clamps_below_zero(self):
        assert normalize_percent(Decimal("-5")) == Decimal("0")

    def test_clamps_above_hundred(self):
        assert normalize_percent(Decimal("150")) == Decimal("100")

    def test_rounds_half_up_to_two_places(self):
        assert normalize_percent(Decimal("12.345")) == Decimal("12.35")


class TestApplyPercent:

    def test_discount_applied_and_rounded(self):
        assert apply_percent(Money.of("10.00"), Decimal("33.33")) == Money.of("6.67")

    def test_zero_percent_keeps_price(self):
        assert apply_percent(Money.of("19.99"), Decimal("0")) == Money.of("19.99")

    def test_full_discount_is_free(self):
        assert apply_percent(Money.of("19.99"), Decimal("100")) == Money.zero()

    def test_never_negative_even_for_bad_percent(self):
        assert apply_percent(Money.of("10"), Decimal("250")) == Money.zero()


class TestPrecedence:

    def test_special_beats_profile_default(self):
        snapshot = DiscountSnapshot.build(
            _profile(tools="25"),
            [SpecialDiscount("u1", "tools", Decimal("30"), T0)],
        )
        price = resolve_price(snapshot, _product())
        assert price.percent == Decimal("30")
        assert price.discounted_price == Money.of("70.00")
        assert price.base_price == Money.of("100.00")

    def test_profile_default_when_no_special(self):
        snapshot = DiscountSnapshot.build(_profile(tools="25"))
        assert resolve_price(snapshot, _product()).discounted_price == Money.of("75.00")

    def test_special_for_other_group_is_ignored(self):
        snapshot = DiscountSnapshot.build(
            _profile(tools="25"),
            [SpecialDiscount("u1", "paint", Decimal("30"), T0)],
        )
        assert resolve_percent(snapshot, "tools") == Decimal("25")

    def test_no_discount_data_means_zero(self):
        assert resolve_percent(DiscountSnapshot.empty(), "tools") == Decimal("0")

    def test_group_missing_from_profile_means_zero(self):
        snapshot = DiscountSnapshot.build(_profile(paint="10"))
        assert resolve_percent(snapshot, "tools") == Decimal("0")

    def test_special_without_profile(self):
        snapshot = DiscountSnapshot.build(None, [SpecialDiscount("u1", "tools", Decimal("5"), T0)])
        assert resolve_percent(snapshot, "tools") == Decimal("5")

    def test_newest_special_wins(self):
        snapshot = DiscountSnapshot.build(
            None,
            [
                SpecialDiscount("u1", "tools", Decimal("40"), T0 + timedelta(days=1)),
                SpecialDiscount("u1", "tools", Decimal("10"), T0),
            ],
        )
        assert resolve_percent(snapshot, "tools") == Decimal("40")

    def test_stored_percents_are_normalised(self):
        snapshot = DiscountSnapshot.build(
            _profile(tools="120"),
            [SpecialDiscount("u1", "paint", Decimal("-3"), T0)],
        )
        assert resolve_percent(snapshot, "tools") == Decimal("100")
        assert resolve_percent(snapshot, "paint") == Decimal("0")


class TestSnapshotIsReadOnly:

    def test_snapshot_does_not_follow_source_dict(self):
        defaults = {"tools": Decimal("10")}
        snapshot = DiscountSnapshot(profile_discounts=defaults)
        defaults["tools"] = Decimal("90")
        assert resolve_percent(snapshot, "tools") == Decimal("10")
