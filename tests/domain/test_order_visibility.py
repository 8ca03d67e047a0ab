"""Unit tests for the order visibility resolver."""

import pytest

from ordering.domain.model.user import Role, User
from ordering.domain.service.order_visibility import (
    CreatorScope,
    OrderVisibilityResolver,
    VisibilityScope,
)
from tests.fakes import FakeUserRepository

ADMIN = User(id="admin", roles=frozenset({Role.ADMIN}))
MANAGER = User(id="m1", roles=frozenset({Role.MANAGER}))
OTHER_MANAGER = User(id="m2", roles=frozenset({Role.MANAGER}))
C1 = User(id="c1", manager_user_id="m1", shipping_department_id="dept-1")
C2 = User(id="c2", manager_user_id="m1")
C3 = User(id="c3", manager_user_id="m2", shipping_department_id="dept-2")
DEPT = User(id="d1", roles=frozenset({Role.DEPARTMENT}), shipping_department_id="dept-1")


def _resolver() -> OrderVisibilityResolver:
    return OrderVisibilityResolver(
        FakeUserRepository([ADMIN, MANAGER, OTHER_MANAGER, C1, C2, C3, DEPT])
    )


class TestCustomer:

    @pytest.mark.parametrize("requested", list(VisibilityScope) + [None])
    def test_always_own_orders(self, requested):
        assert _resolver().resolve(C1, requested) == CreatorScope.only("c1")


class TestDepartment:

    @pytest.mark.parametrize("requested", [None, VisibilityScope.ALL, VisibilityScope.MANAGED])
    def test_sees_orders_of_own_department(self, requested):
        scope = _resolver().resolve(DEPT, requested)
        assert scope.creator_ids == frozenset({"d1", "c1"})
        assert not scope.allows("c3")

    def test_my_is_honoured(self):
        assert _resolver().resolve(DEPT, VisibilityScope.MY) == CreatorScope.only("d1")

    def test_without_department_sees_own_orders(self):
        loner = User(id="d2", roles=frozenset({Role.DEPARTMENT}))
        resolver = OrderVisibilityResolver(FakeUserRepository([loner, C1]))
        assert resolver.resolve(loner, None) == CreatorScope.only("d2")

    def test_department_wins_over_manager(self):
        both = User(
            id="m3",
            roles=frozenset({Role.MANAGER, Role.DEPARTMENT}),
            shipping_department_id="dept-2",
        )
        resolver = OrderVisibilityResolver(FakeUserRepository([both, C1, C3]))
        assert resolver.resolve(both, None).creator_ids == frozenset({"m3", "c3"})


class TestManager:

    def test_my(self):
        assert _resolver().resolve(MANAGER, VisibilityScope.MY) == CreatorScope.only("m1")

    def test_managed_excludes_self(self):
        scope = _resolver().resolve(MANAGER, VisibilityScope.MANAGED)
        assert scope.creator_ids == frozenset({"c1", "c2"})

    def test_my_and_managed(self):
        scope = _resolver().resolve(MANAGER, VisibilityScope.MY_AND_MANAGED)
        assert scope.creator_ids == frozenset({"m1", "c1", "c2"})

    def test_all_is_downgraded(self):
        scope = _resolver().resolve(MANAGER, VisibilityScope.ALL)
        assert scope.creator_ids == frozenset({"m1", "c1", "c2"})
        assert not scope.allows("c3")

    def test_default_is_my_and_managed(self):
        assert _resolver().resolve(MANAGER, None).creator_ids == frozenset({"m1", "c1", "c2"})

    def test_manager_without_customers(self):
        resolver = OrderVisibilityResolver(FakeUserRepository([MANAGER]))
        assert resolver.resolve(MANAGER, VisibilityScope.MANAGED).creator_ids == frozenset()


class TestAdmin:

    def test_all_is_unrestricted(self):
        scope = _resolver().resolve(ADMIN, VisibilityScope.ALL)
        assert scope.is_unrestricted
        assert scope.allows("anyone")

    def test_default_is_all(self):
        assert _resolver().resolve(ADMIN, None).is_unrestricted

    def test_narrower_scope_is_honoured(self):
        assert _resolver().resolve(ADMIN, VisibilityScope.MY) == CreatorScope.only("admin")


class TestScopeParsing:

    def test_known_token(self):
        assert VisibilityScope.parse("My-And-Managed") is VisibilityScope.MY_AND_MANAGED

    @pytest.mark.parametrize("raw", [None, "", "  ", "everything"])
    def test_blank_or_unknown_means_role_default(self, raw):
        assert VisibilityScope.parse(raw) is None
