"""Tests for the middleware chain builder (shivam.routing.chain).

Covers:
- Default preservation and determinism
- Disable filters without reordering; enable appends after survivors
- Role exclusion, role replacement and their precedence
- Role-check factory invocation and position
- Missing names raise instead of being skipped
"""

from __future__ import annotations

import pytest

from shivam.routing import (
    MiddlewareRegistry,
    RouteDefinition,
    RouterConfig,
    UnregisteredMiddleware,
    build_chain,
    compose_plan,
    plan_chain,
)

pytestmark = pytest.mark.unit


def _route(**overrides) -> RouteDefinition:
    values = {"method": "GET", "path": "/r", "handler": "c.m", **overrides}
    return RouteDefinition(**values)


@pytest.fixture
def registry(mw, role_check) -> MiddlewareRegistry:
    return MiddlewareRegistry(
        {name: mw(name) for name in ("A", "B", "C", "X", "Y")} | {"roleCheck": role_check}
    )


def _names(chain) -> list[str]:
    return [fn.__name__ for fn in chain]


class TestComposePlan:
    def test_defaults_preserved_without_overrides(self):
        plan = compose_plan(["A", "B", "C"], [])
        assert plan.middlewares == ("A", "B", "C")
        assert plan.roles == ()

    def test_disable_removes_never_reorders(self):
        plan = compose_plan(["A", "B", "C"], [], disabled=["B"])
        assert plan.middlewares == ("A", "C")

    def test_enable_appends_after_filtered_defaults(self):
        plan = compose_plan(["A", "B"], [], disabled=["A"], enabled=["X", "Y"])
        assert plan.middlewares == ("B", "X", "Y")

    def test_disabling_unknown_name_is_harmless(self):
        plan = compose_plan(["A"], [], disabled=["Z"])
        assert plan.middlewares == ("A",)

    def test_exclude_roles(self):
        plan = compose_plan([], ["admin", "user"], exclude_roles=["user"])
        assert plan.roles == ("admin",)

    def test_roles_replace_defaults(self):
        plan = compose_plan([], ["user"], roles=["admin", "owner"])
        assert plan.roles == ("admin", "owner")

    def test_roles_win_over_exclude(self):
        # Replacement runs after exclusion, so the exclusion is discarded.
        plan = compose_plan([], ["admin"], roles=["editor"], exclude_roles=["admin"])
        assert plan.roles == ("editor",)

    def test_roles_replacement_ignores_its_own_exclusion(self):
        plan = compose_plan([], [], roles=["admin"], exclude_roles=["admin"])
        assert plan.roles == ("admin",)

    def test_empty_roles_do_not_replace(self):
        plan = compose_plan([], ["user"], roles=[])
        assert plan.roles == ("user",)

    def test_inputs_are_not_mutated(self):
        defaults = ["A", "B"]
        compose_plan(defaults, [], disabled=["A"], enabled=["X"])
        assert defaults == ["A", "B"]


class TestBuildChain:
    def test_default_prefix(self, registry):
        config = RouterConfig(default_middlewares=["A", "B", "C"])
        assert _names(build_chain(config, _route(), registry)) == ["A", "B", "C"]

    def test_deterministic(self, registry):
        config = RouterConfig(default_middlewares=["A", "B"], default_roles=["admin"])
        route = _route(disabled=["A"], enabled=["X"])
        first = _names(build_chain(config, route, registry))
        for _ in range(5):
            assert _names(build_chain(config, route, registry)) == first

    def test_role_check_is_last(self, registry, role_check):
        config = RouterConfig(default_middlewares=["A"])
        chain = build_chain(config, _route(roles=["admin"], enabled=["X"]), registry)
        assert _names(chain) == ["A", "X", "roleCheck(admin)"]
        assert role_check.calls == [["admin"]]

    def test_default_roles_produce_role_check(self, registry, role_check):
        config = RouterConfig(default_roles=["user"])
        chain = build_chain(config, _route(), registry)
        assert chain[-1].roles == ["user"]

    def test_all_roles_excluded_means_no_role_check(self, registry, role_check):
        config = RouterConfig(default_middlewares=["A"], default_roles=["user"])
        chain = build_chain(config, _route(exclude_roles=["user"]), registry)
        assert _names(chain) == ["A"]
        assert role_check.calls == []

    def test_missing_middleware_raises(self, registry):
        config = RouterConfig(default_middlewares=["A", "missing"])
        with pytest.raises(UnregisteredMiddleware) as exc_info:
            build_chain(config, _route(), registry)
        assert exc_info.value.name == "missing"
        assert exc_info.value.route_path == "/r"

    def test_missing_role_check_raises(self, mw):
        registry = MiddlewareRegistry({"A": mw("A")})
        config = RouterConfig(default_middlewares=["A"])
        with pytest.raises(UnregisteredMiddleware) as exc_info:
            build_chain(config, _route(roles=["admin"]), registry)
        assert exc_info.value.name == "roleCheck"

    def test_custom_role_check_name(self, mw, role_check):
        registry = MiddlewareRegistry({"requireRoles": role_check})
        chain = build_chain(
            RouterConfig(), _route(roles=["admin"]), registry, role_check="requireRoles"
        )
        assert _names(chain) == ["roleCheck(admin)"]

    def test_plan_chain_uses_route_overrides(self):
        config = RouterConfig(default_middlewares=["A", "B"], default_roles=["user"])
        plan = plan_chain(config, _route(disabled=["B"], exclude_roles=["user"]))
        assert plan.middlewares == ("A",)
        assert plan.roles == ()
