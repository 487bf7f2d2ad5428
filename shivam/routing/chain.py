"""Middleware chain builder.

Computes, for one route, the ordered middleware to run before its handler:

1. start from the table's default middleware and default roles;
2. drop the route's ``disabled`` names from the defaults (order kept);
3. append the route's ``enabled`` names, in the order given;
4. drop the route's ``exclude_roles`` from the roles;
5. if the route lists ``roles`` they replace the role set outright -- this
   runs after step 4, so ``roles`` wins whenever both are given;
6. resolve every name against the middleware registry;
7. if any roles remain, call the role-check factory with them and append its
   result as the last entry.

Everything here is pure: the same inputs always give the same chain.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .models import RouteDefinition, RouterConfig
from .registry import ROLE_CHECK, Middleware, MiddlewareRegistry


@dataclass(frozen=True, slots=True)
class ChainPlan:
    """Name-level result of composing defaults with one route's overrides."""

    middlewares: tuple[str, ...]
    roles: tuple[str, ...]


def compose_plan(
    default_middlewares: Sequence[str],
    default_roles: Sequence[str],
    *,
    enabled: Iterable[str] = (),
    disabled: Iterable[str] = (),
    roles: Iterable[str] = (),
    exclude_roles: Iterable[str] = (),
) -> ChainPlan:
    """Apply the disable / enable / exclude / replace rules in order."""
    middlewares = list(default_middlewares)
    active_roles = list(default_roles)

    disabled = set(disabled)
    if disabled:
        middlewares = [name for name in middlewares if name not in disabled]

    middlewares.extend(enabled)

    excluded = set(exclude_roles)
    if excluded:
        active_roles = [role for role in active_roles if role not in excluded]

    # Replacement deliberately ignores the exclusion above.
    roles = list(roles)
    if roles:
        active_roles = roles

    return ChainPlan(middlewares=tuple(middlewares), roles=tuple(active_roles))


def plan_chain(config: RouterConfig, route: RouteDefinition) -> ChainPlan:
    """Compose *route*'s overrides with *config*'s defaults."""
    return compose_plan(
        config.default_middlewares,
        config.default_roles,
        enabled=route.enabled,
        disabled=route.disabled,
        roles=route.roles,
        exclude_roles=route.exclude_roles,
    )


def resolve_plan(
    plan: ChainPlan,
    registry: MiddlewareRegistry,
    *,
    role_check: str = ROLE_CHECK,
    route: RouteDefinition | None = None,
) -> list[Middleware]:
    """Turn a :class:`ChainPlan` into callables.

    A missing name -- including a missing role-check factory when the plan has
    roles -- raises :class:`UnregisteredMiddleware` instead of being skipped.
    """
    chain = [registry.resolve(name, route) for name in plan.middlewares]
    if plan.roles:
        factory = registry.resolve(role_check, route)
        chain.append(factory(list(plan.roles)))
    return chain


def build_chain(
    config: RouterConfig,
    route: RouteDefinition,
    registry: MiddlewareRegistry,
    *,
    role_check: str = ROLE_CHECK,
) -> list[Middleware]:
    """Return the ordered middleware callables to run before *route*'s handler."""
    return resolve_plan(
        plan_chain(config, route), registry, role_check=role_check, route=route
    )
