"""Static validation of a route table against its registries.

Nothing is executed: handlers are only looked up, middleware only checked for
presence. Every problem in the table is collected so callers see all of them
in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .chain import plan_chain
from .errors import RoutingError, UnregisteredMiddleware
from .models import RouteDefinition, RouterConfig
from .registry import ROLE_CHECK, ControllerRegistry, MiddlewareRegistry


@dataclass
class ValidationReport:
    """Outcome of :func:`validate_config`.

    ``errors`` are display strings; ``issues`` are the matching typed errors,
    index for index.
    """

    errors: list[str] = field(default_factory=list)
    issues: list[RoutingError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, route: RouteDefinition, issue: RoutingError) -> None:
        self.errors.append(f"Route {route.label}: {issue}")
        self.issues.append(issue)

    def __bool__(self) -> bool:
        return self.valid


def candidate_middlewares(config: RouterConfig, route: RouteDefinition) -> list[str]:
    """Names a route may need: defaults plus its extras, disables ignored.

    A default disabled by the route must still be registered.
    """
    names: list[str] = []
    for name in (*config.default_middlewares, *route.enabled):
        if name not in names:
            names.append(name)
    return names


def validate_config(
    config: RouterConfig,
    middlewares: MiddlewareRegistry,
    controllers: ControllerRegistry,
    *,
    role_check: str = ROLE_CHECK,
) -> ValidationReport:
    """Check every route's handler and middleware references.

    Per route, in table order: the handler must resolve; every candidate
    middleware name must be registered; and when the route ends up with a
    non-empty role set the role-check factory must be registered too.
    """
    report = ValidationReport()

    for route in config.routes:
        try:
            controllers.resolve(route.handler, route)
        except RoutingError as exc:
            report.add(route, exc)

        candidates = candidate_middlewares(config, route)
        for name in candidates:
            if name not in middlewares:
                report.add(
                    route, UnregisteredMiddleware(name, route.method.value, route.path)
                )

        if (
            plan_chain(config, route).roles
            and role_check not in middlewares
            and role_check not in candidates
        ):
            report.add(
                route, UnregisteredMiddleware(role_check, route.method.value, route.path)
            )

    return report
