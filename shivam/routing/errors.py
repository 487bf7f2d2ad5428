"""Routing exception hierarchy.

Shared by the registries, chain builder, validator and apply step so every
module raises (or collects) the same types.
"""

from __future__ import annotations


class RoutingError(Exception):
    """Base for all declarative-router errors."""


class UnregisteredMiddleware(RoutingError):  # noqa: N818
    """A middleware name has no entry in the middleware registry."""

    def __init__(
        self, name: str, route_method: str | None = None, route_path: str | None = None
    ) -> None:
        self.name = name
        self.route_method = route_method
        self.route_path = route_path
        super().__init__(f"Middleware '{name}' not registered")


class UnregisteredController(RoutingError):  # noqa: N818
    """The controller half of a handler reference is not registered."""

    def __init__(
        self, name: str, route_method: str | None = None, route_path: str | None = None
    ) -> None:
        self.name = name
        self.route_method = route_method
        self.route_path = route_path
        super().__init__(f"Controller '{name}' not registered")


class UnregisteredMethod(RoutingError):  # noqa: N818
    """The controller exists but does not expose the named method."""

    def __init__(
        self,
        controller: str,
        method: str,
        route_method: str | None = None,
        route_path: str | None = None,
    ) -> None:
        self.controller = controller
        self.method = method
        self.route_method = route_method
        self.route_path = route_path
        super().__init__(f"Method '{method}' not found in controller '{controller}'")


class RouteConfigurationError(RoutingError):
    """Fatal, aggregated failure raised instead of mounting an invalid table.

    ``errors`` holds every problem found, in route-table order.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        lines = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(f"Route errors ({len(self.errors)}):\n{lines}")
