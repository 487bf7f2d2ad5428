"""Middleware and controller registries.

Both registries are explicit objects owned by the hosting application: they
are populated at startup, before validation, and only read afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from .errors import UnregisteredController, UnregisteredMethod, UnregisteredMiddleware
from .models import HandlerRef, RouteDefinition

#: Registry name of the role-check middleware factory.
ROLE_CHECK = "roleCheck"

Middleware = Callable[..., Any]
Handler = Callable[..., Any]


class MiddlewareRegistry:
    """Maps symbolic middleware names to the callables they stand for.

    The role-check entry (``"roleCheck"`` by default) is a factory: it is
    called with the route's role tuple and must return the middleware to run.
    """

    def __init__(self, entries: Mapping[str, Middleware] | None = None) -> None:
        self._middleware: dict[str, Middleware] = {}
        for name, middleware in (entries or {}).items():
            self.register(name, middleware)

    def register(self, name: str, middleware: Middleware) -> MiddlewareRegistry:
        """Register *middleware* under *name*; returns ``self`` for chaining."""
        if not callable(middleware):
            raise TypeError(f"Middleware '{name}' must be callable")
        self._middleware[name] = middleware
        return self

    def get(self, name: str) -> Middleware | None:
        return self._middleware.get(name)

    def resolve(self, name: str, route: RouteDefinition | None = None) -> Middleware:
        """Return the middleware registered as *name* or raise."""
        try:
            return self._middleware[name]
        except KeyError:
            raise UnregisteredMiddleware(
                name,
                route.method.value if route else None,
                route.path if route else None,
            ) from None

    def names(self) -> list[str]:
        return list(self._middleware)

    def __contains__(self, name: object) -> bool:
        return name in self._middleware

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[str]:
        return iter(self._middleware)


class ControllerRegistry:
    """Maps controller names to objects exposing named handler methods.

    A controller may be any object with callable attributes (an instance, a
    class, a module) or a plain mapping of method name to callable.
    """

    def __init__(self, entries: Mapping[str, Any] | None = None) -> None:
        self._controllers: dict[str, Any] = {}
        for name, controller in (entries or {}).items():
            self.register(name, controller)

    def register(self, name: str, controller: Any) -> ControllerRegistry:
        """Register *controller* under *name*; returns ``self`` for chaining."""
        self._controllers[name] = controller
        return self

    def get(self, name: str) -> Any | None:
        return self._controllers.get(name)

    def resolve(self, ref: HandlerRef | str, route: RouteDefinition | None = None) -> Handler:
        """Resolve a ``controller.method`` reference to its callable.

        Raises:
            UnregisteredController: No controller is registered under the name.
            UnregisteredMethod: The controller has no callable of that name.
        """
        if isinstance(ref, str):
            ref = HandlerRef.parse(ref)
        route_method = route.method.value if route else None
        route_path = route.path if route else None

        if ref.controller not in self._controllers:
            raise UnregisteredController(ref.controller, route_method, route_path)
        controller = self._controllers[ref.controller]

        if isinstance(controller, Mapping):
            handler = controller.get(ref.method)
        else:
            handler = getattr(controller, ref.method, None)
        if handler is None or not callable(handler):
            raise UnregisteredMethod(ref.controller, ref.method, route_method, route_path)
        return handler

    def names(self) -> list[str]:
        return list(self._controllers)

    def __contains__(self, name: object) -> bool:
        return name in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
