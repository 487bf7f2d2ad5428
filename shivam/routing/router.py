"""Declarative router: registries + route table + apply step.

Typical startup sequence::

    router = (
        DeclarativeRouter(config)
        .register_middleware("logging", logging_middleware)
        .register_middleware("auth", auth_middleware)
        .register_middleware("roleCheck", role_middleware)
        .register_controller("users", users_controller)
    )
    report = router.validate()
    if not report.valid:
        ...  # print report.errors and exit non-zero
    router.apply_to(app)

``apply_to`` targets any routing surface exposing one method per lower-case
HTTP verb taking ``(path, *middleware, handler)`` -- the Express / Hono
shape.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, NamedTuple, TypeVar

from .chain import build_chain, compose_plan, resolve_plan
from .errors import RouteConfigurationError
from .models import RouteDefinition, RouteOptions, RouterConfig
from .registry import (
    ROLE_CHECK,
    ControllerRegistry,
    Handler,
    Middleware,
    MiddlewareRegistry,
)
from .validator import ValidationReport, validate_config

Surface = TypeVar("Surface")


class MountedRoute(NamedTuple):
    """One ``(method, path, chain, handler)`` registration."""

    method: str
    path: str
    chain: list[Middleware]
    handler: Handler

    @property
    def verb(self) -> str:
        """The method name a verb-dispatch router is called with."""
        return self.method.lower()


class DeclarativeRouter:
    """Owns a route table and the registries it is resolved against."""

    def __init__(
        self,
        config: RouterConfig,
        *,
        middlewares: MiddlewareRegistry | None = None,
        controllers: ControllerRegistry | None = None,
        role_check: str = ROLE_CHECK,
    ) -> None:
        self.config = config
        self.middlewares = middlewares if middlewares is not None else MiddlewareRegistry()
        self.controllers = controllers if controllers is not None else ControllerRegistry()
        self.role_check = role_check

    # -- Registration ------------------------------------------------------

    def register_middleware(self, name: str, middleware: Middleware) -> DeclarativeRouter:
        self.middlewares.register(name, middleware)
        return self

    def register_controller(self, name: str, controller: Any) -> DeclarativeRouter:
        self.controllers.register(name, controller)
        return self

    # -- Inspection --------------------------------------------------------

    def validate(self) -> ValidationReport:
        """Report every unresolved handler and middleware reference."""
        return validate_config(
            self.config, self.middlewares, self.controllers, role_check=self.role_check
        )

    def chain_for(self, route: RouteDefinition) -> list[Middleware]:
        """Middleware to run before *route*'s handler, in execution order."""
        return build_chain(self.config, route, self.middlewares, role_check=self.role_check)

    def mounts(self) -> list[MountedRoute]:
        """Every route's registration, in table order.

        Raises the first resolution error met; call :meth:`validate` first to
        see them all.
        """
        mounts: list[MountedRoute] = []
        for route in self.config.routes:
            chain = self.chain_for(route)
            handler = self.controllers.resolve(route.handler, route)
            mounts.append(MountedRoute(route.method.value, route.path, chain, handler))
        return mounts

    # -- Apply -------------------------------------------------------------

    def apply_to(self, surface: Surface) -> Surface:
        """Register every route on *surface* and return it.

        Nothing is registered unless the whole table is valid: validation
        failures raise :class:`RouteConfigurationError` listing all of them.
        """
        report = self.validate()
        if not report.valid:
            raise RouteConfigurationError(report.errors)

        mounts = self.mounts()

        registrars: list[tuple[Callable[..., Any], MountedRoute]] = []
        missing: list[str] = []
        for mount in mounts:
            registrar = getattr(surface, mount.verb, None)
            if not callable(registrar):
                missing.append(
                    f"Route {mount.method} {mount.path}: routing surface has no "
                    f"'{mount.verb}' method"
                )
                continue
            registrars.append((registrar, mount))
        if missing:
            raise RouteConfigurationError(missing)

        for registrar, mount in registrars:
            registrar(mount.path, *mount.chain, mount.handler)
        return surface


class RouteBuilder:
    """Imperative helper composing chains route by route.

    Kept alongside :class:`DeclarativeRouter` for route files that wire
    handlers by hand::

        builder = RouteBuilder(["auth", "apiAuditLog"])
        app.get("/me", *builder.route(me_handler))
        app.get("/open", *builder.route(open_handler, RouteOptions(exclude=["auth"])))
    """

    def __init__(
        self,
        default_middlewares: Sequence[str] = (),
        default_roles: Sequence[str] = (),
        *,
        middlewares: MiddlewareRegistry | None = None,
        role_check: str = ROLE_CHECK,
    ) -> None:
        self.default_middlewares = tuple(default_middlewares)
        self.default_roles = tuple(default_roles)
        self.middlewares = middlewares if middlewares is not None else MiddlewareRegistry()
        self.role_check = role_check

    def register_middleware(self, name: str, middleware: Middleware) -> RouteBuilder:
        self.middlewares.register(name, middleware)
        return self

    def build_middleware_chain(self, options: RouteOptions | None = None) -> list[Middleware]:
        options = options or RouteOptions()
        plan = compose_plan(
            self.default_middlewares,
            self.default_roles,
            enabled=options.include,
            disabled=options.exclude,
            roles=options.roles,
            exclude_roles=options.exclude_role,
        )
        return resolve_plan(plan, self.middlewares, role_check=self.role_check)

    def route(self, handler: Handler, options: RouteOptions | None = None) -> list[Callable[..., Any]]:
        """Return ``[*middleware, handler]`` ready to splat into a verb method."""
        return [*self.build_middleware_chain(options), handler]
