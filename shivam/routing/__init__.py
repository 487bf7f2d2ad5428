"""Declarative route / middleware composition.

Quick usage::

    from shivam.routing import DeclarativeRouter, RouterConfig

    config = RouterConfig(
        default_middlewares=["logging"],
        routes=[
            {"method": "GET", "path": "/public", "handler": "pages.public",
             "disabled": ["logging"]},
            {"method": "POST", "path": "/admin", "handler": "admin.act",
             "roles": ["admin"], "enabled": ["auth"]},
        ],
    )
    router = DeclarativeRouter(config).register_middleware("logging", log_mw)
    ...
    router.apply_to(app)
"""

from shivam.routing.chain import ChainPlan, build_chain, compose_plan, plan_chain
from shivam.routing.errors import (
    RouteConfigurationError,
    RoutingError,
    UnregisteredController,
    UnregisteredMethod,
    UnregisteredMiddleware,
)
from shivam.routing.models import (
    HandlerRef,
    HttpMethod,
    RouteDefinition,
    RouteOptions,
    RouterConfig,
)
from shivam.routing.registry import ROLE_CHECK, ControllerRegistry, MiddlewareRegistry
from shivam.routing.router import DeclarativeRouter, MountedRoute, RouteBuilder
from shivam.routing.validator import ValidationReport, validate_config

__all__ = [
    "ROLE_CHECK",
    "ChainPlan",
    "ControllerRegistry",
    "DeclarativeRouter",
    "HandlerRef",
    "HttpMethod",
    "MiddlewareRegistry",
    "MountedRoute",
    "RouteBuilder",
    "RouteConfigurationError",
    "RouteDefinition",
    "RouteOptions",
    "RouterConfig",
    "RoutingError",
    "UnregisteredController",
    "UnregisteredMethod",
    "UnregisteredMiddleware",
    "ValidationReport",
    "build_chain",
    "compose_plan",
    "plan_chain",
    "validate_config",
]
