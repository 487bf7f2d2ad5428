"""Add components (routes, middleware, services) to a generated project.

Quick usage::

    from shivam.components import add_component

    await add_component(Path("."), "route", "users", method="POST")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shivam.utils import print_warning

from .base import ComponentError, check_name, detect_database, detect_extension, detect_framework
from .middleware import MiddlewareKind, add_middleware
from .route import AddRouteOptions, add_route
from .service import CRUD_METHODS, add_service

VALID_COMPONENTS: tuple[str, ...] = ("route", "middleware", "service", "controller")


async def add_component(
    project_root: Path, component: str, name: str | None, **options: Any
) -> list[Path]:
    """Dispatch to the mutator for *component*; return the files touched.

    Options per component:
        route: ``method``, ``path``, ``create_controller``, ``create_service``,
            ``middleware``.
        middleware: ``kind``, ``is_default``.
        service: ``with_database``, ``methods``.

    Raises:
        ComponentError: For an unknown component or a missing name.
    """
    if component not in VALID_COMPONENTS:
        raise ComponentError(
            f"Invalid component: {component} (valid: {', '.join(VALID_COMPONENTS)})"
        )
    name = check_name(name)
    root = Path(project_root)

    if component == "route":
        return await add_route(root, name, AddRouteOptions(**options))
    if component == "middleware":
        return await add_middleware(
            root,
            name,
            options.get("kind", MiddlewareKind.CUSTOM),
            options.get("is_default", False),
        )
    if component == "service":
        path = await add_service(
            root, name, options.get("with_database", True), options.get("methods")
        )
        return [path]

    print_warning("Controller generation coming soon!")
    return []


__all__ = [
    "CRUD_METHODS",
    "VALID_COMPONENTS",
    "AddRouteOptions",
    "ComponentError",
    "MiddlewareKind",
    "add_component",
    "add_middleware",
    "add_route",
    "add_service",
    "detect_database",
    "detect_extension",
    "detect_framework",
]
