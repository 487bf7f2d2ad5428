"""``add route``: service + controller files and a routes-file entry.

Generated projects declare routes as a table handed to the declarative
router; for those the new route is added as a table entry and its
controller registered before ``dr.applyTo``. Route files without that table
get a plain ``router.<method>(...)`` line after the last ``router.`` call.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path

from pydantic import BaseModel, Field

from shivam.routing.models import HttpMethod
from shivam.scaffolder.templates import TemplateRenderer
from shivam.utils import print_created, print_success, read_file_async

from . import splice
from .base import ComponentError, check_name, component_context, get_renderer, splice_file

_TABLE_APPLY = "dr.applyTo("
_TABLE_END = "];"
_MIDDLEWARE_SUFFIX = "Middleware"


class AddRouteOptions(BaseModel):
    """What ``add route`` generates besides the route itself."""

    method: HttpMethod = HttpMethod.GET
    path: str | None = Field(default=None, description="Defaults to /<name>")
    create_controller: bool = True
    create_service: bool = True
    middleware: list[str] = Field(
        default_factory=list, description="Extra middleware names for this route"
    )


def middleware_import(identifier: str) -> str:
    """Import line for a middleware identifier used in a plain router file.

    ``authMiddleware`` is imported from ``../middlewares/auth.js``; identifiers
    without the ``Middleware`` suffix name their module directly.
    """
    module = identifier
    if identifier.endswith(_MIDDLEWARE_SUFFIX) and identifier != _MIDDLEWARE_SUFFIX:
        module = identifier[: -len(_MIDDLEWARE_SUFFIX)]
    return f"import {{ {identifier} }} from '../middlewares/{module}.js';"


def _table_entry(options: AddRouteOptions, path: str, handler: str) -> str:
    lines = [
        "  {",
        f"    method: METHODS.{options.method.value},",
        f"    path: '{path}',",
        f"    handler: '{handler}'",
    ]
    if options.middleware:
        lines[-1] += ","
        names = ", ".join(f"'{name}'" for name in options.middleware)
        lines.append(f"    enabled: [{names}]")
    lines.append("  },")
    return "\n".join(lines)


async def add_route(
    project_root: Path,
    name: str,
    options: AddRouteOptions | None = None,
    *,
    renderer: TemplateRenderer | None = None,
) -> list[Path]:
    """Add a route named *name* to the project at *project_root*.

    Returns the files written or modified.

    Raises:
        ComponentError: If the name is invalid or the routes file is missing.
    """
    name = check_name(name)
    options = options or AddRouteOptions()
    root = Path(project_root)
    ctx = component_context(root, name, has_service=options.create_service)
    ext = ctx["file_ext"]
    ident = ctx["name"]

    routes_file = root / "src" / "routes" / f"index.{ext}"
    if not routes_file.is_file():
        raise ComponentError(f"Routes file not found: {routes_file}")

    renderer = get_renderer(renderer)
    written: list[Path] = []

    if options.create_service:
        path = await renderer.render_to_file(
            "components/service.j2", root / "src" / "services" / f"{name}.{ext}", ctx
        )
        print_created("service", path)
        written.append(path)

    if options.create_controller:
        path = await renderer.render_to_file(
            f"components/controller/{ctx['framework']}.j2",
            root / "src" / "controllers" / f"{name}.{ext}",
            ctx,
        )
        print_created("controller", path)
        written.append(path)

    route_path = options.path or f"/{name}"
    import_line = f"import {{ {ident}Controller }} from '../controllers/{name}.js';"
    content = await read_file_async(routes_file)

    if _TABLE_APPLY in content:
        entry = _table_entry(options, route_path, f"{ident}.get{ctx['pascal']}")
        register = f"dr.registerController('{ident}', {ident}Controller);"
        edits = [
            lambda c: splice.insert_import(c, import_line),
            lambda c: splice.insert_before(c, _TABLE_END, entry),
            lambda c: splice.insert_before(c, _TABLE_APPLY, register),
        ]
    else:
        chain = "".join(f"{mw}, " for mw in options.middleware)
        route_line = (
            f"router.{options.method.value.lower()}('{route_path}', "
            f"{chain}{ident}Controller.get{ctx['pascal']});"
        )
        edits = [
            lambda c: splice.insert_import(c, import_line),
            *(
                partial(splice.insert_import, line=middleware_import(mw))
                for mw in options.middleware
            ),
            lambda c: splice.insert_after_last(c, "router.", route_line),
        ]

    if await splice_file(routes_file, *edits):
        print_success(f"Added route {options.method.value} {route_path} to {routes_file}")
        written.append(routes_file)
    return written
