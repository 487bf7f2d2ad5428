"""``add service``: a CRUD service module, optionally SQL-backed."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from shivam.scaffolder.templates import TemplateRenderer
from shivam.utils import print_created

from .base import ComponentError, check_name, component_context, detect_database, get_renderer

CRUD_METHODS: tuple[str, ...] = ("getAll", "getById", "create", "update", "delete")


async def add_service(
    project_root: Path,
    name: str,
    with_database: bool = True,
    methods: Sequence[str] | None = None,
    *,
    renderer: TemplateRenderer | None = None,
) -> Path:
    """Write ``src/services/<name>`` with the selected CRUD *methods*.

    Methods are emitted in canonical order whatever order they are given in.
    SQL uses the placeholder style of the project's driver (``pg`` unless the
    project depends on ``mysql2``).
    """
    name = check_name(name)
    selected = list(CRUD_METHODS) if methods is None else list(methods)
    unknown = [m for m in selected if m not in CRUD_METHODS]
    if unknown:
        raise ComponentError(
            f"Unknown service method(s): {', '.join(unknown)} "
            f"(choose from {', '.join(CRUD_METHODS)})"
        )

    root = Path(project_root)
    ctx = component_context(
        root,
        name,
        with_database=with_database,
        database_type=detect_database(root),
        methods=[m for m in CRUD_METHODS if m in selected],
        table=f"{name.replace('-', '_')}s",
    )
    path = await get_renderer(renderer).render_to_file(
        "components/crud-service.j2",
        root / "src" / "services" / f"{name}.{ctx['file_ext']}",
        ctx,
    )
    print_created("service", path)
    return path
