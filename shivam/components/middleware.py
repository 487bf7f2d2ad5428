"""``add middleware``: a middleware module, optionally applied app-wide."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from shivam.scaffolder.templates import TemplateRenderer
from shivam.utils import print_created, print_success, print_warning, read_file_async

from . import splice
from .base import ComponentError, check_name, component_context, get_renderer, splice_file

_HEALTH_MARKER = "app.get('/health'"


class MiddlewareKind(str, Enum):
    LOGGER = "logger"
    RATE_LIMIT = "rateLimit"
    CORS = "cors"
    CUSTOM = "custom"

    @classmethod
    def _missing_(cls, value: object) -> "MiddlewareKind":
        return cls.CUSTOM


async def add_middleware(
    project_root: Path,
    name: str,
    kind: MiddlewareKind | str = MiddlewareKind.CUSTOM,
    is_default: bool = False,
    *,
    renderer: TemplateRenderer | None = None,
) -> list[Path]:
    """Write ``src/middlewares/<name>`` and, if *is_default*, wire it into the app.

    Unknown kinds fall back to ``custom``.
    """
    name = check_name(name)
    kind = MiddlewareKind(kind)
    root = Path(project_root)
    ctx = component_context(root, name)
    ext = ctx["file_ext"]

    app_file = root / "src" / f"app.{ext}"
    if is_default and not app_file.is_file():
        raise ComponentError(f"App file not found: {app_file}")

    path = await get_renderer(renderer).render_to_file(
        f"components/middleware/{ctx['framework']}/{kind.value}.j2",
        root / "src" / "middlewares" / f"{name}.{ext}",
        ctx,
    )
    print_created("middleware", path)
    written = [path]

    if not is_default:
        return written

    ident = f"{ctx['name']}Middleware"
    import_line = f"import {{ {ident} }} from './middlewares/{name}.js';"
    content = await read_file_async(app_file)
    use_line = f"{splice.indent_of(content, _HEALTH_MARKER)}app.use({ident});"

    if _HEALTH_MARKER not in content:
        print_warning(f"No health route in {app_file}; add app.use({ident}) by hand")
        edits = [lambda c: splice.insert_import(c, import_line)]
    elif use_line.strip() in content:
        edits = [lambda c: splice.insert_import(c, import_line)]
    else:
        edits = [
            lambda c: splice.insert_import(c, import_line),
            lambda c: splice.insert_before(c, _HEALTH_MARKER, use_line + "\n"),
        ]

    if await splice_file(app_file, *edits):
        print_success(f"Added {ident} as default middleware")
        written.append(app_file)
    return written
