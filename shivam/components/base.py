"""Shared plumbing for the component mutators."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from shivam.scaffolder.templates import TemplateRenderer
from shivam.utils import load_json, read_file_async, to_camel, to_pascal, write_file_async

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


class ComponentError(Exception):
    """A component cannot be added to the project."""


def check_name(name: str | None) -> str:
    """Return the stripped component name or raise :class:`ComponentError`."""
    name = (name or "").strip()
    if not name:
        raise ComponentError("Name is required")
    if not _NAME_RE.match(name):
        raise ComponentError(
            f"Invalid name {name!r}: use letters, digits, '-' and '_', starting with a letter"
        )
    return name


def read_package_json(project_root: Path) -> dict[str, Any]:
    path = Path(project_root) / "package.json"
    if not path.is_file():
        return {}
    return load_json(path)


def _dependencies(project_root: Path) -> dict[str, Any]:
    return read_package_json(project_root).get("dependencies") or {}


def detect_framework(project_root: Path) -> str:
    """``hono`` when the project depends on hono, else ``express``."""
    return "hono" if "hono" in _dependencies(project_root) else "express"


def detect_extension(project_root: Path) -> str:
    """``ts`` when the project has a tsconfig.json, else ``js``."""
    return "ts" if (Path(project_root) / "tsconfig.json").is_file() else "js"


def detect_database(project_root: Path) -> str:
    deps = _dependencies(project_root)
    if "mysql2" in deps:
        return "mysql"
    if "pg" in deps:
        return "pg"
    return "none"


def component_context(project_root: Path, name: str, **extra: Any) -> dict[str, Any]:
    """Template context for one component named *name*."""
    ext = detect_extension(project_root)
    return {
        "name": to_camel(name),
        "pascal": to_pascal(name),
        "file_name": name,
        "use_ts": ext == "ts",
        "file_ext": ext,
        "framework": detect_framework(project_root),
        **extra,
    }


def get_renderer(renderer: TemplateRenderer | None = None) -> TemplateRenderer:
    return renderer if renderer is not None else TemplateRenderer()


async def splice_file(path: Path, *edits: Any) -> bool:
    """Apply ``content -> content`` *edits* to *path*; return whether it changed."""
    original = await read_file_async(path)
    content = original
    for edit in edits:
        content = edit(content)
    if content == original:
        return False
    await write_file_async(path, content)
    return True
