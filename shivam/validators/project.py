"""Static consistency checks over a generated project's source tree.

Files are only read, never executed. Cross-references are found by matching
relative ``import ... from '../<folder>/<name>'`` specifiers, so the checks
see exactly what a reader of the import lines would see.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from shivam.utils import console, print_success, read_file_async

IssueType = Literal[
    "missing-controller",
    "missing-service",
    "orphaned-middleware",
    "orphaned-route",
]

SOURCE_SUFFIXES: tuple[str, ...] = (".ts", ".js")

# Middleware the generated app wires up itself.
EXEMPT_MIDDLEWARES: frozenset[str] = frozenset({"auth", "logging", "audit"})

# Files outside src/routes that may also use middleware and route modules.
_WIRING_FILES: tuple[str, ...] = ("app", "server", "config/router")


class ProjectIssue(BaseModel):
    """One problem found by :func:`validate_project`."""

    type: IssueType
    message: str
    file: str | None = None


def _module_name(path: Path, base: Path) -> str:
    return path.relative_to(base).with_suffix("").as_posix()


def _strip_suffix(specifier: str) -> str:
    for suffix in SOURCE_SUFFIXES:
        if specifier.endswith(suffix):
            return specifier[: -len(suffix)]
    return specifier


def extract_imports(content: str, folder: str) -> list[str]:
    """Module names imported from ``../<folder>/`` or ``./<folder>/``.

    ESM ``.js`` / ``.ts`` suffixes are dropped so ``'../services/user.js'``
    yields ``user``.
    """
    pattern = re.compile(rf"""from\s+['"]\.\.?/{re.escape(folder)}/([^'"]+)['"]""")
    return [_strip_suffix(m.group(1)) for m in pattern.finditer(content)]


def extract_sibling_imports(content: str) -> list[str]:
    """Module names imported relative to the same directory, sub-paths included."""
    pattern = re.compile(r"""from\s+['"]\./([^'"]+)['"]""")
    return [_strip_suffix(m.group(1)) for m in pattern.finditer(content)]


def _collect(directory: Path) -> dict[str, Path]:
    """Source files under *directory* keyed by module name; missing dir is empty."""
    if not directory.is_dir():
        return {}
    return {
        _module_name(path, directory): path
        for path in sorted(directory.rglob("*"))
        if path.is_file() and path.suffix in SOURCE_SUFFIXES
    }


async def _read_all(files: dict[str, Path]) -> dict[str, str]:
    contents = await asyncio.gather(*(read_file_async(p) for p in files.values()))
    return dict(zip(files, contents))


def _wiring_files(src: Path) -> dict[str, Path]:
    found: dict[str, Path] = {}
    for name in _WIRING_FILES:
        for suffix in SOURCE_SUFFIXES:
            candidate = src / f"{name}{suffix}"
            if candidate.is_file():
                found[name] = candidate
    return found


async def validate_project(project_root: str | Path) -> list[ProjectIssue]:
    """Return every issue found in the project at *project_root*.

    Checks, in order: routes importing missing controllers, controllers
    importing missing services, middleware no route or wiring file imports,
    and route modules that neither the routes index nor the app imports.
    """
    src = Path(project_root) / "src"
    routes_dir = src / "routes"
    middlewares_dir = src / "middlewares"

    routes = _collect(routes_dir)
    controllers = _collect(src / "controllers")
    services = _collect(src / "services")
    middlewares = _collect(middlewares_dir)
    wiring = _wiring_files(src)

    route_sources = await _read_all(routes)
    controller_sources = await _read_all(controllers)
    wiring_sources = await _read_all(wiring)

    issues: list[ProjectIssue] = []

    for name, content in route_sources.items():
        for controller in extract_imports(content, "controllers"):
            if controller not in controllers:
                issues.append(
                    ProjectIssue(
                        type="missing-controller",
                        message=f"Route references controller '{controller}' but it doesn't exist",
                        file=str(routes[name]),
                    )
                )

    for name, content in controller_sources.items():
        for service in extract_imports(content, "services"):
            if service not in services:
                issues.append(
                    ProjectIssue(
                        type="missing-service",
                        message=f"Controller references service '{service}' but it doesn't exist",
                        file=str(controllers[name]),
                    )
                )

    used_middlewares: set[str] = set()
    for content in (*route_sources.values(), *wiring_sources.values()):
        used_middlewares.update(extract_imports(content, "middlewares"))

    for name, path in middlewares.items():
        if name in EXEMPT_MIDDLEWARES or name in used_middlewares:
            continue
        issues.append(
            ProjectIssue(
                type="orphaned-middleware",
                message=f"Middleware '{name}' is defined but never used",
                file=str(path),
            )
        )

    used_routes: set[str] = set()
    for content in wiring_sources.values():
        used_routes.update(extract_imports(content, "routes"))
    if "index" in route_sources:
        used_routes.update(extract_sibling_imports(route_sources["index"]))

    for name, path in routes.items():
        if name == "index" or name in used_routes:
            continue
        issues.append(
            ProjectIssue(
                type="orphaned-route",
                message=f"Route module '{name}' is never mounted",
                file=str(path),
            )
        )

    return issues


def print_validation_issues(issues: list[ProjectIssue]) -> None:
    """Print *issues* numbered, each with its file on the following line."""
    if not issues:
        print_success("\nNo validation errors found\n")
        return

    console.print(f"\n[bold red]Found {len(issues)} validation error(s):[/bold red]\n")
    for index, issue in enumerate(issues, start=1):
        console.print(f"[yellow]{index}. \\[{issue.type}][/yellow] {issue.message}")
        if issue.file:
            console.print(f"[dim]   File: {issue.file}[/dim]")
    console.print()
