"""Command-line entry point for ``create-shiv-am``.

Sub-commands::

    create-shiv-am init my-api --framework hono --db mysql --preset full
    create-shiv-am add route users --method POST --middleware logging
    create-shiv-am validate
    create-shiv-am check-routes routes.json --middleware auth --controller users
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.markup import escape

from shivam import __version__
from shivam.components import CRUD_METHODS, ComponentError, add_component
from shivam.config import Auth, Database, Framework, Preset, ProjectConfig, Queue
from shivam.routing import (
    ROLE_CHECK,
    ControllerRegistry,
    MiddlewareRegistry,
    RouterConfig,
    validate_config,
)
from shivam.scaffolder import ProjectGenerator, ScaffoldError
from shivam.utils import console, print_error, print_header, print_success, print_summary_table
from shivam.validators import print_validation_issues, validate_project


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


class _AnyMethodController:
    """Stands in for a controller whose every method exists."""

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return _noop


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _choices(enum: type) -> list[str]:
    return [member.value for member in enum]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-shiv-am",
        description="Generate Express/Hono backends with declarative routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-shiv-am init my-api\n"
            "  create-shiv-am init my-api --framework hono --js --preset minimal\n"
            "  create-shiv-am add route users --method POST\n"
            "  create-shiv-am validate --project ./my-api\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Generate a new project")
    init.add_argument("name", nargs="?", help="Project name (npm package name)")
    init.add_argument("--framework", choices=_choices(Framework), default=None)
    lang = init.add_mutually_exclusive_group()
    lang.add_argument("--ts", dest="typescript", action="store_true", default=None)
    lang.add_argument("--js", dest="typescript", action="store_false")
    init.add_argument("--db", choices=_choices(Database), default=None)
    init.add_argument("--auth", choices=_choices(Auth), default=None)
    init.add_argument("--queue", choices=_choices(Queue), default=None)
    init.add_argument("--preset", choices=_choices(Preset), default=None)
    init.add_argument("--cron", action="store_true", default=None, help="Add locked cron jobs")
    init.add_argument(
        "--output", "-o", default=None, help="Parent directory (default: current directory)"
    )

    add = sub.add_parser("add", help="Add a component to an existing project")
    add.add_argument("component", help="route, middleware, service or controller")
    add.add_argument("name_arg", nargs="?", metavar="name")
    add.add_argument("--name", "-n", dest="name")
    add.add_argument("--project", default=".", help="Project root (default: .)")
    add.add_argument("--method", default="GET", help="route: HTTP method")
    add.add_argument("--path", default=None, help="route: path (default: /<name>)")
    add.add_argument(
        "--middleware", action="append", default=[], help="route: extra middleware name"
    )
    add.add_argument("--no-controller", action="store_true", help="route: skip controller")
    add.add_argument("--no-service", action="store_true", help="route: skip service")
    add.add_argument(
        "--type", dest="kind", default="custom", help="middleware: logger, rateLimit, cors, custom"
    )
    add.add_argument("--default", dest="is_default", action="store_true",
                     help="middleware: apply to every request")
    add.add_argument("--no-db", action="store_true", help="service: no SQL")
    add.add_argument(
        "--methods",
        default=",".join(CRUD_METHODS),
        help=f"service: comma-separated subset of {','.join(CRUD_METHODS)}",
    )

    validate = sub.add_parser("validate", help="Check a project's cross-references")
    validate.add_argument("--project", default=".", help="Project root (default: .)")

    check = sub.add_parser("check-routes", help="Validate a JSON route table")
    check.add_argument("table", help="Path to the route table JSON file")
    check.add_argument(
        "--middleware", action="append", default=[], help="Registered middleware name"
    )
    check.add_argument(
        "--controller",
        action="append",
        default=[],
        help="Registered controller ('users') or single handler ('users.list')",
    )
    check.add_argument(
        "--role-check", default=ROLE_CHECK, help=f"Role-check factory name (default: {ROLE_CHECK})"
    )
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_init(args: argparse.Namespace) -> int:
    if not args.name:
        print_error("Error: project name is required")
        return 1

    overrides: dict[str, Any] = {}
    for key, value in (
        ("framework", args.framework),
        ("typescript", args.typescript),
        ("database", args.db),
        ("auth", args.auth),
        ("queue", args.queue),
    ):
        if value is not None:
            overrides[key] = value
    if args.output:
        overrides["output_dir"] = Path(args.output)
    preset = args.preset or Preset.API.value
    if args.cron:
        overrides["features"] = {"cron": True}

    config = ProjectConfig.from_preset(args.name, preset, **overrides)

    print_header(f"Creating {config.name}")
    root = asyncio.run(ProjectGenerator(config).generate())
    console.print()
    print_summary_table(
        {
            "Framework": config.framework.value,
            "Language": "TypeScript" if config.typescript else "JavaScript",
            "Preset": config.preset.value,
            "Database": config.database.value,
            "Auth": config.auth.value,
            "Queue": config.queue.value,
            "Cron": "yes" if config.features.cron else "no",
        },
        title=str(root),
    )
    print_success("Project created successfully!")
    console.print("\nNext steps:")
    console.print(f"  cd {root}")
    console.print("  npm install")
    console.print("  cp .env.example .env")
    console.print("  npm run dev\n")
    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    name = args.name or args.name_arg
    options: dict[str, Any] = {}
    if args.component == "route":
        options = {
            "method": args.method.upper(),
            "path": args.path,
            "create_controller": not args.no_controller,
            "create_service": not args.no_service,
            "middleware": args.middleware,
        }
    elif args.component == "middleware":
        options = {"kind": args.kind, "is_default": args.is_default}
    elif args.component == "service":
        options = {
            "with_database": not args.no_db,
            "methods": [m.strip() for m in args.methods.split(",") if m.strip()],
        }

    asyncio.run(add_component(Path(args.project), args.component, name, **options))
    print_success(f"{args.component} '{name}' added successfully!")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    issues = asyncio.run(validate_project(Path(args.project)))
    print_validation_issues(issues)
    return 1 if issues else 0


def _controller_registry(entries: Sequence[str]) -> ControllerRegistry:
    controllers: dict[str, Any] = {}
    for entry in entries:
        name, _, method = entry.partition(".")
        if not method:
            controllers[name] = _AnyMethodController()
            continue
        existing = controllers.setdefault(name, {})
        if isinstance(existing, dict):
            existing[method] = _noop
    return ControllerRegistry(controllers)


def _cmd_check_routes(args: argparse.Namespace) -> int:
    config = RouterConfig.load(Path(args.table))
    middlewares = MiddlewareRegistry({name: _noop for name in args.middleware})
    report = validate_config(
        config,
        middlewares,
        _controller_registry(args.controller),
        role_check=args.role_check,
    )
    if report.valid:
        print_success(f"All {len(config.routes)} route(s) are valid")
        return 0

    print_error(f"Found {len(report.errors)} route error(s):")
    for error in report.errors:
        console.print(f"  - {error}", markup=False)
    return 1


_COMMANDS = {
    "init": _cmd_init,
    "add": _cmd_add,
    "validate": _cmd_validate,
    "check-routes": _cmd_check_routes,
}


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``create-shiv-am`` / ``python -m shivam``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        code = _COMMANDS[args.command](args)
    except (ScaffoldError, ComponentError) as exc:
        print_error(f"Error: {escape(str(exc))}")
        code = 1
    except ValidationError as exc:
        print_error(f"Invalid configuration:\n{escape(str(exc))}")
        code = 1
    except (OSError, ValueError) as exc:
        print_error(f"Error: {escape(str(exc))}")
        code = 1

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
