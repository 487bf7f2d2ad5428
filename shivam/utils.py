"""Shared utility functions for create-shiv-am.

Provides name/case helpers used by the scaffolder and component mutators,
JSON I/O, file-system helpers and Rich-based console reporting.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """Convert text to a URL/npm-safe slug (hyphenated).

    Examples::

        slugify("My Backend") -> "my-backend"
        slugify("  API (v2)  ") -> "api-v2"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower().strip())
    return slug.strip("-")


def to_pascal(name: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``someThing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", name)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def to_camel(name: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = to_pascal(name)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def to_snake(name: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data


def dump_json(data: Any) -> str:
    """Serialise *data* the way every emitted JSON file is written."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str) -> Path:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


async def write_file_async(path: str | Path, content: str) -> Path:
    """Write *content* to *path* in a worker thread."""
    return await asyncio.to_thread(write_file, Path(path), content)


async def read_file_async(path: str | Path) -> str:
    """Read a UTF-8 text file in a worker thread."""
    return await asyncio.to_thread(Path(path).read_text, "utf-8")


def display_path(path: Path, root: Path | None = None) -> str:
    """Render *path* relative to *root* when possible."""
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return str(path)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str, color: str = "bright_blue") -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold {color}] {title} [/bold {color}]", style=color))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_created(kind: str, path: Path | str) -> None:
    """Report a file written by a generator."""
    console.print(f"[green]✓ Created {kind}:[/green] {path}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
