"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``shivam/scaffolder/templates/`` directory and renders them with the project
context built by :meth:`shivam.config.ProjectConfig.template_context`.
Supports single-file rendering, batch tree rendering, and string-based
rendering for inline template content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from shivam.utils import slugify, to_camel, to_pascal, to_snake, write_file_async

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders the ``.j2`` templates that make up a generated project.

    Undefined context variables are errors rather than empty strings, so a
    template and the context builder cannot silently drift apart.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["slugify"] = slugify
        self.env.filters["pascal_case"] = to_pascal
        self.env.filters["snake_case"] = to_snake
        self.env.filters["camel_case"] = to_camel

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"express/app.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.
        """
        content = self.render(template_path, context)
        return await write_file_async(output_path, content)

    async def render_tree(
        self,
        template_prefix: str,
        output_dir: str | Path,
        context: dict[str, Any],
        *,
        skip_patterns: list[str] | None = None,
        extension: str | None = None,
    ) -> list[Path]:
        """Render every ``*.j2`` file under *template_prefix* to *output_dir*.

        The directory structure is preserved and the ``.j2`` suffix dropped.
        When *extension* is given it is appended to every output name, so
        ``express/app.j2`` becomes ``app.ts``.

        Args:
            template_prefix: Subdirectory inside the template root to scan.
            output_dir: Target directory where rendered files are written.
            context: Template context variables.
            skip_patterns: Filename substrings to skip.
            extension: Optional extension (without dot) for every output file.

        Returns:
            List of written file paths.
        """
        skip_patterns = skip_patterns or []
        prefix_path = self.template_dir / template_prefix
        if not prefix_path.is_dir():
            return []

        written: list[Path] = []
        out_base = Path(output_dir)

        for template_file in sorted(prefix_path.rglob("*.j2")):
            rel_str = template_file.relative_to(prefix_path).as_posix()
            if any(pat in rel_str for pat in skip_patterns):
                continue

            output_name = rel_str[: -len(".j2")]
            if extension:
                output_name = f"{output_name}.{extension}"

            path = await self.render_to_file(
                f"{template_prefix}/{rel_str}", out_base / output_name, context
            )
            written.append(path)

        return written

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*."""
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix() for p in search_dir.rglob("*.j2")
        )
