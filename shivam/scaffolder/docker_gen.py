"""Dockerfile and Docker Compose generation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer


class DockerGenerator:
    """Generates the production Dockerfile and, when services are needed,
    a ``docker-compose.yml`` for the database and Redis."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    @staticmethod
    def needs_compose(context: dict[str, Any]) -> bool:
        return bool(context["has_database"] or context["has_queue"])

    async def generate_all(self, output_dir: Path, context: dict[str, Any]) -> dict[str, Path]:
        """Write the Docker files into *output_dir*.

        Returns:
            Mapping of descriptive name to written path, e.g.
            ``{"dockerfile": Path(".../Dockerfile"), "compose": ...}``.
        """
        result = {
            "dockerfile": await self.renderer.render_to_file(
                "root/Dockerfile.j2", output_dir / "Dockerfile", context
            )
        }
        if self.needs_compose(context):
            result["compose"] = await self.renderer.render_to_file(
                "root/docker-compose.yml.j2", output_dir / "docker-compose.yml", context
            )
        return result
