"""Main scaffolding orchestrator.

Takes a :class:`shivam.config.ProjectConfig` and generates a complete Express
or Hono backend: framework sources, the declarative route builder, config,
manifests, Docker and PM2 files, and (optionally) lock-guarded cron jobs.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from shivam.config import Preset, ProjectConfig
from shivam.utils import display_path, print_created

from .cron_gen import CronGenerator
from .docker_gen import DockerGenerator
from .manifest_gen import ManifestGenerator
from .templates import TemplateRenderer


class ScaffoldError(Exception):
    """The project cannot be generated where it was asked to be."""


class ProjectGenerator:
    """Main scaffolding orchestrator.

    Given a ``ProjectConfig``, generates a directory tree containing:
    - ``src/`` with app, server, routes, controllers, services and config
    - the declarative route builder in ``src/helpers``
    - middlewares (logging, audit, auth) unless the preset is minimal
    - package.json, tsconfig.json, .env.example, .gitignore, README
    - Dockerfile, docker-compose.yml and PM2 ecosystem files
    - cron jobs with lock adapters when cron is enabled
    """

    def __init__(self, config: ProjectConfig, *, quiet: bool = False) -> None:
        self.config = config
        self.quiet = quiet
        self.renderer = TemplateRenderer()
        self.docker_gen = DockerGenerator(self.renderer)
        self.cron_gen = CronGenerator(self.renderer)
        self.manifest_gen = ManifestGenerator(self.renderer, config)
        self.written: list[Path] = []
        self._parent: Path = config.output_dir

    # -- Public API --------------------------------------------------------

    async def generate(self, output_dir: str | Path | None = None) -> Path:
        """Generate the complete project structure.

        Args:
            output_dir: Parent directory for the project folder. Defaults to
                the config's ``output_dir``.

        Returns:
            Path to the generated project root.

        Raises:
            ScaffoldError: If the project directory exists and is not empty.
        """
        if output_dir is None:
            parent = self.config.output_dir
            project_root = self.config.project_path
        else:
            parent = Path(output_dir)
            project_root = parent / self.config.name
        self._parent = parent
        await asyncio.to_thread(self._claim_directory, project_root)

        context = self.config.template_context()
        self.written = []

        # 1. Create the skeleton directory structure
        await self._create_directory_structure(project_root)

        # 2. Framework sources (app, server, middlewares, routes, controllers)
        await self._render_framework(project_root, context)

        # 3. Framework-independent sources (route builder, config, services, db)
        await self._render_shared_sources(project_root, context)

        # 4. package.json, tsconfig.json, env, gitignore, README
        self._record(await self.manifest_gen.generate_all(project_root, context))

        # 5. Docker
        docker_files = await self.docker_gen.generate_all(project_root, context)
        self._record(docker_files.values())

        # 6. PM2 cluster config
        self._record(await self.cron_gen.generate_pm2(project_root, context))

        # 7. Cron jobs and their lock adapter
        if self.config.features.cron:
            self._record(await self.cron_gen.generate_cron(project_root, context))

        return project_root

    # -- Directory structure -----------------------------------------------

    @staticmethod
    def _claim_directory(root: Path) -> None:
        if root.exists() and (not root.is_dir() or any(root.iterdir())):
            raise ScaffoldError(f"Directory {root} already exists and is not empty")
        root.mkdir(parents=True, exist_ok=True)

    def directory_layout(self) -> list[str]:
        """Directories created before any file is rendered."""
        config = self.config
        dirs = [
            "src/routes",
            "src/controllers",
            "src/services",
            "src/config",
            "src/helpers",
        ]
        if config.has_middlewares:
            dirs.append("src/middlewares")
        if config.has_auth:
            dirs.append("src/auth")
        if config.has_database:
            dirs.append("src/db")
        if config.features.cron:
            dirs.append("src/cron")
        if config.has_queue and config.preset is Preset.FULL:
            dirs.append("src/queue")
        if config.typescript:
            dirs.append("src/types")
        return dirs

    async def _create_directory_structure(self, root: Path) -> None:
        async def _mkdir(d: str) -> None:
            await asyncio.to_thread((root / d).mkdir, parents=True, exist_ok=True)

        await asyncio.gather(*[_mkdir(d) for d in self.directory_layout()])

    # -- Sources -----------------------------------------------------------

    async def _render_framework(self, root: Path, ctx: dict[str, Any]) -> None:
        skip: list[str] = []
        if not self.config.has_middlewares:
            skip.append("middlewares/")
        elif not self.config.has_auth:
            skip.append("middlewares/auth")

        self._record(
            await self.renderer.render_tree(
                self.config.framework.value,
                root / "src",
                ctx,
                skip_patterns=skip,
                extension=self.config.file_ext,
            )
        )

    async def _render_shared_sources(self, root: Path, ctx: dict[str, Any]) -> None:
        ext = self.config.file_ext
        src = root / "src"

        # db/ holds one template per driver; rendered below to db/index.
        self._record(
            await self.renderer.render_tree(
                "project", src, ctx, skip_patterns=["db/"], extension=ext
            )
        )

        if self.config.has_database:
            path = await self.renderer.render_to_file(
                f"project/db/{self.config.database.value}.j2",
                src / "db" / f"index.{ext}",
                ctx,
            )
            self._record([path])

    # -- Reporting ---------------------------------------------------------

    def _record(self, paths: Any) -> None:
        for path in paths:
            self.written.append(path)
            if not self.quiet:
                print_created("file", display_path(path, self._parent))
