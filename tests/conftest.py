"""Shared pytest fixtures for the create-shiv-am test suite.

Provides reusable fixtures for:
- Recording middleware / handlers and a fake verb-dispatch routing surface
- Project configurations for each preset
- Generated projects on disk (real renderer, temporary directory)
- A mocked TemplateRenderer for sub-generator tests
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from shivam.config import ProjectConfig
from shivam.scaffolder import ProjectGenerator, TemplateRenderer


# ---------------------------------------------------------------------------
# Routing helpers
# ---------------------------------------------------------------------------


def named(name: str):
    """A no-op callable that identifies itself by *name*."""

    def _middleware(*args: Any, **kwargs: Any) -> str:
        return name

    _middleware.__name__ = name
    return _middleware


class RoleCheckFactory:
    """``roleCheck`` stand-in recording the role lists it was built with."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def __call__(self, roles: list[str]):
        self.calls.append(list(roles))
        check = named(f"roleCheck({','.join(roles)})")
        check.roles = list(roles)
        return check


class RecordingSurface:
    """Express/Hono-shaped router that records ``verb(path, *chain, handler)``."""

    def __init__(self, verbs: tuple[str, ...] = ("get", "post", "put", "delete", "patch")) -> None:
        self.registrations: list[tuple[str, str, tuple[Any, ...]]] = []
        for verb in verbs:
            setattr(self, verb, self._recorder(verb))

    def _recorder(self, verb: str):
        def register(path: str, *callables: Any) -> None:
            self.registrations.append((verb, path, callables))

        return register


@pytest.fixture
def role_check() -> RoleCheckFactory:
    return RoleCheckFactory()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def mw():
    """Factory for named no-op middleware: ``mw("auth")``."""
    return named


@pytest.fixture
def surface_factory():
    """Build a :class:`RecordingSurface` exposing only the given verbs."""
    return RecordingSurface


# ---------------------------------------------------------------------------
# Project configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def api_config(tmp_path: Path) -> ProjectConfig:
    """Express + TypeScript + pg + JWT, the default ``api`` preset."""
    return ProjectConfig.from_preset("my-api", "api", output_dir=tmp_path)


@pytest.fixture
def minimal_config(tmp_path: Path) -> ProjectConfig:
    return ProjectConfig.from_preset("tiny", "minimal", output_dir=tmp_path)


@pytest.fixture
def full_config(tmp_path: Path) -> ProjectConfig:
    """Hono + JavaScript + MySQL + JWKS + bull queue with cron."""
    return ProjectConfig.from_preset(
        "big-app",
        "full",
        framework="hono",
        typescript=False,
        database="mysql",
        auth="jwks",
        queue="bull",
        output_dir=tmp_path,
    )


@pytest.fixture
async def generated_project(api_config: ProjectConfig) -> Path:
    """An ``api`` preset project generated into a temporary directory."""
    return await ProjectGenerator(api_config, quiet=True).generate()


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def mock_renderer() -> MagicMock:
    """A mock TemplateRenderer whose render_to_file writes a marker line."""
    mock = MagicMock(spec=TemplateRenderer)

    async def mock_render_to_file(template_path: str, output_path, context):
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(f"// Rendered from {template_path}\n", encoding="utf-8")
        return out

    mock.render_to_file = AsyncMock(side_effect=mock_render_to_file)
    return mock

