"""Tests for the Docker, cron and manifest sub-generators.

Covers:
- Dockerfile always, docker-compose.yml only with a database or queue
- PM2 ecosystem files
- Lock adapter selection and SQL migrations per backend
- package.json dependency selection and scripts
- tsconfig.json only for TypeScript projects
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from shivam.config import LockBackend, ProjectConfig
from shivam.scaffolder import CronGenerator, DockerGenerator, ManifestGenerator
from shivam.scaffolder.cron_gen import build_pm2_config
from shivam.scaffolder.manifest_gen import build_package_json, select_dependencies

pytestmark = pytest.mark.unit


def _ctx(**overrides: Any) -> dict[str, Any]:
    preset = overrides.pop("preset", "api")
    return ProjectConfig.from_preset("svc", preset, **overrides).template_context()


# ---------------------------------------------------------------------------
# DockerGenerator
# ---------------------------------------------------------------------------


class TestDockerGenerator:
    @pytest.mark.asyncio
    async def test_dockerfile_and_compose(self, mock_renderer, tmp_path: Path):
        result = await DockerGenerator(mock_renderer).generate_all(tmp_path, _ctx())
        assert set(result) == {"dockerfile", "compose"}
        assert result["compose"] == tmp_path / "docker-compose.yml"

    @pytest.mark.asyncio
    async def test_no_compose_without_services(self, mock_renderer, tmp_path: Path):
        result = await DockerGenerator(mock_renderer).generate_all(
            tmp_path, _ctx(preset="minimal")
        )
        assert set(result) == {"dockerfile"}
        assert not (tmp_path / "docker-compose.yml").exists()

    @pytest.mark.asyncio
    async def test_queue_alone_needs_compose(self, mock_renderer, tmp_path: Path):
        result = await DockerGenerator(mock_renderer).generate_all(
            tmp_path, _ctx(database="none", queue="bull")
        )
        assert "compose" in result


# ---------------------------------------------------------------------------
# CronGenerator
# ---------------------------------------------------------------------------


class TestCronGenerator:
    def test_pm2_config(self):
        app = build_pm2_config("svc", typescript=True)["apps"][0]
        assert app["script"] == "dist/server.js"
        assert app["exec_mode"] == "cluster"
        assert app["instance_var"] == "INSTANCE_ID"
        assert build_pm2_config("svc", typescript=False)["apps"][0]["script"] == "src/server.js"

    @pytest.mark.asyncio
    async def test_generate_pm2(self, mock_renderer, tmp_path: Path):
        written = await CronGenerator(mock_renderer).generate_pm2(tmp_path, _ctx())
        assert [p.name for p in written] == ["ecosystem.config.json", "ecosystem.config.js"]
        data = json.loads((tmp_path / "ecosystem.config.json").read_text())
        assert data["apps"][0]["name"] == "svc"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("backend", "template", "migration"),
        [
            (LockBackend.POSTGRES, "cron/lock-adapters/postgres.j2", "cron/migrations/postgres.sql.j2"),
            (LockBackend.MYSQL, "cron/lock-adapters/mysql.j2", "cron/migrations/mysql.sql.j2"),
            (LockBackend.REDIS, "cron/lock-adapters/redis.j2", None),
            (LockBackend.FILE, "cron/lock-adapters/file.j2", None),
        ],
    )
    async def test_lock_adapter(self, mock_renderer, tmp_path, backend, template, migration):
        written = await CronGenerator(mock_renderer).generate_lock_adapter(
            tmp_path, _ctx(), backend
        )
        rendered = [c.args[0] for c in mock_renderer.render_to_file.call_args_list]
        assert rendered[0] == template
        assert written[0] == tmp_path / "src" / "cron" / "lock-adapter.ts"
        if migration:
            assert rendered[1] == migration
            assert written[1] == tmp_path / "migrations" / "cron_locks.sql"
        else:
            assert len(written) == 1

    @pytest.mark.asyncio
    async def test_lock_backend_defaults_to_context(self, mock_renderer, tmp_path):
        await CronGenerator(mock_renderer).generate_lock_adapter(tmp_path, _ctx(database="none"))
        assert mock_renderer.render_to_file.call_args_list[0].args[0] == (
            "cron/lock-adapters/file.j2"
        )

    @pytest.mark.asyncio
    async def test_generate_cron(self, mock_renderer, tmp_path):
        written = await CronGenerator(mock_renderer).generate_cron(
            tmp_path, _ctx(typescript=False)
        )
        names = {p.relative_to(tmp_path).as_posix() for p in written}
        assert names == {
            "src/cron/lock-adapter.js",
            "migrations/cron_locks.sql",
            "src/cron/index.js",
            "src/cron/simple.js",
        }


# ---------------------------------------------------------------------------
# ManifestGenerator
# ---------------------------------------------------------------------------


class TestManifest:
    def test_express_ts_pg_jwt(self):
        deps, dev = select_dependencies(ProjectConfig(name="svc"))
        assert {"express", "express-async-errors", "pg", "jsonwebtoken", "zod", "dotenv"} <= set(deps)
        assert {"@types/express", "@types/pg", "typescript", "pm2", "vitest"} <= set(dev)
        assert "hono" not in deps

    def test_hono_js_mysql_jwks_queue_cron(self):
        config = ProjectConfig.from_preset(
            "svc", "full", framework="hono", typescript=False, database="mysql",
            auth="jwks", queue="bull",
        )
        deps, dev = select_dependencies(config)
        assert {"hono", "@hono/node-server", "mysql2", "jwks-rsa", "bullmq", "ioredis",
                "node-cron"} <= set(deps)
        assert "express" not in deps
        assert "zod" not in deps
        assert not any(name.startswith("@types/") for name in dev)

    def test_feature_flags(self):
        config = ProjectConfig(name="svc", features={"logging": False, "testing": False})
        deps, dev = select_dependencies(config)
        assert "pino" not in deps
        assert "vitest" not in dev
        assert "test" not in build_package_json(config)["scripts"]

    def test_package_json_shape(self):
        pkg = build_package_json(ProjectConfig(name="svc", typescript=False))
        assert pkg["name"] == "svc"
        assert pkg["type"] == "module"
        assert pkg["main"] == "src/server.js"
        assert pkg["scripts"]["dev"] == "nodemon src/server.js"
        assert pkg["scripts"]["start:pm2"] == "pm2 start ecosystem.config.js --env production"
        assert list(pkg["dependencies"]) == sorted(pkg["dependencies"])

    @pytest.mark.asyncio
    async def test_generate_all(self, mock_renderer, tmp_path: Path):
        config = ProjectConfig(name="svc")
        written = await ManifestGenerator(mock_renderer, config).generate_all(
            tmp_path, config.template_context()
        )
        assert {p.name for p in written} == {
            "package.json", "tsconfig.json", ".env.example", ".gitignore", "README.md"
        }
        tsconfig = json.loads((tmp_path / "tsconfig.json").read_text())
        assert tsconfig["compilerOptions"]["strict"] is True

    @pytest.mark.asyncio
    async def test_no_tsconfig_for_js(self, mock_renderer, tmp_path: Path):
        config = ProjectConfig(name="svc", typescript=False)
        await ManifestGenerator(mock_renderer, config).generate_all(
            tmp_path, config.template_context()
        )
        assert not (tmp_path / "tsconfig.json").exists()
