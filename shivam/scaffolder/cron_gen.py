"""PM2 cluster config and lock-guarded cron job generation.

Under PM2 cluster mode every instance runs the same schedule, so each job
takes a named lock first. The lock adapter module exposes
``acquireLock(key, ttl)``, ``releaseLock(key)`` and ``cleanup()`` over one of
four backends; the SQL backends also get a ``cron_locks`` migration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shivam.config import LockBackend
from shivam.utils import dump_json, write_file_async

from .templates import TemplateRenderer

_SQL_BACKENDS = (LockBackend.POSTGRES, LockBackend.MYSQL)


def build_pm2_config(project_name: str, typescript: bool) -> dict[str, Any]:
    return {
        "apps": [
            {
                "name": project_name,
                "script": "dist/server.js" if typescript else "src/server.js",
                "instances": "max",
                "exec_mode": "cluster",
                "env": {"NODE_ENV": "development"},
                "env_production": {"NODE_ENV": "production"},
                "error_file": "./logs/pm2-error.log",
                "out_file": "./logs/pm2-out.log",
                "log_date_format": "YYYY-MM-DD HH:mm:ss Z",
                "merge_logs": True,
                "autorestart": True,
                "watch": False,
                "max_memory_restart": "1G",
                "instance_var": "INSTANCE_ID",
            }
        ]
    }


class CronGenerator:
    """Generates PM2 config, cron wrappers, lock adapters and migrations."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate_pm2(self, output_dir: Path, context: dict[str, Any]) -> list[Path]:
        """Write ``ecosystem.config.json`` and ``ecosystem.config.js``."""
        config = build_pm2_config(context["project_name"], context["use_ts"])
        return [
            await write_file_async(output_dir / "ecosystem.config.json", dump_json(config)),
            await self.renderer.render_to_file(
                "root/ecosystem.config.js.j2", output_dir / "ecosystem.config.js", context
            ),
        ]

    async def generate_lock_adapter(
        self,
        output_dir: Path,
        context: dict[str, Any],
        backend: LockBackend | str | None = None,
    ) -> list[Path]:
        """Write ``src/cron/lock-adapter`` and, for SQL backends, the migration.

        *backend* defaults to the context's ``lock_backend``.
        """
        backend = LockBackend(backend or context["lock_backend"])
        ext = context["file_ext"]
        written = [
            await self.renderer.render_to_file(
                f"cron/lock-adapters/{backend.value}.j2",
                output_dir / "src" / "cron" / f"lock-adapter.{ext}",
                context,
            )
        ]
        if backend in _SQL_BACKENDS:
            written.append(
                await self.renderer.render_to_file(
                    f"cron/migrations/{backend.value}.sql.j2",
                    output_dir / "migrations" / "cron_locks.sql",
                    context,
                )
            )
        return written

    async def generate_cron(
        self,
        output_dir: Path,
        context: dict[str, Any],
        backend: LockBackend | str | None = None,
    ) -> list[Path]:
        """Write the locked and unlocked cron entry points plus the lock adapter."""
        written = await self.generate_lock_adapter(output_dir, context, backend)
        ext = context["file_ext"]
        for name in ("index", "simple"):
            written.append(
                await self.renderer.render_to_file(
                    f"cron/{name}.j2", output_dir / "src" / "cron" / f"{name}.{ext}", context
                )
            )
        return written
