"""package.json, tsconfig.json and environment/ignore file generation.

The JSON manifests are built as dicts and serialised with
:func:`shivam.utils.dump_json`; the text files come from the ``root/``
templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shivam.config import Auth, Database, Framework, ProjectConfig, Queue
from shivam.utils import dump_json, write_file_async

from .templates import TemplateRenderer

# Pinned ranges written into generated package.json files.
VERSIONS: dict[str, str] = {
    "dotenv": "^16.3.1",
    "nodemon": "^3.0.2",
    "eslint": "^8.55.0",
    "prettier": "^3.1.1",
    "zod": "^3.22.4",
    "@types/node": "^20.10.0",
    "typescript": "^5.3.3",
    "tsx": "^4.7.0",
    "ts-node-dev": "^2.0.0",
    "express": "^4.18.2",
    "express-async-errors": "^3.1.1",
    "@types/express": "^4.17.21",
    "hono": "^3.11.7",
    "@hono/node-server": "^1.4.1",
    "jsonwebtoken": "^9.0.2",
    "@types/jsonwebtoken": "^9.0.5",
    "jwks-rsa": "^3.1.0",
    "node-cron": "^3.0.3",
    "@types/node-cron": "^3.0.11",
    "pm2": "^5.3.0",
    "bullmq": "^5.1.0",
    "ioredis": "^5.3.2",
    "pg": "^8.11.3",
    "@types/pg": "^8.10.9",
    "mysql2": "^3.6.5",
    "pino": "^8.17.2",
    "pino-pretty": "^10.3.1",
    "vitest": "^1.0.4",
}

TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES2022",
        "module": "ESNext",
        "lib": ["ES2022"],
        "moduleResolution": "node",
        "outDir": "./dist",
        "rootDir": "./src",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "resolveJsonModule": True,
        "declaration": True,
        "declarationMap": True,
        "sourceMap": True,
        "noImplicitReturns": True,
        "noFallthroughCasesInSwitch": True,
    },
    "include": ["src/**/*"],
    "exclude": ["node_modules", "dist"],
}


def _pick(*names: str) -> dict[str, str]:
    return {name: VERSIONS[name] for name in names}


def select_dependencies(config: ProjectConfig) -> tuple[dict[str, str], dict[str, str]]:
    """Return ``(dependencies, devDependencies)`` for *config*."""
    ts = config.typescript
    deps = _pick("dotenv")
    dev = _pick("nodemon", "eslint", "prettier", "pm2")

    if ts:
        deps.update(_pick("zod"))
        dev.update(_pick("@types/node", "typescript", "tsx", "ts-node-dev"))

    if config.framework is Framework.EXPRESS:
        deps.update(_pick("express", "express-async-errors"))
        if ts:
            dev.update(_pick("@types/express"))
    else:
        deps.update(_pick("hono", "@hono/node-server"))

    if config.auth is not Auth.NONE:
        deps.update(_pick("jsonwebtoken"))
        if config.auth is Auth.JWKS:
            deps.update(_pick("jwks-rsa"))
        if ts:
            dev.update(_pick("@types/jsonwebtoken"))

    if config.features.cron:
        deps.update(_pick("node-cron"))
        if ts:
            dev.update(_pick("@types/node-cron"))

    if config.queue is Queue.BULL:
        deps.update(_pick("bullmq", "ioredis"))

    if config.database is Database.PG:
        deps.update(_pick("pg"))
        if ts:
            dev.update(_pick("@types/pg"))
    elif config.database is Database.MYSQL:
        deps.update(_pick("mysql2"))

    if config.features.logging:
        deps.update(_pick("pino", "pino-pretty"))

    if config.features.testing:
        dev.update(_pick("vitest"))

    return dict(sorted(deps.items())), dict(sorted(dev.items()))


def build_scripts(config: ProjectConfig) -> dict[str, str]:
    ext = config.file_ext
    scripts = {
        "dev": (
            f"ts-node-dev --respawn --transpile-only src/server.{ext}"
            if config.typescript
            else f"nodemon src/server.{ext}"
        ),
        "build": "tsc" if config.typescript else 'echo "No build needed for JS"',
        "start": "node dist/server.js" if config.typescript else "node src/server.js",
        "start:pm2": "pm2 start ecosystem.config.js --env production",
        "stop:pm2": "pm2 stop ecosystem.config.js",
        "restart:pm2": "pm2 restart ecosystem.config.js",
        "logs:pm2": "pm2 logs",
        "monit:pm2": "pm2 monit",
        "lint": "eslint . --ext .ts,.js",
        "format": 'prettier --write "src/**/*.{ts,js}"',
    }
    if config.features.testing:
        scripts["test"] = "vitest run"
        scripts["test:watch"] = "vitest"
    return scripts


def build_package_json(config: ProjectConfig) -> dict[str, Any]:
    dependencies, dev_dependencies = select_dependencies(config)
    return {
        "name": config.name,
        "version": "1.0.0",
        "description": "Backend project generated with create-shiv-am",
        "main": "dist/server.js" if config.typescript else "src/server.js",
        "type": "module",
        "scripts": build_scripts(config),
        "dependencies": dependencies,
        "devDependencies": dev_dependencies,
    }


class ManifestGenerator:
    """Writes the project manifests and root dotfiles."""

    _ROOT_FILES: dict[str, str] = {
        "root/env.example.j2": ".env.example",
        "root/gitignore.j2": ".gitignore",
        "root/README.md.j2": "README.md",
    }

    def __init__(self, renderer: TemplateRenderer, config: ProjectConfig) -> None:
        self.renderer = renderer
        self.config = config

    async def generate_all(self, output_dir: Path, context: dict[str, Any]) -> list[Path]:
        """Write package.json, tsconfig.json (TypeScript only) and root files."""
        written = [
            await write_file_async(
                output_dir / "package.json", dump_json(build_package_json(self.config))
            )
        ]
        if self.config.typescript:
            written.append(
                await write_file_async(output_dir / "tsconfig.json", dump_json(TSCONFIG))
            )
        for template_name, output_name in self._ROOT_FILES.items():
            written.append(
                await self.renderer.render_to_file(
                    template_name, output_dir / output_name, context
                )
            )
        return written
