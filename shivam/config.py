"""create-shiv-am project configuration.

Typed configuration for a project to scaffold. All settings use Pydantic v2
models so they are validated at construction time and can be serialised
to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Framework(str, Enum):
    EXPRESS = "express"
    HONO = "hono"


class Database(str, Enum):
    PG = "pg"
    MYSQL = "mysql"
    NONE = "none"


class Auth(str, Enum):
    JWT = "jwt"
    JWKS = "jwks"
    NONE = "none"


class Queue(str, Enum):
    BULL = "bull"
    NONE = "none"


class Preset(str, Enum):
    MINIMAL = "minimal"
    API = "api"
    FULL = "full"


class LockBackend(str, Enum):
    """Mutual-exclusion backend used by the generated cron wrapper."""

    FILE = "file"
    REDIS = "redis"
    POSTGRES = "postgres"
    MYSQL = "mysql"


DEFAULT_DB_PORTS: dict[Database, int] = {
    Database.PG: 5432,
    Database.MYSQL: 3306,
}

_PACKAGE_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


class FeatureFlags(BaseModel):
    """Optional features of the generated project."""

    cron: bool = Field(default=False, description="Generate thread-safe cron jobs")
    logging: bool = Field(default=True, description="Add pino logging dependencies")
    testing: bool = Field(default=True, description="Add vitest and test scripts")


class ProjectConfig(BaseModel):
    """Pydantic model describing the project to scaffold.

    Instances are created once by the CLI (or programmatically) and passed to
    :class:`shivam.scaffolder.ProjectGenerator`.
    """

    name: str = Field(..., min_length=1, description="Project (and npm package) name")
    framework: Framework = Field(default=Framework.EXPRESS)
    typescript: bool = Field(default=True)
    database: Database = Field(default=Database.PG)
    auth: Auth = Field(default=Auth.JWT)
    queue: Queue = Field(default=Queue.NONE)
    preset: Preset = Field(default=Preset.API)
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    output_dir: Path = Field(default=Path("."))

    @field_validator("name")
    @classmethod
    def _name_is_package_safe(cls, value: str) -> str:
        value = value.strip()
        if not _PACKAGE_NAME_RE.match(value):
            raise ValueError(
                f"Project name {value!r} must be a lowercase npm package name "
                "(letters, digits, '-', '_' and '.')"
            )
        return value

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def from_preset(
        cls, name: str, preset: Preset | str = Preset.API, **overrides: Any
    ) -> "ProjectConfig":
        """Build a config following the preset rules of the interactive flow.

        ``minimal`` has no database, auth or queue; ``full`` turns on cron.
        Explicit *overrides* win over preset defaults except that ``minimal``
        never gets a database, auth or queue.
        """
        preset = Preset(preset)
        values: dict[str, Any] = {
            "database": Database.PG,
            "auth": Auth.JWT,
            "queue": Queue.NONE,
        }
        values.update(overrides)

        if preset is Preset.MINIMAL:
            values["database"] = Database.NONE
            values["auth"] = Auth.NONE
            values["queue"] = Queue.NONE

        features = values.pop("features", None)
        if features is None:
            features = FeatureFlags(cron=preset is Preset.FULL)
        elif isinstance(features, dict):
            features = FeatureFlags(**features)

        return cls(name=name, preset=preset, features=features, **values)

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def file_ext(self) -> str:
        return "ts" if self.typescript else "js"

    @property
    def has_auth(self) -> bool:
        return self.auth is not Auth.NONE

    @property
    def has_jwks(self) -> bool:
        return self.auth is Auth.JWKS

    @property
    def has_database(self) -> bool:
        return self.database is not Database.NONE

    @property
    def has_queue(self) -> bool:
        return self.queue is not Queue.NONE

    @property
    def has_middlewares(self) -> bool:
        """Minimal projects ship without a middlewares directory."""
        return self.preset is not Preset.MINIMAL

    @property
    def lock_backend(self) -> LockBackend:
        """Cron lock backend: the project's SQL database, else a lock file."""
        if self.database is Database.PG:
            return LockBackend.POSTGRES
        if self.database is Database.MYSQL:
            return LockBackend.MYSQL
        return LockBackend.FILE

    @property
    def db_port(self) -> int | None:
        return DEFAULT_DB_PORTS.get(self.database)

    @property
    def project_path(self) -> Path:
        """Directory the project is generated into."""
        return self.output_dir / self.name

    def template_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context shared by every generator."""
        return {
            "project_name": self.name,
            "framework": self.framework.value,
            "is_hono": self.framework is Framework.HONO,
            "use_ts": self.typescript,
            "file_ext": self.file_ext,
            "preset": self.preset.value,
            "has_auth": self.has_auth,
            "has_jwks": self.has_jwks,
            "has_database": self.has_database,
            "database_type": self.database.value,
            "db_port": self.db_port,
            "has_queue": self.has_queue,
            "queue": self.queue.value,
            "auth": self.auth.value,
            "has_cron": self.features.cron,
            "has_logging": self.features.logging,
            "has_testing": self.features.testing,
            "has_middlewares": self.has_middlewares,
            "lock_backend": self.lock_backend.value,
        }

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, name: str) -> "ProjectConfig":
        """Build a ``ProjectConfig`` from environment variables.

        Recognised variables (all optional):
            SHIVAM_FRAMEWORK, SHIVAM_TYPESCRIPT, SHIVAM_DB, SHIVAM_AUTH,
            SHIVAM_QUEUE, SHIVAM_PRESET, SHIVAM_OUTPUT_DIR.
        """
        overrides: dict[str, Any] = {}
        if os.environ.get("SHIVAM_FRAMEWORK"):
            overrides["framework"] = os.environ["SHIVAM_FRAMEWORK"]
        if os.environ.get("SHIVAM_TYPESCRIPT"):
            overrides["typescript"] = os.environ["SHIVAM_TYPESCRIPT"].lower() not in (
                "0",
                "false",
                "no",
            )
        if os.environ.get("SHIVAM_DB"):
            overrides["database"] = os.environ["SHIVAM_DB"]
        if os.environ.get("SHIVAM_AUTH"):
            overrides["auth"] = os.environ["SHIVAM_AUTH"]
        if os.environ.get("SHIVAM_QUEUE"):
            overrides["queue"] = os.environ["SHIVAM_QUEUE"]
        if os.environ.get("SHIVAM_OUTPUT_DIR"):
            overrides["output_dir"] = Path(os.environ["SHIVAM_OUTPUT_DIR"])

        preset = os.environ.get("SHIVAM_PRESET", Preset.API.value)
        return cls.from_preset(name, preset, **overrides)
