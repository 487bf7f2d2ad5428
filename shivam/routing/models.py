"""Route table data model.

Immutable Pydantic models describing a declarative route table: the HTTP
verb, the handler reference, and the per-route middleware / role overrides
layered on top of the table-wide defaults.

Route tables are usually declared in Python, but the models also accept the
camelCase keys used by the generated TypeScript helper so a JSON route table
can be loaded with :meth:`RouterConfig.load`.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    """HTTP verbs a route may be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def _missing_(cls, value: object) -> HttpMethod | None:
        if isinstance(value, str):
            upper = value.upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class HandlerRef(BaseModel):
    """Two-part ``controller.method`` reference, resolved lazily."""

    model_config = ConfigDict(frozen=True)

    controller: str = Field(..., min_length=1)
    method: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, value: str) -> HandlerRef:
        """Parse ``"users.list"`` into ``HandlerRef("users", "list")``."""
        controller, sep, method = value.partition(".")
        if not sep or not controller or not method:
            raise ValueError(
                f"Handler reference {value!r} must look like 'controller.method'"
            )
        return cls(controller=controller, method=method)

    def __str__(self) -> str:
        return f"{self.controller}.{self.method}"


def _names(value: Any) -> Any:
    """Accept ``None`` and single strings where a name list is expected."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return value


class RouteDefinition(BaseModel):
    """One entry of the route table. Never mutated after declaration."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    method: HttpMethod
    path: str
    handler: HandlerRef
    enabled: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("enabled", "enabledExtra", "enabled_extra"),
        description="Extra middleware appended after the surviving defaults, in order",
    )
    disabled: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("disabled", "disabledDefaults", "disabled_defaults"),
        description="Default middleware removed for this route",
    )
    roles: tuple[str, ...] = Field(
        default=(), description="Replaces the default roles when non-empty"
    )
    exclude_roles: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("exclude_roles", "excludeRoles"),
        description="Default roles removed for this route",
    )

    @field_validator("method", mode="before")
    @classmethod
    def _coerce_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return HttpMethod(value)
        return value

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Route path {value!r} must start with '/'")
        return value

    @field_validator("handler", mode="before")
    @classmethod
    def _coerce_handler(cls, value: Any) -> Any:
        if isinstance(value, str):
            return HandlerRef.parse(value)
        return value

    @field_validator("enabled", "disabled", "roles", "exclude_roles", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        return _names(value)

    @property
    def label(self) -> str:
        """``"GET /users"`` -- how the route is named in error messages."""
        return f"{self.method.value} {self.path}"


class RouterConfig(BaseModel):
    """Table-wide defaults plus the ordered route table they apply to."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    default_middlewares: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("default_middlewares", "defaultMiddlewares"),
    )
    default_roles: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("default_roles", "defaultRoles"),
    )
    routes: tuple[RouteDefinition, ...] = ()

    @field_validator("default_middlewares", "default_roles", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        return _names(value)

    def save(self, path: Path) -> Path:
        """Write the route table as JSON and return the path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> RouterConfig:
        """Load and validate a JSON route table."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)


class RouteOptions(BaseModel):
    """Per-route overrides accepted by the imperative :class:`RouteBuilder`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()
    exclude_role: tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("exclude_role", "excludeRole")
    )

    @field_validator("include", "exclude", "roles", "exclude_role", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        return _names(value)
