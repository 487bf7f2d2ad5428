"""Tests for the route table models (shivam.routing.models).

Covers:
- HttpMethod case-insensitive lookup
- HandlerRef parsing
- RouteDefinition coercion, aliases, immutability and path validation
- RouterConfig camelCase loading and JSON save/load
- RouteOptions aliases
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from shivam.routing import HandlerRef, HttpMethod, RouteDefinition, RouteOptions, RouterConfig

pytestmark = pytest.mark.unit


class TestHttpMethod:
    def test_lowercase_lookup(self):
        assert HttpMethod("post") is HttpMethod.POST

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            HttpMethod("TRACE")


class TestHandlerRef:
    def test_parse(self):
        ref = HandlerRef.parse("users.list")
        assert ref.controller == "users"
        assert ref.method == "list"
        assert str(ref) == "users.list"

    @pytest.mark.parametrize("raw", ["users", ".list", "users.", ""])
    def test_parse_rejects_malformed(self, raw: str):
        with pytest.raises(ValueError):
            HandlerRef.parse(raw)


class TestRouteDefinition:
    def test_defaults_are_empty(self):
        route = RouteDefinition(method="GET", path="/x", handler="a.b")
        assert route.enabled == ()
        assert route.disabled == ()
        assert route.roles == ()
        assert route.exclude_roles == ()
        assert route.label == "GET /x"

    def test_handler_string_is_parsed(self):
        route = RouteDefinition(method="get", path="/x", handler="pages.home")
        assert route.method is HttpMethod.GET
        assert route.handler == HandlerRef(controller="pages", method="home")

    def test_camel_case_aliases(self):
        route = RouteDefinition.model_validate(
            {
                "method": "POST",
                "path": "/admin",
                "handler": "admin.act",
                "enabledExtra": ["auth"],
                "disabledDefaults": ["logging"],
                "excludeRoles": ["guest"],
            }
        )
        assert route.enabled == ("auth",)
        assert route.disabled == ("logging",)
        assert route.exclude_roles == ("guest",)

    def test_single_string_becomes_tuple(self):
        route = RouteDefinition(method="GET", path="/x", handler="a.b", roles="admin")
        assert route.roles == ("admin",)

    def test_enabled_order_preserved(self):
        route = RouteDefinition(method="GET", path="/x", handler="a.b", enabled=["y", "x"])
        assert route.enabled == ("y", "x")

    def test_is_immutable(self):
        route = RouteDefinition(method="GET", path="/x", handler="a.b")
        with pytest.raises(ValidationError):
            route.path = "/y"

    def test_relative_path_rejected(self):
        with pytest.raises(ValidationError):
            RouteDefinition(method="GET", path="x", handler="a.b")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            RouteDefinition(method="GET", path="/x", handler="a.b", middleware=["auth"])

    def test_bad_handler_rejected(self):
        with pytest.raises(ValidationError):
            RouteDefinition(method="GET", path="/x", handler="nodot")


class TestRouterConfig:
    def test_camel_case_table(self):
        config = RouterConfig.model_validate(
            {
                "defaultMiddlewares": ["logging"],
                "defaultRoles": ["user"],
                "routes": [{"method": "GET", "path": "/a", "handler": "c.a"}],
            }
        )
        assert config.default_middlewares == ("logging",)
        assert config.default_roles == ("user",)
        assert config.routes[0].path == "/a"

    def test_save_load_round_trip(self, tmp_path: Path):
        config = RouterConfig(
            default_middlewares=["logging", "auth"],
            routes=[
                {"method": "GET", "path": "/public", "handler": "pages.public",
                 "disabled": ["auth"]},
                {"method": "POST", "path": "/admin", "handler": "admin.act",
                 "roles": ["admin"]},
            ],
        )
        path = config.save(tmp_path / "nested" / "routes.json")
        assert json.loads(path.read_text())["routes"][1]["roles"] == ["admin"]
        assert RouterConfig.load(path) == config


class TestRouteOptions:
    def test_exclude_role_alias(self):
        options = RouteOptions.model_validate({"excludeRole": ["guest"], "include": "audit"})
        assert options.exclude_role == ("guest",)
        assert options.include == ("audit",)
