"""Tests for smallwork.openapi."""

import json

from smallwork.app import App
from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.openapi import OpenApiGenerator
from smallwork.routing.router import Router
from smallwork.testing import TestClient


def _ok(request: Request) -> Response:
    return Response.text("ok")


class TestInfo:
    def test_defaults(self) -> None:
        doc = OpenApiGenerator(Router()).generate()
        assert doc == {
            "openapi": "3.0.0",
            "info": {"title": "API", "version": "1.0.0"},
            "paths": {},
        }

    def test_description_included_when_set(self) -> None:
        doc = OpenApiGenerator(Router(), "Users", "2.1.0", "User management").generate()
        assert doc["info"] == {
            "title": "Users",
            "version": "2.1.0",
            "description": "User management",
        }


class TestPaths:
    def test_methods_grouped_under_pattern(self) -> None:
        router = Router()
        router.get("/users", _ok)
        router.post("/users", _ok)
        paths = OpenApiGenerator(router).generate()["paths"]
        assert list(paths) == ["/users"]
        assert set(paths["/users"]) == {"get", "post"}

    def test_operation_shape(self) -> None:
        router = Router()
        router.get("/health", _ok)
        operation = OpenApiGenerator(router).generate()["paths"]["/health"]["get"]
        assert operation == {
            "parameters": [],
            "responses": {"200": {"description": "Successful response"}},
        }

    def test_path_parameters(self) -> None:
        router = Router()
        router.get("/users/{user_id}/posts/{slug}", _ok)
        params = OpenApiGenerator(router).generate()["paths"]["/users/{user_id}/posts/{slug}"][
            "get"
        ]["parameters"]
        assert params == [
            {"name": "user_id", "in": "path", "required": True, "schema": {"type": "string"}},
            {"name": "slug", "in": "path", "required": True, "schema": {"type": "string"}},
        ]

    def test_group_prefix_included(self) -> None:
        router = Router()
        router.group("/api", lambda g: g.delete("/items/{id}", _ok))
        paths = OpenApiGenerator(router).generate()["paths"]
        assert "delete" in paths["/api/items/{id}"]

    def test_routes_added_later_are_included(self) -> None:
        router = Router()
        generator = OpenApiGenerator(router)
        router.get("/late", _ok)
        assert "/late" in generator.generate()["paths"]


class TestOutput:
    def test_to_json_keeps_slashes(self) -> None:
        router = Router()
        router.get("/users/{id}", _ok)
        text = OpenApiGenerator(router).to_json()
        assert '"/users/{id}"' in text
        assert "\\/" not in text
        assert json.loads(text)["openapi"] == "3.0.0"

    def test_served_as_route(self) -> None:
        app = App()
        app.router.get("/users", _ok)
        app.router.get("/openapi.json", OpenApiGenerator(app.router, title="Demo"))

        response = TestClient(app).get("/openapi.json")
        assert response.status == 200
        doc = TestClient.decode(response)
        assert doc["info"]["title"] == "Demo"
        assert set(doc["paths"]) == {"/users", "/openapi.json"}
