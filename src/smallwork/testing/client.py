"""In-process test client for smallwork applications.

Builds real Request objects and returns the same Response type used in
production. No transport involved.
"""

import json as json_module
from collections.abc import Mapping
from typing import Any

from smallwork.app import App
from smallwork.http.request import Request
from smallwork.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Synchronous test client for smallwork applications.

    Usage::

        client = TestClient(app)
        response = client.get("/users/42")
        assert response.status == 200

        response = client.json("POST", "/api/echo", {"message": "hi"})
        assert client.decode(response) == {"received": "hi"}
    """

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        form: Mapping[str, Any] | None = None,
        body: str | bytes = b"",
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send an arbitrary request through the app."""
        request = Request.create(
            method,
            path,
            query=query,
            form=form,
            body=body,
            headers=headers,
        )
        return self.app.handle_request(request)

    def get(
        self,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a GET request."""
        return self.request("GET", path, query=query, headers=headers)

    def post(
        self,
        path: str,
        data: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a POST request with posted form fields."""
        return self.request("POST", path, form=data, headers=headers)

    def put(
        self,
        path: str,
        data: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a PUT request with posted form fields."""
        return self.request("PUT", path, form=data, headers=headers)

    def patch(
        self,
        path: str,
        data: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a PATCH request with posted form fields."""
        return self.request("PATCH", path, form=data, headers=headers)

    def delete(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a DELETE request."""
        return self.request("DELETE", path, headers=headers)

    def options(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send an OPTIONS request."""
        return self.request("OPTIONS", path, headers=headers)

    def json(
        self,
        method: str,
        path: str,
        data: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a JSON-encoded body with JSON content negotiation headers."""
        body = json_module.dumps(data) if data else ""
        merged = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
        }
        return self.request(method.upper(), path, body=body, headers=merged)

    @staticmethod
    def decode(response: Response) -> Any:
        """Decode a JSON response body."""
        return json_module.loads(response.body)
