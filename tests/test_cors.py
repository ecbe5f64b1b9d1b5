"""Tests for CORS middleware."""

from smallwork.app import App
from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.middleware.builtin import CORSConfig, CORSMiddleware
from smallwork.testing import TestClient


def _make_cors_app(config: CORSConfig | None = None) -> App:
    """Helper: create an app with CORS middleware and a simple route."""
    app = App()
    app.add_middleware(CORSMiddleware(config))

    @app.route("/api/data")
    def data(request: Request) -> Response:
        return Response.json({"message": "hello"})

    @app.route("/api/data", methods=["POST"])
    def create_data(request: Request) -> Response:
        return Response.text("created", 201)

    # Preflight reaches the middleware only through a matching OPTIONS route
    app.router.options("/api/data", lambda r: Response.text("unreachable"))

    return app


def _header_names(response: Response) -> set[str]:
    return {name.lower() for name, _ in response.headers}


class TestCORSDefaults:
    """The default config allows every origin."""

    def test_wildcard_headers_added(self) -> None:
        client = TestClient(_make_cors_app())
        response = client.get("/api/data", headers={"Origin": "https://anything.com"})
        assert response.status == 200
        assert response.header("Access-Control-Allow-Origin") == "*"
        assert response.header("Access-Control-Allow-Methods") == (
            "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        )
        assert response.header("Access-Control-Allow-Headers") == (
            "Content-Type, Authorization, X-API-Key"
        )
        assert response.header("Access-Control-Max-Age") == "86400"
        # Wildcard should NOT include Vary header
        assert "vary" not in _header_names(response)

    def test_wildcard_without_origin_header(self) -> None:
        client = TestClient(_make_cors_app())
        response = client.get("/api/data")
        assert response.header("Access-Control-Allow-Origin") == "*"

    def test_handler_body_preserved(self) -> None:
        client = TestClient(_make_cors_app())
        response = client.post("/api/data", headers={"Origin": "https://a.com"})
        assert response.status == 201
        assert response.text_body == "created"


class TestCORSAllowList:
    """Explicit origin lists echo the matching origin."""

    def test_allowed_origin_gets_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        response = TestClient(app).get("/api/data", headers={"Origin": "https://example.com"})
        assert response.status == 200
        assert response.header("Access-Control-Allow-Origin") == "https://example.com"
        assert response.header("Vary") == "Origin"

    def test_disallowed_origin_no_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        response = TestClient(app).get("/api/data", headers={"Origin": "https://evil.com"})
        assert response.status == 200
        assert "access-control-allow-origin" not in _header_names(response)

    def test_missing_origin_no_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        response = TestClient(app).get("/api/data")
        assert "access-control-allow-origin" not in _header_names(response)


class TestCORSPreflight:
    """OPTIONS requests are answered without reaching a handler."""

    def test_preflight_returns_204(self) -> None:
        app = _make_cors_app(
            CORSConfig(
                allow_origins=("https://example.com",),
                allow_methods=("GET", "POST"),
                max_age=600,
            )
        )
        response = TestClient(app).options(
            "/api/data", headers={"Origin": "https://example.com"}
        )
        assert response.status == 204
        assert response.body == b""
        assert response.header("Access-Control-Allow-Methods") == "GET, POST"
        assert response.header("Access-Control-Max-Age") == "600"

    def test_preflight_needs_matching_route(self) -> None:
        response = TestClient(_make_cors_app()).options("/nowhere")
        assert response.status == 404

    def test_preflight_without_options_route_is_404(self) -> None:
        app = App()
        app.add_middleware(CORSMiddleware())
        app.router.get("/api/data", lambda r: Response.text("ok"))
        response = TestClient(app).options("/api/data", headers={"Origin": "https://a.com"})
        assert response.status == 404
        assert "access-control-allow-origin" not in _header_names(response)

    def test_preflight_skips_handler(self) -> None:
        calls: list[str] = []
        app = App()
        app.add_middleware(CORSMiddleware())

        def handler(request: Request) -> Response:
            calls.append(request.method)
            return Response.text("ok")

        app.router.options("/api/data", handler)
        response = TestClient(app).options("/api/data")
        assert response.status == 204
        assert calls == []

    def test_disallowed_preflight_has_no_cors_headers(self) -> None:
        app = App()
        app.add_middleware(CORSMiddleware(CORSConfig(allow_origins=("https://example.com",))))
        app.router.options("/api/data", lambda r: Response.text("ok"))
        response = TestClient(app).options("/api/data", headers={"Origin": "https://evil.com"})
        assert response.status == 204
        assert "access-control-allow-origin" not in _header_names(response)
