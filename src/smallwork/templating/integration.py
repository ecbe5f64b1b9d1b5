"""Kida environment setup and view rendering.

Template compilation belongs to kida; smallwork only creates the
environment from AppConfig and wraps rendered output in a Response.
"""

from collections.abc import Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from smallwork.config import AppConfig
from smallwork.http.response import Response


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    Called lazily the first time the App renders a view, unless an
    environment was handed to the App directly.
    """
    return Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )


def render_view(env: Environment, name: str, context: Mapping[str, Any]) -> str:
    """Render a full template to string."""
    template = env.get_template(name)
    return template.render(dict(context))


def view_response(
    env: Environment,
    name: str,
    context: Mapping[str, Any],
    status: int = 200,
) -> Response:
    """Render *name* and wrap it in an HTML response."""
    return Response.html(render_view(env, name, context), status=status)
