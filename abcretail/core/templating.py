"""
Jinja2 template helpers.

Provides the shared Jinja2Templates instance and a render helper that adds
the common page context (version, active navigation section).
"""

from pathlib import Path
from typing import Any, Dict

from fastapi import Request
from starlette.responses import Response
from starlette.templating import Jinja2Templates

from .. import __version__

_templates_dir = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(_templates_dir))


def get_template_context(request: Request, **kwargs: Any) -> Dict[str, Any]:
    """
    Build the standard template context.

    Every template receives:
        - request: required by Jinja2Templates and url_for
        - version: application version
        - nav_active: current navigation section, for highlighting
    """
    context: Dict[str, Any] = {
        "request": request,
        "version": __version__,
        "nav_active": "",
    }
    context.update(kwargs)
    return context


def render_template(request: Request, template_name: str, status_code: int = 200, **kwargs: Any) -> Response:
    """Render a template with the standard context."""
    return templates.TemplateResponse(
        request,
        template_name,
        get_template_context(request, **kwargs),
        status_code=status_code,
    )
