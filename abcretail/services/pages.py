"""
Helpers shared by the page handlers.

Handlers only act on non-blank form values and always answer a POST with a
303 redirect back to the section's listing page.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import RedirectResponse


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only values."""
    return value is None or not value.strip()


def see_other(request: Request, route_name: str) -> RedirectResponse:
    """Redirect to a named route with 303 so the browser follows up with GET."""
    return RedirectResponse(request.url_for(route_name), status_code=status.HTTP_303_SEE_OTHER)
