"""
Server-side HTML rendering.

Pages are Jinja2 templates under templates/, all extending base.html, which
loads the stylesheet and the client script from /static.
"""

import os
from fastapi import Request
from fastapi.templating import Jinja2Templates

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
TEMPLATES_DIR = os.path.join(PACKAGE_DIR, "templates")
STATIC_DIR = os.path.join(PACKAGE_DIR, "static")

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def render(request: Request, template_name: str, title: str, status_code: int = 200, **context):
    """Render a page template with its title and any extra context."""
    return templates.TemplateResponse(
        request,
        template_name,
        {"title": title, **context},
        status_code=status_code,
    )


def render_not_found(request: Request, title: str = "Page Not Found"):
    return render(request, "404.html", title, status_code=404)
