"""Server-rendered pages.

The browser carries its token in the ``token`` cookie, so these routes use the
same guards as the JSON API. Anonymous-only pages (login, register) bounce a
visitor who already holds a valid token back to their own landing page.
"""
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.dependencies import current_identity, require_role
from app.models.user import Role
from app.utils.auth import Identity
from app.utils.negotiation import landing_page, with_notice

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(tags=["pages"])

# Only messages from this table reach the templates, never the raw query value.
NOTICES = {
    "already_logged_in": "A user is already logged in. Please logout first.",
    "logout_first": "Please logout before registering a new user.",
    "access_denied": "Access denied",
    "login_required": "Please log in to continue.",
}


def _page(request: Request, name: str, notice: Optional[str], **context):
    context["notice"] = NOTICES.get(notice or "")
    return templates.TemplateResponse(request, name, context)


def _bounce(identity: Identity, notice: str) -> RedirectResponse:
    return RedirectResponse(with_notice(landing_page(identity.role), notice), status_code=303)


@router.get("/", response_class=HTMLResponse)
def login_page(request: Request, notice: Optional[str] = None):
    identity = current_identity(request)
    if identity is not None:
        return _bounce(identity, "already_logged_in")
    return _page(request, "login.html", notice)


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request, notice: Optional[str] = None):
    identity = current_identity(request)
    if identity is not None:
        return _bounce(identity, "logout_first")
    return _page(request, "register.html", notice)


@router.get("/admin", response_class=HTMLResponse)
def admin_page(request: Request, notice: Optional[str] = None, identity: Identity = Depends(require_role(Role.admin))):
    return _page(request, "admin.html", notice, identity=identity)


@router.get("/user", response_class=HTMLResponse)
def user_page(request: Request, notice: Optional[str] = None, identity: Identity = Depends(require_role(Role.user))):
    return _page(request, "user.html", notice, identity=identity)
