"""Pick an HTML or JSON shape for failure responses.

The kind is resolved once per request from the ``Accept`` header (see the
middleware in ``app.main``) and stored on ``request.state.response_kind``.
Handlers never inspect ``Accept`` themselves; they ask for a responder.
"""
import enum
from typing import Optional
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from app.errors import Forbidden, Unauthenticated

TOKEN_COOKIE = "token"

_HTML_TYPES = ("text/html", "application/xhtml+xml")
_JSON_TYPES = ("application/json",)


class ResponseKind(enum.Enum):
    HTML = "html"
    JSON = "json"


def _quality(params) -> float:
    for param in params:
        key, _, value = param.partition("=")
        if key.strip().lower() == "q":
            try:
                return float(value.strip())
            except ValueError:
                return 0.0
    return 1.0


def resolve_response_kind(accept: Optional[str]) -> ResponseKind:
    """HTML only when the client names an HTML type at least as strongly as JSON.

    A missing header, ``*/*`` or anything else falls back to JSON.
    """
    if not accept:
        return ResponseKind.JSON
    html_q = 0.0
    json_q = 0.0
    for item in accept.split(","):
        media, *params = item.split(";")
        media = media.strip().lower()
        q = _quality(params)
        if media in _HTML_TYPES:
            html_q = max(html_q, q)
        elif media in _JSON_TYPES:
            json_q = max(json_q, q)
    if html_q > 0 and html_q >= json_q:
        return ResponseKind.HTML
    return ResponseKind.JSON


def response_kind(request: Request) -> ResponseKind:
    kind = getattr(request.state, "response_kind", None)
    if kind is None:
        kind = resolve_response_kind(request.headers.get("accept"))
        request.state.response_kind = kind
    return kind


def landing_page(role) -> str:
    return f"/{role.value}"


def with_notice(path: str, notice: str) -> str:
    return f"{path}?notice={quote(notice)}"


class JsonResponder:
    def unauthenticated(self, exc: Unauthenticated):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    def forbidden(self, exc: Forbidden):
        return JSONResponse(status_code=403, content={"message": "Access denied"})


class HtmlResponder:
    def __init__(self, cookie_secure: bool = True, cookie_samesite: str = "none"):
        self.cookie_secure = cookie_secure
        self.cookie_samesite = cookie_samesite

    def unauthenticated(self, exc: Unauthenticated):
        response = RedirectResponse(with_notice("/", "login_required"), status_code=302)
        if exc.token_presented:
            # a rejected cookie is removed
            response.delete_cookie(
                TOKEN_COOKIE,
                httponly=True,
                secure=self.cookie_secure,
                samesite=self.cookie_samesite,
            )
        return response

    def forbidden(self, exc: Forbidden):
        return RedirectResponse(
            with_notice(landing_page(exc.identity.role), "access_denied"),
            status_code=303,
        )


def responder_for(request: Request):
    return request.app.state.responders[response_kind(request)]
