"""Request guards shared by the API and page routers.

``authenticate`` turns the token carried by a request into an ``Identity``;
``require_role`` builds a guard on top of it. Because the role guard declares
``authenticate`` as its own dependency, FastAPI always runs them in order.
"""
import logging
from typing import Optional

from fastapi import Depends, Request

from app.errors import Forbidden, Unauthenticated
from app.models.user import Role
from app.utils.auth import Identity, VerificationError
from app.utils.negotiation import TOKEN_COOKIE

logger = logging.getLogger("taskgate.auth")


def extract_token(request: Request) -> Optional[str]:
    """Return token from Authorization header (Bearer ...) or the token cookie.
    Header has precedence.
    """
    authorization = request.headers.get("authorization")
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return request.cookies.get(TOKEN_COOKIE) or None


def authenticate(request: Request) -> Identity:
    token = extract_token(request)
    if not token:
        raise Unauthenticated(401, "Authorization header missing")

    try:
        identity = request.app.state.tokens.verify(token)
    except VerificationError as exc:
        # the reason stays in the log, the client only learns the token was rejected
        logger.info("rejected token on %s: %s (%s)", request.url.path, type(exc).__name__, exc)
        raise Unauthenticated(403, "Invalid token", token_presented=True)

    request.state.identity = identity
    return identity


def current_identity(request: Request) -> Optional[Identity]:
    """Soft variant of ``authenticate`` for pages open to anonymous visitors."""
    token = extract_token(request)
    if not token:
        return None
    try:
        return request.app.state.tokens.verify(token)
    except VerificationError:
        return None


def require_role(required_role: Role):
    def role_gate(request: Request, identity: Identity = Depends(authenticate)) -> Identity:
        if identity.role != required_role:
            logger.warning(
                "user %s with role %s denied on %s (needs %s)",
                identity.id,
                identity.role.value,
                request.url.path,
                required_role.value,
            )
            raise Forbidden(identity, required_role)
        return identity

    role_gate.__name__ = f"require_{required_role.value}"
    return role_gate
