import logging
import time
from datetime import timedelta
from typing import Optional

import fastapi
from fastapi import FastAPI, Request

from app.config import Settings, load_settings
from app.database import init_schema, make_engine, make_session_factory
from app.errors import Forbidden, Unauthenticated
from app.routers import auth, dashboard, pages
from app.utils.auth import PasswordHasher, TokenService
from app.utils.negotiation import HtmlResponder, JsonResponder, ResponseKind, resolve_response_kind, responder_for

logger = logging.getLogger("taskgate.api")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with every collaborator injected from ``settings``."""
    settings = settings or load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    engine = make_engine(settings.database_url)
    init_schema(engine)

    app = FastAPI(title="TaskGate")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        settings.secret_key,
        algorithm=settings.algorithm,
        lifetime=timedelta(hours=settings.token_expire_hours),
    )
    app.state.responders = {
        ResponseKind.HTML: HtmlResponder(cookie_secure=settings.cookie_secure, cookie_samesite=settings.cookie_samesite),
        ResponseKind.JSON: JsonResponder(),
    }

    app.include_router(auth.router)
    app.include_router(dashboard.router)
    app.include_router(pages.router)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    @app.middleware("http")
    async def negotiate_and_log(request: Request, call_next):
        request.state.response_kind = resolve_response_kind(request.headers.get("accept"))
        start = time.perf_counter()
        # unhandled errors propagate past call_next and end as a 500
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            ms = (time.perf_counter() - start) * 1000
            logger.info("%s %s %d %.1fms", request.method, request.url.path, status_code, ms)

    @app.exception_handler(Unauthenticated)
    async def unauthenticated_handler(request: Request, exc: Unauthenticated):
        return responder_for(request).unauthenticated(exc)

    @app.exception_handler(Forbidden)
    async def forbidden_handler(request: Request, exc: Forbidden):
        return responder_for(request).forbidden(exc)

    # Generic error handler to return JSON errors for unexpected exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return fastapi.responses.JSONResponse(status_code=500, content={"detail": "Internal server error"})

    logger.info("TaskGate ready (database=%s)", engine.url.render_as_string(hide_password=True))
    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
