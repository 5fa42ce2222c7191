# user_service/main.py

import time
import logging
from typing import Optional
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_service.api import users
from user_service.config import Settings, load_settings, configure_logging
from user_service.database import build_engine, build_session_factory, init_db


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Builds a fully wired application.
    The engine and session factory live on app.state and are handed to
    request handlers through the get_db dependency.
    """
    if settings is None:
        settings = load_settings()
    if engine is None:
        engine = build_engine(settings)

    init_db(engine)

    app = FastAPI(title="User Service")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Server is running! ✅"

    app.include_router(users.router)

    return app


# -------------------------------
# Error Handling & Request Logging
# -------------------------------

def register_handlers(app: FastAPI):

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        # Stays 500 when the handler raises
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method, request.url.path, status_code, elapsed_ms
            )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        # Only field locations; the raw input may contain a password
        fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        logger.info("Rejected request body for %s: %s", request.url.path, fields)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def run():
    settings = load_settings()
    configure_logging(settings)
    uvicorn.run(
        "user_service.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
