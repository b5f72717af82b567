"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from wcbridge.config import Settings, get_settings
from wcbridge.errors import BridgeError, MissingParamsError
from wcbridge.runtime import BridgeRuntime, build_runtime

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    runtime: BridgeRuntime = app.state.runtime
    # Startup
    await runtime.start()
    yield
    # Shutdown
    await runtime.stop()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": message}``."""

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return _error(exc.status_code, str(exc))

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        # No body at all reads the same as an empty one
        if errors and all(tuple(e.get("loc", ())) == ("body",) for e in errors):
            missing = MissingParamsError({})
            return _error(missing.status_code, str(missing))

        details = "; ".join(
            f"{'.'.join(str(part) for part in e.get('loc', ()))}: {e.get('msg')}"
            for e in errors
        )
        return _error(400, f"Invalid request: {details}")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"{request.method} {request.url.path} failed")
        return _error(500, str(exc))


def create_app(
    settings: Optional[Settings] = None,
    runtime: Optional[BridgeRuntime] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings override (defaults to environment settings)
        runtime: Prebuilt runtime, e.g. with fake collaborators in tests
    """
    settings = settings or get_settings()
    runtime = runtime or build_runtime(settings)

    app = FastAPI(
        title="WalletConnect Custody Bridge",
        description="Bridge between WalletConnect pairing and a custodial signer",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.runtime = runtime

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routes
    from wcbridge.api.routes import health
    from wcbridge.web.controllers import orders_router, sessions_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(sessions_router)
    app.include_router(orders_router)

    # Built web UI, served last so API routes take precedence
    static_dir = Path(settings.static_dir)
    if settings.static_dir and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="ui")
        logger.info(f"Serving web UI from {static_dir}")

    return app
