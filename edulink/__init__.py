# edulink/__init__.py
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import Settings, settings as default_settings
from .core.database import build_engine, close_db, init_db
from .core.errors import BaseAPIError, get_error_message
from .core.logging import logging
from .middleware.request_id import RequestIDMiddleware
from .routes import diagnostics_router
from .services.identity_store import IdentityStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[IdentityStore] = None) -> FastAPI:
    """
    Build the diagnostics application.

    When no store is passed, one is created from ``settings.DATABASE_URL`` at
    startup and its engine disposed at shutdown. A store passed in is owned
    by the caller.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        description="Identity and relationship diagnostics for the education platform",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.engine = None

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    # Include routers
    app.include_router(diagnostics_router, prefix="/api/v1/diagnostics", tags=["Diagnostics"])

    @app.exception_handler(BaseAPIError)
    async def api_error_handler(request: Request, exc: BaseAPIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
        return JSONResponse(
            status_code=exc.status_code,
            content=get_error_message(exc, include_details=True),
        )

    @app.on_event("startup")
    async def startup_event():
        if app.state.store is None:
            engine = build_engine(settings)
            if settings.DEBUG:
                await init_db(engine)
            app.state.engine = engine
            app.state.store = IdentityStore.from_engine(engine)
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.engine is not None:
            await close_db(app.state.engine)
            app.state.engine = None
            app.state.store = None
        logger.info("Application shutdown completed")

    return app
