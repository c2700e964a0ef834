"""
Tenant Notes - FastAPI Backend
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenant_notes.config import Settings, settings as default_settings
from tenant_notes.database import NoteStoreProvider, TransientStorageError
from tenant_notes.logging import setup_logging, get_logger
from tenant_notes.routers import notes

logger = get_logger('main')


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(debug=app_settings.DEBUG)
        logger.info("Starting Tenant Notes API")

        provider = NoteStoreProvider(app_settings)
        # Build now so a misconfigured backend stops startup.
        store = provider.get()
        app.state.note_store_provider = provider
        logger.info(f"Note store ready ({store.backend.value})")

        yield

        logger.info("Shutting down application")

    app = FastAPI(
        title="Tenant Notes API",
        description="Multi-tenant notes with pluggable storage",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(notes.router, prefix="/api/notes", tags=["Notes"])

    @app.exception_handler(TransientStorageError)
    async def storage_unavailable(request: Request, exc: TransientStorageError):
        logger.warning(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=503,
            content={"detail": "Storage temporarily unavailable"},
        )

    @app.get("/health")
    async def health_check():
        provider = getattr(app.state, "note_store_provider", None)
        return {
            "status": "healthy",
            "service": "tenant-notes",
            "store": provider.get().backend.value if provider else None,
        }

    @app.get("/")
    async def root():
        return {
            "name": "Tenant Notes API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app
