"""
Main FastAPI application for the GroupTherapy backend.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from grouptherapy.config import Settings, settings as default_settings
from grouptherapy.middleware import CorrelationIdMiddleware, NoCacheMiddleware
from grouptherapy.services.auth_service import AuthService
from grouptherapy.services.seeding import ensure_initial_admin, seed_demo_content
from grouptherapy.services.session_cleanup import SessionCleanupService
from grouptherapy.storage import StorageBackend, create_storage
from grouptherapy.utils.errors import register_exception_handlers
from grouptherapy.utils.logger import setup_logger
from grouptherapy.api import analytics, auth, content, radio, status


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    settings: Settings = app.state.settings
    storage: StorageBackend = app.state.storage

    # Startup
    setup_logger(settings)
    logger.info(f"Starting {settings.app_name} ({settings.environment}, {settings.storage_backend} storage)...")

    await storage.initialize()

    await ensure_initial_admin(
        storage,
        app.state.auth_service,
        settings.initial_admin_username,
        settings.initial_admin_password,
    )
    if settings.seed_demo_content:
        await seed_demo_content(storage)

    cleanup = SessionCleanupService(storage)
    cleanup_task = asyncio.create_task(cleanup.run_forever(), name="session_cleanup")
    logger.info("Session cleanup task started (runs hourly)")

    logger.info(f"{settings.app_name} started successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")

    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass

    await storage.close()
    logger.info(f"{settings.app_name} shut down complete")


def create_app(settings: Optional[Settings] = None, storage: Optional[StorageBackend] = None) -> FastAPI:
    """
    Build the application around one storage handle.

    Tests pass their own settings and storage; production uses the values
    from the environment.
    """
    settings = settings or default_settings
    storage = storage or create_storage(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Record label site and admin dashboard API",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.auth_service = AuthService(storage, bcrypt_rounds=settings.auth.bcrypt_rounds)

    register_exception_handlers(app, production=settings.is_production)

    # Last added runs first: CORS, then correlation ID, then cache headers
    app.add_middleware(NoCacheMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(status.router)
    app.include_router(auth.router)
    for router in content.routers:
        app.include_router(router)
    app.include_router(radio.router)
    app.include_router(analytics.router)

    return app


app = create_app()
