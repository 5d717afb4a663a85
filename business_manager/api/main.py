"""FastAPI application factory"""

from contextlib import asynccontextmanager
from datetime import date
from typing import Callable
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from business_manager.api.middleware import RequestIDMiddleware, MetricsMiddleware
from business_manager.api.v1 import auth, collections, dashboard, emis
from business_manager.commands import CommandHandlers
from business_manager.infrastructure.clients.identity import IdentityClient
from business_manager.infrastructure.observability.logging import setup_logging
from business_manager.infrastructure.store.documents import DocumentStore
from business_manager.presentation.adapter import LatestStatePresenter
from business_manager.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(
    identity: IdentityClient | None = None,
    store: DocumentStore | None = None,
    presenter: LatestStatePresenter | None = None,
    clock: Callable[[], date] = date.today,
) -> FastAPI:
    """Create and configure FastAPI application"""
    identity = identity or IdentityClient()
    store = store or DocumentStore()
    presenter = presenter or LatestStatePresenter()
    commands = CommandHandlers(identity, store, presenter, clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Tear down the live subscriptions of a still-open session
        if commands.session is not None:
            await commands.sign_out()
        store.dispose()

    app = FastAPI(
        title="Business Manager",
        description="Collections and EMI tracker with live-synced dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.commands = commands
    app.state.presenter = presenter

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(collections.router, prefix="/v1", tags=["collections"])
    app.include_router(emis.router, prefix="/v1", tags=["emis"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app
