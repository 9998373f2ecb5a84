from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from login_service.base_microservice import BaseMicroservice
from login_service.config import ServiceConfig
from login_service.auth.credentials import CredentialStore
from login_service.auth.directory import CustomerDirectory
from login_service.auth.router import router as auth_router, start_auth_service

VERSION = "0.1.0"

base_service = BaseMicroservice("main")


def create_app(
    config: Optional[ServiceConfig] = None,
    credential_store: Optional[CredentialStore] = None,
    directory: Optional[CustomerDirectory] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Components passed in are used as-is and left open on shutdown; the
    lifespan creates the rest from config.
    """
    config = config or ServiceConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup: load credentials and open the downstream client.
        Shutdown: close what startup opened.
        """
        created = await start_auth_service(app, config)
        base_service.log_event("service.startup", {"service": "main", "port": config.port})
        try:
            yield
        finally:
            for component in created:
                await component.aclose()
            base_service.log_event("service.shutdown", {"service": "main"})

    app = FastAPI(
        title="Login Service",
        description="Basic auth login and customer registration gateway",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.credential_store = credential_store
    app.state.directory = directory

    app.include_router(auth_router)

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint returning API information."""
        return base_service.mcp_response(
            message="Login Service",
            data={"name": "Login Service", "version": VERSION, "services": ["auth"]},
        )

    @app.get("/health", tags=["health"])
    async def health_check():
        """Service health check."""
        store = app.state.credential_store
        return base_service.mcp_response(
            message="System health",
            data={
                "status": "ok",
                "credentials": len(store) if store is not None else 0,
                "customer_service_url": config.customer_service_url,
            },
        )

    return app

