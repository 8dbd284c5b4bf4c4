from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
from tenant_access.adapter.services.http_tenant_directory import create_http_client
from tenant_access.app.services.event_bus import EventBus
from tenant_access.app.services.session_state import SessionRegistry
from tenant_access.app.services.tenant_directory import UpstreamApiError
from tenant_access.app.use_cases.context import CoreTenant
from tenant_access.domain.route_policy import RoutePolicy
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_upstream_error(request: Request, exc: UpstreamApiError):
    error_dict = {"code": "UPSTREAM_UNAVAILABLE", "message": exc.message}
    logger.error(f"Upstream error ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": error_dict})


def create_app(ApplicationConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from tenant_access.depends import init_db

        await init_db()
        yield
        await app.state.http_client.aclose()

    app = FastAPI(title="Tenant Access API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Session-scoped state lives on the app, never in module globals
    app.state.sessions = SessionRegistry(outbox_size=ApplicationConfig.EVENT_OUTBOX_SIZE)
    app.state.events = EventBus()
    app.state.events.subscribe(None, app.state.sessions.record)
    app.state.route_policy = RoutePolicy()
    app.state.core_tenant = CoreTenant(
        id=ApplicationConfig.CORE_TENANT_ID,
        slug=ApplicationConfig.CORE_TENANT_SLUG,
        name=ApplicationConfig.CORE_TENANT_NAME,
    )
    app.state.fallback_path = ApplicationConfig.ROUTE_GUARD_FALLBACK_PATH
    app.state.login_path = ApplicationConfig.LOGIN_PATH
    app.state.http_client = create_http_client(
        ApplicationConfig.UPSTREAM_API_URL, ApplicationConfig.UPSTREAM_TIMEOUT_SECONDS
    )

    from tenant_access.api.routes import access, health_check, tenant_context

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(
        tenant_context.router, prefix=ApplicationConfig.API_PREFIX, tags=["Tenant Context"]
    )
    app.include_router(access.router, prefix=ApplicationConfig.API_PREFIX, tags=["Access"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(UpstreamApiError, handle_upstream_error)

    return app
