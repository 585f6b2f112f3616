"""FastAPI application for the relief coordination API."""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from relief_hub import __version__
from relief_hub.api.errors import register_error_handlers
from relief_hub.api.routes.auth_routes import router as auth_router
from relief_hub.api.routes.auth_routes import users_router
from relief_hub.api.routes.camp_routes import router as camp_router
from relief_hub.api.routes.help_request_routes import router as help_request_router
from relief_hub.api.routes.item_routes import router as item_router
from relief_hub.api.routes.volunteer_club_routes import memberships_router
from relief_hub.api.routes.volunteer_club_routes import router as volunteer_club_router
from relief_hub.config import API_PREFIX, CORS_ORIGINS
from relief_hub.db import init_db
from relief_hub.utils.logger import get_logger, log_context

logger = get_logger("relief_hub.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Create tables and seed the catalog before serving."""
    init_db()
    logger.info("api.lifespan.started", version=__version__)
    yield
    logger.info("api.lifespan.stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Relief Hub API", version=__version__, lifespan=_lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        with log_context(request_id=request_id):
            response = await call_next(request)
            logger.debug(
                "api.request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
        response.headers["x-request-id"] = request_id
        return response

    register_error_handlers(app)

    for router in (
        users_router,
        auth_router,
        help_request_router,
        camp_router,
        volunteer_club_router,
        memberships_router,
        item_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
