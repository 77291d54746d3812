from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rmp.api.error_handling import register_exception_handlers
from rmp.api.middleware.access_log import AccessLogMiddleware
from rmp.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from rmp.api.routes.auth import router as auth_router
from rmp.api.routes.health import router as health_router
from rmp.api.routes.meals import router as meals_router
from rmp.api.routes.metrics import router as metrics_router
from rmp.api.routes.restaurants import router as restaurants_router
from rmp.infrastructure.config import load_env_file
from rmp.infrastructure.db.session import ping_database
from rmp.infrastructure.observability.logging_config import configure_logging
from rmp.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("rmp.api")


def _app_env() -> str:
    return os.getenv("APP_ENV", "dev").lower()


def _cors_allow_origins() -> list[str]:
    if _app_env() in {"dev", "test"}:
        return ["*"]

    # Outside dev/test only the configured allowlist is served.
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    if os.getenv("DATABASE_URL"):
        logger.info("startup", extra={"reason": f"database_ready={ping_database(timeout_seconds=2.0)}"})
    else:
        logger.warning("startup", extra={"reason": "DATABASE_URL is not set"})
    yield
    logger.info("shutdown")


def create_app() -> FastAPI:
    load_env_file()
    configure_logging()

    app = FastAPI(title="RMP Backend", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)
    for router in (health_router, metrics_router, auth_router, restaurants_router, meals_router):
        app.include_router(router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
