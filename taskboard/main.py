# taskboard/main.py
"""
Taskboard API - application wiring.
"""
from contextlib import asynccontextmanager
from typing import List

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

# Rate limiting
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from taskboard.api import auth, health, tasks
from taskboard.api.errors import register_error_handlers
from taskboard.core.config import settings
from taskboard.core.logging import log, log_section
from taskboard.db import connect_db, disconnect_db
from taskboard.lib.monitoring import register_monitoring


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    log_section("DB", f"{settings.PROJECT_NAME} {settings.VERSION} starting")
    await connect_db()
    try:
        yield
    finally:
        await disconnect_db()


# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)
register_monitoring(app)

if settings.BACKEND_CORS_ORIGINS == ["*"] and not settings.DEBUG:
    log("SECURITY", "Using allow_origins=['*'] - consider setting BACKEND_CORS_ORIGINS in production")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate Limiting - per client address, e.g. RATE_LIMIT="50/minute"
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
if settings.RATE_LIMIT_ENABLED:
    log("SECURITY", f"Rate limiting enabled: {settings.RATE_LIMIT}")


# ---------------------------------------------------------------------------
# API ROUTES
# ---------------------------------------------------------------------------

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(tasks.router)


def route_audit(application: FastAPI) -> List[str]:
    """'METHODS path' for every documented route, read from the OpenAPI schema."""
    paths = application.openapi().get("paths", {})
    return [
        f"{', '.join(method.upper() for method in sorted(operations))} {path}"
        for path, operations in paths.items()
    ]


for line in route_audit(app):
    log("ROUTES", line)


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "taskboard.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
