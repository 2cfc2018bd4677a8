"""
WhatsCommerce — Dashboard API

FastAPI backend for the WhatsApp-commerce admin dashboard.
Authenticated dashboard endpoints live at /admin/*.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from whatscommerce.config import settings
from whatscommerce.routers import admin as admin_router
from whatscommerce.routers import public

# =============================================================================
# LOGGING
# =============================================================================

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]
    """Application lifespan handler."""
    logger.info("Starting %s in %s mode", settings.app_name, settings.environment)
    if not settings.scope_products_by_owner:
        logger.warning("Products are NOT scoped by owner: every account sees all products")
    yield
    logger.info("Shutting down %s", settings.app_name)
    from whatscommerce.services.records import close_supabase

    await close_supabase()


# =============================================================================
# APP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="WhatsCommerce — dashboard API for the WhatsApp shop assistant",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# =============================================================================
# MIDDLEWARE: path-based CORS
# =============================================================================
# Dashboard endpoints: restricted origins with credentials
# Public endpoints: wildcard origin, read-only


class PathBasedCORSMiddleware(BaseHTTPMiddleware):
    """Apply different CORS policies based on request path.

    /admin/* → restricted origins (the dashboard) with credentials
    Everything else → wildcard origin, GET only
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.admin_origins = [
            o.strip() for o in settings.admin_cors_origins.split(",") if o.strip()
        ]

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[no-untyped-def, override]
        origin = request.headers.get("origin", "")
        path = request.url.path

        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)

        if path.startswith("/admin"):
            if origin in self.admin_origins:
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers["Access-Control-Allow-Credentials"] = "true"
                response.headers["Access-Control-Allow-Methods"] = (
                    "GET, POST, PUT, PATCH, DELETE, OPTIONS"
                )
                response.headers["Access-Control-Allow-Headers"] = (
                    "Authorization, Content-Type"
                )
                response.headers["Access-Control-Max-Age"] = "86400"
        else:
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"

        return response


app.add_middleware(PathBasedCORSMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Log all requests for debugging."""
    logger.debug("%s %s", request.method, request.url.path)
    response = await call_next(request)
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(public.router, tags=["Public"])
app.include_router(admin_router.router, prefix="/admin", tags=["Admin"])


# =============================================================================
# ROOT / HEALTH
# =============================================================================


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"service": settings.app_name, "status": "ok"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check."""
    return {"status": "healthy", "service": settings.app_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
