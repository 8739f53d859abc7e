import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import AccessControlError, ScopeViolation
from core.logging_config import logger, security_logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.access import router as access_router
from routers.hierarchy import router as hierarchy_router
from routers.panchayaths import router as panchayaths_router
from routers.notes import router as notes_router
from routers.tasks import router as tasks_router
from routers.teams import router as teams_router
from routers.team_permissions import router as team_permissions_router
from routers.permissions import router as permissions_router
from routers.registrations import router as registrations_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Panchayath Admin API: permission resolution and scoped data for the field console",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup logging
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info("🚀 Starting Panchayath Admin API")
        if settings.ENV == "production":
            validate_config_on_startup()
        for route in app.routes:
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            logger.debug(f"{methods:10s} {getattr(route, 'path', '')}")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(AccessControlError)
    async def handle_access_error(request: Request, exc: AccessControlError):
        if isinstance(exc, ScopeViolation):
            security_logger.error(f"Blocked at {request.url} — {exc.message}")
        elif exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code} at {request.url} — {exc.message} ({exc.detail})")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url} — {exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------

    # Access Control
    app.include_router(access_router)
    app.include_router(permissions_router)
    app.include_router(team_permissions_router)

    # Organization data
    app.include_router(hierarchy_router)
    app.include_router(panchayaths_router)
    app.include_router(notes_router)
    app.include_router(tasks_router)
    app.include_router(teams_router)
    app.include_router(registrations_router)

    # Health
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
