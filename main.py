from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Core
from core.config import settings
from core.logging_config import logger
from core.notifications import run_deadline_check
from core.scheduler import start_scheduler, stop_scheduler

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.session import router as session_router
from routers.permissions import router as permissions_router

from routers.projects import router as projects_router
from routers.stages import router as stages_router
from routers.billing import router as billing_router
from routers.team import router as team_router
from routers.dashboard import router as dashboard_router
from routers.studio import router as studio_router

from routers.health import router as health_router
from routers.public import router as public_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Architecture studio project dashboard: projects, stages, team, billing and role permissions",
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
    # Startup / shutdown
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"🚀 Starting {settings.PROJECT_NAME} ({settings.ENV})")
        for route in app.routes:
            methods = ",".join(getattr(route, "methods", None) or [])
            logger.debug(f"➡️ {methods:10s} {route.path}")

        run_deadline_check()

        if settings.ENABLE_SCHEDULER:
            start_scheduler()

    @app.on_event("shutdown")
    async def on_shutdown():
        stop_scheduler()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
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

    # Session + access control
    app.include_router(session_router)
    app.include_router(permissions_router)

    # Core Data Routers
    app.include_router(projects_router)
    app.include_router(stages_router)
    app.include_router(billing_router)
    app.include_router(team_router)
    app.include_router(dashboard_router)
    app.include_router(studio_router)

    # Health
    app.include_router(health_router)

    # Public portfolio
    app.include_router(public_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"service": settings.PROJECT_NAME, "docs": "/docs"}

    return app


# Create the global FastAPI instance
app = create_app()
