"""
FastAPI Application Entry Point
Main application with all routes and middleware
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from vetclinic.api.v1 import router as api_v1_router
from vetclinic.core.config import settings
from vetclinic.core.exceptions import AppException
from vetclinic.core.logging import get_logger, setup_logging
from vetclinic.db import session as db_session
from vetclinic.models.common import HealthResponse
from vetclinic.monitoring import RequestTimer

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan management"""
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug: {settings.DEBUG}")

    # Startup
    await db_session.init_db()
    logger.info("All services initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await db_session.close_db()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Veterinary clinic records with role-gated access and versioned, shareable documents",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def route_template(request: Request) -> str:
    """Path template of the matched route, so ids and share tokens stay out of labels"""
    # Routing leaves the matched endpoint route in the scope
    route = request.scope.get("route")
    if route is not None:
        return getattr(route, "path_format", None) or getattr(route, "path", "unmatched")

    # Mounted and included routers carry no path of their own
    for route in request.app.routes:
        path = getattr(route, "path", None)
        if path is None:
            continue
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return path
    return "unmatched"


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    if not settings.ENABLE_METRICS:
        return await call_next(request)

    with RequestTimer(request.method, "unmatched") as timer:
        try:
            response = await call_next(request)
            timer.status = str(response.status_code)
        finally:
            timer.endpoint = route_template(request)
    return response


# Exception Handlers
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle application-specific exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details,
                "timestamp": exc.timestamp,
            }
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": str(exc.detail).lower().replace(" ", "_"),
                "message": str(exc.detail),
                "details": {},
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "validation_error",
                "message": "Invalid request parameters",
                "details": {"errors": jsonable_encoder(exc.errors())},
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        },
    )


# Include routers
app.include_router(api_v1_router, prefix="/api/v1")


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "docs_url": "/docs" if settings.DEBUG else None,
    }


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    health_status = HealthResponse(
        status="healthy",
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        services={},
    )

    try:
        async with db_session.async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        health_status.services["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status.status = "unhealthy"
        health_status.services["database"] = f"unhealthy: {str(e)}"

    return health_status


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vetclinic.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
