"""
Portfolio Media API

Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portfolio.config import settings
from portfolio.logging_config import setup_logging
from portfolio.middleware import ErrorHandlerMiddleware
from portfolio.routes import contact, health, projects, skills, upload
from portfolio.services.cleanup_scheduler import start_cleanup_scheduler, stop_cleanup_scheduler
from portfolio.services.store_factory import (
    get_asset_store,
    get_contact_repository,
    get_project_repository,
    get_skill_repository,
    get_staging_area,
    reset_store,
)

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup: scratch and document directories, then the asset store
    get_staging_area().ensure()
    get_project_repository().ensure()
    get_skill_repository().ensure()
    get_contact_repository().ensure()
    get_asset_store()
    if settings.CLEANUP_ENABLED:
        start_cleanup_scheduler()
    yield
    # Shutdown
    stop_cleanup_scheduler()
    await reset_store()

app = FastAPI(
    title="Portfolio Media API",
    description="Portfolio projects, skills and contact messages with image upload to local disk or Cloudinary",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Register routers; upload routes before /{project_id}
app.include_router(upload.router, prefix="/api/projects", tags=["Upload"])
app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(skills.router, prefix="/api/skills", tags=["Skills"])
app.include_router(contact.router, prefix="/api/contact", tags=["Contact"])
app.include_router(health.router, prefix="/api", tags=["Health"])

# Locally stored images are served as static files
if settings.STORAGE_BACKEND == "local":
    app.mount(
        f"/{settings.LOCAL_PUBLIC_PREFIX.strip('/')}",
        StaticFiles(directory=settings.LOCAL_STORAGE_ROOT, check_dir=False),
        name="uploads",
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": "Portfolio Media API",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """
    Detailed health check endpoint.

    Returns service health status for monitoring and deployment health checks.
    """
    return {
        "status": "healthy",
        "storageBackend": settings.STORAGE_BACKEND,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "1.0.0",
    }
