# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the FundYourIdea API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import FundYourIdeaException, fundyouridea_exception_handler
from app.routers import files, health, images, storage, validation
from app.auth import routes as auth_routes
from core.context import AppContext

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: Build every client and service from settings (fails fast on
      bad configuration)
    - Shutdown: Close the HTTP client
    """
    logger.info(f"Starting FundYourIdea API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    context = AppContext.build(settings)
    app.state.context = context

    yield

    logger.info("Shutting down FundYourIdea API")
    context.close()


# Create FastAPI application
app = FastAPI(
    title="FundYourIdea API",
    description="""
## Idea Storage & Validation API

Stores the documents and images attached to crowdfunding ideas and runs the
AI validation of an idea.

### Storage Pipeline

1. **Build path** - `idea-files/{ideaId}-{idea-name}/{category}/{file}`
2. **Sign** - Short-lived upload URL (private ACL)
3. **Upload** - PUT the bytes to the signed URL
4. **Record** - Metadata row in `idea_files` / `idea_images`
5. **View** - Privacy check, then a short-lived signed download URL

Private files are only ever served to the idea's creator.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Identity carried by the caller's Supabase token",
        },
        {
            "name": "Storage",
            "description": "Signed upload/download URLs for storage paths",
        },
        {
            "name": "Files",
            "description": "Idea documents grouped by category",
        },
        {
            "name": "Images",
            "description": "Idea image gallery",
        },
        {
            "name": "Validation",
            "description": "AI validation of ideas",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(FundYourIdeaException)
async def handle_fundyouridea_exception(request: Request, exc: FundYourIdeaException):
    """Handle custom FundYourIdea exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return await fundyouridea_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(storage.router, prefix="/api/v1/storage", tags=["Storage"])
app.include_router(files.router, prefix="/api/v1", tags=["Files"])
app.include_router(images.router, prefix="/api/v1", tags=["Images"])
app.include_router(validation.router, prefix="/api/v1", tags=["Validation"])


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "FundYourIdea API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
