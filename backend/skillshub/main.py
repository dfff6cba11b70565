"""
FastAPI application entry point for Salone SkillsHub.

This is the main app that:
- Initializes FastAPI with CORS
- Registers all API routers
- Maps every error to the {"error", "kind"} envelope
- Creates tables and seeds reference data on startup (when configured)
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skillshub import database
from skillshub.config import settings
from skillshub.errors import kind_for_status
from skillshub.services.seed import seed_reference_data
# Import API routers
from skillshub.api import (
    auth,
    jobs,
    employer,
    applications,
    seeker,
    notifications,
    freelancers,
    talents,
    profile,
    files,
    reference,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    On startup: create tables and seed lookup data if enabled
    On shutdown: Close database connections gracefully
    """
    # Startup
    logger.info("Starting Salone SkillsHub API...")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.create_tables_on_startup:
        await database.create_tables()
    if settings.seed_reference_data:
        async with database.AsyncSessionLocal() as session:
            await seed_reference_data(session)

    yield

    # Shutdown
    logger.info("Shutting down Salone SkillsHub API...")
    await database.engine.dispose()


# Initialize FastAPI app
app = FastAPI(
    title="Salone SkillsHub API",
    description="Job marketplace connecting Sierra Leonean talent with employers",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:3000",  # Local development
]

if settings.allowed_origins:
    allowed_origins.extend(o.strip() for o in settings.allowed_origins.split(',') if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR ENVELOPE
# ============================================================

def error_response(status_code: int, detail, headers=None) -> JSONResponse:
    """Build `{"error": ..., "kind": ...}`; dict details add extra keys (e.g. requiresResume)."""
    if isinstance(detail, dict):
        body = dict(detail)
        body.setdefault("error", "Request failed")
    else:
        body = {"error": str(detail)}
    body["kind"] = kind_for_status(status_code).value
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    logger.debug(f"Validation failed for {request.url.path}: {errors}")
    return error_response(400, f"{location}: {message}" if location else message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(500, "Internal server error")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": "Salone SkillsHub API",
        "version": "1.0.0",
    }


# Register API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(employer.router, prefix="/api/employer", tags=["employer"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(seeker.router, prefix="/api/seeker", tags=["seeker"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(freelancers.router, prefix="/api/freelancers", tags=["freelancers"])
app.include_router(talents.router, prefix="/api/talents", tags=["talents"])
app.include_router(profile.router, prefix="/api/profile", tags=["profile"])
app.include_router(files.router, prefix="/api", tags=["files"])
app.include_router(reference.router, prefix="/api", tags=["reference"])
