"""
Aldrich Sports League API Server

FastAPI server behind the league website: public page content, events,
sports, and the member area (profile, teams, friends, sign-ups, registration).
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from aldrich_site.api.routes import router, limiter as routes_limiter
from aldrich_site.api.public_routes import public_router
from aldrich_site.api.auth_dependencies import SIGN_IN_PATH, SignInRequired
from aldrich_site.database import db
from aldrich_site.database.seed_site import seed_site

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting up Aldrich Sports League API...")

    if not db.is_configured():
        logger.warning("DATABASE_URL is not set; serving fallback content only")

    # Initialize database (create tables if they don't exist)
    # This is a fallback for tables that might not be in migrations yet
    try:
        await db.init_database()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        # Don't raise - the site still serves fallback content

    # Seed sports and the starter registration program
    try:
        await seed_site()
    except Exception as e:
        logger.error(f"Failed to seed site data: {e}", exc_info=True)

    yield  # App is running

    logger.info("Shutting down Aldrich Sports League API...")
    if db.engine is not None:
        await db.engine.dispose()


app = FastAPI(
    title="Aldrich Sports League API",
    description="API for the Aldrich Sports League website and member area",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup rate limiter
app.state.limiter = routes_limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(SignInRequired)
async def sign_in_required_handler(request: Request, exc: SignInRequired):
    """Member actions without a session send the visitor to the sign-in page."""
    return JSONResponse(
        status_code=401,
        content={"detail": exc.detail, "redirect_to": SIGN_IN_PATH},
        headers={"WWW-Authenticate": "Bearer"},
    )


# CORS origins come from ALLOWED_ORIGINS (comma-separated)
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)
app.include_router(public_router)


@app.get("/api/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Service status and whether the hosted backend is configured
    """
    return {
        "status": "healthy",
        "message": "API is running",
        "backend_configured": db.is_configured(),
    }


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
