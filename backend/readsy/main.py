"""
FastAPI application entry point for the Readsy API.

This module initializes the FastAPI app with middleware, CORS, logging,
and registers all API routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from readsy.config import settings
from readsy.core.limiter import limiter
from readsy.database import SessionLocal, init_db
from readsy.logger import setup_logging
from readsy.routers import auth, gamification, leaderboard, users
from readsy.services.achievement_service import achievement_service

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting Readsy API in {settings.ENVIRONMENT} mode")
    init_db()
    logger.info("Database initialized successfully")

    db = SessionLocal()
    try:
        achievement_service.ensure_defaults(db)
    finally:
        db.close()

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI app
app = FastAPI(
    title="Readsy API",
    description="Authentication, gamification and leaderboard API for Readsy",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Rate limit exceeded. Please try again later."},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
prefix = settings.API_V1_PREFIX
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{prefix}/users", tags=["users"])
app.include_router(gamification.router, prefix=f"{prefix}/gamification", tags=["gamification"])
app.include_router(leaderboard.router, prefix=f"{prefix}/leaderboard", tags=["leaderboard"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Readsy API", "status": "running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "readsy.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
