"""
FastAPI application entry point.

Configures the API with all routes, middleware, and error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatauth.config import load_config
from chatauth.auth import AuthError, TokenError

from .v1.router import router as v1_router
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

config = load_config()

# Configure logging
logging.basicConfig(
    level=config.server.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting chat auth API...")

    # Fails fast on a missing or weak signing secret
    get_services()
    logger.info("Services initialized")

    yield

    logger.info("Shutting down...")
    close_services()


app = FastAPI(
    title="Chat Auth API",
    description="Signup, login and cookie sessions for the chat app",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware; credentials are needed for the session cookie
if config.server.origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )


@app.exception_handler(AuthError)
async def auth_exception_handler(request: Request, exc: AuthError):
    # Internal reason goes to the log only
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, TokenError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.public_detail},
        headers=headers
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Health check
@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "chat-auth-api"}


# Include API v1 routes
app.include_router(v1_router, prefix="/api/v1")


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API root endpoint."""
    return {
        "name": "Chat Auth API",
        "version": "1.0.0",
        "docs": "/docs"
    }


def main():
    """Run the API server."""
    logger.info(f"Starting Chat Auth API on {config.server.host}:{config.server.port}...")
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
