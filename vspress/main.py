"""
VS Press - Main FastAPI Application
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import time

from vspress.config import settings
from vspress.api.routes import (
    articles,
    auth,
    comments,
    pages,
    uploads,
)


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Define lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events"""
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    logger.info("Debug mode: %s", settings.DEBUG)
    logger.info("Dev mode: %s", settings.DEV_MODE)
    if not settings.ADMIN_EMAIL:
        logger.warning("ADMIN_EMAIL is not set; no signup will receive the admin role")
    if settings.uses_default_secret:
        if not settings.DEBUG:
            raise RuntimeError("JWT_SECRET_KEY must be set when DEBUG is off")
        logger.warning("JWT_SECRET_KEY is the development default; sessions can be forged")

    yield

    logger.info("Shutting down %s", settings.APP_NAME)


# Create FastAPI application with lifespan
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="VS Press - articles, comments and likes for the school paper",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    # Lets browsers send the Sec-CH-Prefers-Color-Scheme hint used for the theme
    response.headers["Accept-CH"] = "Sec-CH-Prefers-Color-Scheme"
    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred",
        },
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "debug_mode": settings.DEBUG,
        "firebase_configured": bool(
            settings.FIREBASE_PROJECT_ID or settings.FIREBASE_CREDENTIALS_JSON
        ),
        "admin_configured": bool(settings.ADMIN_EMAIL),
    }


# API routers first; the page router ends with a catch-all path
app.include_router(auth.router)
app.include_router(articles.router)
app.include_router(comments.router)
app.include_router(uploads.router)
app.include_router(pages.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "vspress.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG
    )
