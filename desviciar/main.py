"""
Desviciar Backend API - Main Application
"""
import logging
import traceback
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from desviciar import __version__
from desviciar.config import settings
from desviciar.api import webhook
from desviciar.api.v1 import api_router
from desviciar.core.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Habit recovery backend: Stripe subscription sync, progress insights and reminders",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    redirect_slashes=False
)

# Initialize rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# Global exception handler for unhandled exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler that:
    - In DEBUG mode: returns detailed error info for development
    - In PRODUCTION mode: returns generic error message, logs details server-side
    """
    # Generate a unique error ID for tracking
    error_id = str(uuid.uuid4())[:8]

    # Always log the full error on the server
    logger.error(
        f"[ERROR_ID: {error_id}] Unhandled exception on {request.method} {request.url.path}",
        exc_info=True
    )

    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "error_id": error_id,
                "type": type(exc).__name__,
                "path": str(request.url.path),
                "traceback": traceback.format_exc()
            }
        )
    else:
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An internal server error occurred. Please try again later.",
                "error_id": error_id
            }
        )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Start the scheduler and report configuration"""
    print("=" * 70)
    print("[STARTUP] Starting Desviciar API...")
    print("=" * 70)

    from desviciar.scheduler import start_scheduler
    start_scheduler()

    print("[CHECK] Checking configuration...")
    if not settings.STRIPE_WEBHOOK_SECRET:
        print("[WARNING] STRIPE_WEBHOOK_SECRET not set - every webhook will be rejected")
    if not settings.STRIPE_SECRET_KEY:
        print("[WARNING] STRIPE_SECRET_KEY not set - customer lookups will fail")
    if not settings.FIREBASE_SERVICE_ACCOUNT:
        print(f"[INFO] FIREBASE_SERVICE_ACCOUNT not set, using {settings.FIREBASE_CREDENTIALS_PATH}")

    print(f"[DEBUG] Debug mode: {settings.DEBUG}")
    print(f"[TIMEZONE] {settings.APP_TIMEZONE}")
    print("=" * 70)
    print(f"[API] Running at: http://{settings.HOST}:{settings.PORT}")
    print(f"[DOCS] API Docs: http://{settings.HOST}:{settings.PORT}/docs")
    print("=" * 70)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    print("[SHUTDOWN] Shutting down Desviciar API...")

    from desviciar.scheduler import stop_scheduler
    stop_scheduler()


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "desviciar-api",
        "version": __version__
    }


# Stripe posts to the bare /webhook path
app.include_router(webhook.router)
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Desviciar API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "features": [
            "Stripe subscription sync",
            "Progress chart and trigger insights",
            "Inactivity push reminders",
            "Vital capital dashboard"
        ]
    }


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Desviciar Backend API")
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload on file changes"
    )
    args = parser.parse_args()

    uvicorn.run(
        "desviciar.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not args.no_reload
    )
