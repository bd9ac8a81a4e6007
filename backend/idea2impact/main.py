from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import uvicorn

# Import routers
from idea2impact.api.routes import diagnostics, health, registration
from idea2impact.api.responses import failure_response
from idea2impact.core.config import settings
from idea2impact.core.errors import PersistenceError
from idea2impact.core.logging import setup_logging
from idea2impact.services.notification import NotificationSender
from idea2impact.services.registration_store import RegistrationStore

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    # Startup
    logger.info("🚀 Starting Idea2Impact registration API...")

    store = RegistrationStore.from_url(settings.DATABASE_URL)
    try:
        store.init_schema()
        store.ping()
        logger.info("✅ Database connection successful")
    except PersistenceError as e:
        logger.error(f"❌ Database connection failed: {e}")
        store.dispose()
        raise

    app.state.store = store
    app.state.sender = NotificationSender(settings)

    yield

    # Shutdown
    logger.info("👋 Shutting down...")
    store.dispose()

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Hackathon registration: store the submission, email a notification",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same envelope as missing fields"""
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return failure_response(
        400,
        "Request body must be a JSON object",
        error="ValidationError",
        fields=["body"],
        exc=exc,
        expose_details=settings.expose_error_details,
    )

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(registration.router, tags=["Registration"])
app.include_router(diagnostics.router, tags=["Diagnostics"])

@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "register": "/send-registration",
            "test_email": "/test-email"
        }
    }

def run():
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, reload=False)

if __name__ == "__main__":
    run()
