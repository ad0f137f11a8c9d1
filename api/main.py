"""
Kinship - Personal Relationship Manager
FastAPI Application Entry Point

Run with:

    uvicorn api.main:app --host 0.0.0.0 --port 8000
"""
# Load environment variables from .env file first, before any imports
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from api.routes import analytics, interactions, journal, notifications, people
from config.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    from api.services.person_store import get_person_store
    from api.services.interaction_store import get_interaction_store
    from api.services.notification_store import get_notification_store
    from api.services.journal_store import get_journal_store

    # Startup: open stores so schema problems surface immediately
    people_count = get_person_store().count()
    interaction_count = get_interaction_store().count()
    journal_count = get_journal_store().count()
    get_notification_store()
    logger.info(
        f"Kinship started: {people_count} people, {interaction_count} interactions, "
        f"{journal_count} journal entries"
    )

    yield

    logger.info("Kinship shutting down")


app = FastAPI(
    title="Kinship",
    description="Personal relationship manager: connections, interactions, health and closeness suggestions",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(people.router)
app.include_router(interactions.router)
app.include_router(analytics.router)
app.include_router(notifications.router)
app.include_router(journal.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert validation errors to 400 with clear messages."""
    errors = exc.errors()

    # Sanitize errors for JSON serialization (convert bytes to string)
    sanitized_errors = []
    for error in errors:
        sanitized = dict(error)
        if "input" in sanitized and isinstance(sanitized["input"], bytes):
            sanitized["input"] = sanitized["input"].decode("utf-8", errors="replace")
        sanitized.pop("ctx", None)
        sanitized_errors.append(sanitized)

    return JSONResponse(
        status_code=400,
        content={"error": "Validation error", "detail": sanitized_errors}
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "kinship",
        "checks": {
            "data_path": str(settings.data_path),
        },
    }
