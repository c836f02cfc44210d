# app/mice/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import asyncpg
import logging

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config.config import settings
from .logging.logging_config import setup_logging
from .api import students, events, scanner, reports, staff
from .api.utilities.limiter import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Opens the PostgreSQL pool on startup and closes it on shutdown.
    """
    setup_logging()
    app.state.limiter = limiter

    logger.info("Starting MICE Attendance API...")

    try:
        app.state.postgres_pool = await asyncpg.create_pool(
            dsn=settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE
        )
        logger.info("PostgreSQL connection pool created.")
    except Exception as e:
        # Requests needing the store answer 503 until the app is restarted.
        logger.error(f"Could not create the PostgreSQL pool: {e}", exc_info=True)
        app.state.postgres_pool = None

    if not settings.EMAIL_SERVICE_URL:
        logger.warning("EMAIL_SERVICE_URL is not set, attendance confirmations are disabled.")

    yield

    logger.info("Shutting down MICE Attendance API...")
    if getattr(app.state, "postgres_pool", None):
        await app.state.postgres_pool.close()
        logger.info("PostgreSQL connection pool closed.")


app = FastAPI(
    title="MICE Attendance API",
    description="QR code attendance tracking for events.",
    version="1.0.0",
    lifespan=lifespan
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(students.router, prefix="/api/v1")
app.include_router(events.router, prefix="/api/v1")
app.include_router(scanner.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(staff.router, prefix="/api/v1")


@app.get("/health", tags=["System"])
def health_check():
    """Simple liveness probe."""
    return {"status": "ok", "message": "MICE Attendance API is running."}
