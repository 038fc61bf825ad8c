# coachslots/main.py
from __future__ import annotations

# Load .env early so settings and os.getenv agree
from dotenv import load_dotenv
load_dotenv()

import sqlalchemy as sa
from fastapi import Depends, FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coachslots.core.config import Settings, settings
from coachslots.core.errors import register_exception_handlers
from coachslots.core.logging import LoggingMiddleware, get_logger, setup_logging
from coachslots.db.capabilities import SchemaCapabilities, detect_capabilities
from coachslots.db.session import AsyncSessionLocal, engine, get_session
from coachslots.services.availability import AvailabilityResolver
from coachslots.services.google_calendar import GoogleCalendarClient

# Routers
from coachslots.api.routes.availability import router as availability_router
from coachslots.api.routes.bookings import router as bookings_router
from coachslots.api.routes.sessions import router as sessions_router
from coachslots.api.routes.slots import router as slots_router

# Set up structured logging
debug_mode = settings.is_development
setup_logging(debug=debug_mode, max_log_length=settings.MAX_LOG_LENGTH, level=settings.LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(title="coachslots", description="Coach availability and booking slots")

logging_middleware = LoggingMiddleware(
    log_requests=settings.LOG_REQUESTS or debug_mode,
    log_responses=settings.LOG_RESPONSES or debug_mode,
    slow_threshold=settings.SLOW_REQUEST_THRESHOLD,
)
app.middleware("http")(logging_middleware)
register_exception_handlers(app)


def build_resolver(
    session_factory: async_sessionmaker[AsyncSession],
    capabilities: SchemaCapabilities,
    config: Settings = settings,
) -> AvailabilityResolver:
    calendar = GoogleCalendarClient(
        session_factory,
        enabled=config.GOOGLE_CALENDAR_ENABLED,
        client_id=config.GOOGLE_CLIENT_ID,
        client_secret=config.GOOGLE_CLIENT_SECRET,
    )
    return AvailabilityResolver(
        session_factory,
        calendar,
        capabilities=capabilities,
        settings=config,
    )


# -------- Health / readiness (public) --------
@app.get("/healthz", include_in_schema=False)
async def healthz():
    return {"ok": True}

@app.get("/readyz", include_in_schema=False)
async def readyz(db: AsyncSession = Depends(get_session)):
    await db.execute(sa.text("SELECT 1"))
    return {"db": "ok"}

# -------- Include routers --------
app.include_router(slots_router)
app.include_router(bookings_router)
app.include_router(availability_router)
app.include_router(sessions_router)

# -------- Application startup/shutdown events --------
@app.on_event("startup")
async def startup_event():
    """Resolve schema capabilities once and build the availability resolver."""
    capabilities = await detect_capabilities(engine, settings.sessions_owner_column_override)
    app.state.resolver = build_resolver(AsyncSessionLocal, capabilities)
    logger.info(
        "startup_complete",
        timezone=settings.COACH_TIMEZONE,
        google_calendar=settings.GOOGLE_CALENDAR_ENABLED,
        sessions_owner_column=capabilities.sessions_have_owner_column,
    )

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown - disposing database engine")
    await engine.dispose()
