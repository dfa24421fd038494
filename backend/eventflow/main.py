"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from eventflow.config import settings
from eventflow.database import Base, engine
from eventflow.errors import validation_error_handler
from eventflow.scheduler import init_scheduler, shutdown_scheduler

# Import routers
from eventflow.routers import announcements, auth, events, guests, messages, moderation, notifications

# Import all models so Base.metadata knows about them
from eventflow.models.user import User                          # noqa: F401
from eventflow.models.event import Event                        # noqa: F401
from eventflow.models.guest import Guest                        # noqa: F401
from eventflow.models.announcement import Announcement          # noqa: F401
from eventflow.models.message import Message                    # noqa: F401
from eventflow.models.report import Report                      # noqa: F401
from eventflow.models.penalty import Penalty                    # noqa: F401
from eventflow.models.notification import Notification, PushSubscription  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create SQLite tables in dev mode and run the daily jobs while serving."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    if settings.ARCHIVER_ENABLED:
        init_scheduler()
    else:
        logger.info("Archiver disabled; background scheduler not started")

    yield

    shutdown_scheduler()


app = FastAPI(
    title="EventFlow",
    description="Event management backend: events, RSVPs, messaging, moderation and notifications",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, validation_error_handler)

# Register routers
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(events.router, prefix="/events", tags=["Events"])
app.include_router(guests.router, prefix="/events", tags=["Guests"])
app.include_router(announcements.router, prefix="/events", tags=["Announcements"])
app.include_router(messages.router, prefix="/events", tags=["Messages"])
app.include_router(moderation.router, prefix="/moderation", tags=["Moderation"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
