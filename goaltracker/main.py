"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from goaltracker.config import settings
from goaltracker.database import database
from goaltracker.routers import auth, macro_goals, micro_goals
from goaltracker.services.notifier import GoalChangeEvent, notifier

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def log_goal_change(event: GoalChangeEvent) -> None:
    logger.debug("Goal %s %s for user %s", event.goal_id, event.kind.value, event.user_id)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    await database.connect()
    unsubscribe = notifier.subscribe(log_goal_change)
    yield
    unsubscribe()
    await database.disconnect()


app = FastAPI(
    title="Goal Tracker API",
    description="Backend API for macro goals, habits and streaks",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(macro_goals.router)
app.include_router(micro_goals.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Goal Tracker API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
