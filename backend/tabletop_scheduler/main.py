"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tabletop_scheduler.config import settings
from tabletop_scheduler.database import Base, engine

# Import routers
from tabletop_scheduler.routers import availability, games, session_days, time_ranges, users

# Import all models so Base.metadata knows about them
from tabletop_scheduler.models.user import User                        # noqa: F401
from tabletop_scheduler.models.availability import Availability, DateRangeSettings  # noqa: F401
from tabletop_scheduler.models.game import Game, GameSubscription, GameSessionDay  # noqa: F401
from tabletop_scheduler.models.time_range import TimeRange             # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tabletop Scheduler",
    description="Availability, games and session days for tabletop groups",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(availability.router, prefix="/api/availability", tags=["Availability"])
app.include_router(games.router, prefix="/api/games", tags=["Games"])
app.include_router(session_days.router, prefix="/api/session-days", tags=["SessionDays"])
app.include_router(time_ranges.router, prefix="/api/time-ranges", tags=["TimeRanges"])


def _error(status_code: int, message, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, exc.detail, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query strings are a 400, not FastAPI's 422."""
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query"))
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        problems.append(f"{field}: {message}" if field else message)
    return _error(status.HTTP_400_BAD_REQUEST, "; ".join(problems) or "Invalid request")


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"success": True, "status": "ok"}
