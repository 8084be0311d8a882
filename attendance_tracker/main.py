"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from attendance_tracker.config import settings
from attendance_tracker.core.logging import setup_logging
from attendance_tracker.database import Base, engine

# Import routers
from attendance_tracker.routers import attendance, events, auth

# Import all models so Base.metadata knows about them
from attendance_tracker.models.user import User                              # noqa: F401
from attendance_tracker.models.event import Event                            # noqa: F401
from attendance_tracker.models.registration import Registration, Team, TeamMember  # noqa: F401
from attendance_tracker.models.attendance import AttendanceRecord            # noqa: F401

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Routes whose missing-field error names the fields
MISSING_FIELDS_MESSAGES = {
    "/api/verify-password": "Event name and password are required",
}

app = FastAPI(
    title="Event Attendance Tracker",
    description="Door-side attendance for fest events: entry/exit marking, status overrides, rosters",
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
app.include_router(attendance.router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(events.router, prefix="/api", tags=["Events"])
app.include_router(auth.router, prefix="/api", tags=["Auth"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render errors as ``{success: false, message}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are a 400, not FastAPI's default 422."""
    errors = exc.errors()
    missing = any(e["type"] in ("missing", "string_too_short") for e in errors)
    if missing:
        message = MISSING_FIELDS_MESSAGES.get(request.url.path, "Missing required fields")
    else:
        message = "Invalid request"
    logger.info("Rejected request to %s: %s", request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
