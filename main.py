"""
Portfolio backend - public projects, pages and résumé, plus the admin API
"""

from pathlib import Path
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

# Import routers
from auth import auth_router, request_has_admin_session, route_requires_admin
from routers.projects_router import router as projects_router
from routers.pages_router import router as pages_router
from routers.settings_router import router as settings_router
from database import init_db, AsyncSessionLocal
from errors import PortfolioError, Unauthorized
from jobs.session_reaper import SessionReaper, purge_expired_sessions
from config import settings
from auth_utils import is_password_hash

# ============================================================================
# LOGGING
# ============================================================================

# Write ALL events to <LOG_DIR>/app.log and stderr
LOGS_DIR = Path(settings.log_dir)
LOGS_DIR.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOGS_DIR / "app.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# ============================================================================
# FASTAPI APP SETUP
# ============================================================================

app = FastAPI(title="Portfolio API")


# Uncaught exception middleware - logs all unhandled exceptions and returns 500
class UncaughtExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Uncaught exception on {request.method} {request.url.path}: {e}\n{traceback.format_exc()}")
            return JSONResponse(
                status_code=500,
                content={"message": "Internal Server Error"}
            )


app.add_middleware(UncaughtExceptionMiddleware)

# CORS MUST be near the bottom
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url] if settings.frontend_url else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# ERROR HANDLERS
# ============================================================================


@app.exception_handler(PortfolioError)
async def portfolio_error_handler(request: Request, exc: PortfolioError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Schema failures are reported as 400 with one entry per offending field"""
    # Unparseable JSON is rejected before the gate dependency runs
    route = request.scope.get("route")
    if route_requires_admin(route) and not await request_has_admin_session(request):
        return JSONResponse(status_code=401, content=Unauthorized().to_dict())

    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": errors},
    )


# ============================================================================
# STARTUP / SHUTDOWN
# ============================================================================

session_reaper = SessionReaper(
    AsyncSessionLocal,
    interval_seconds=settings.session_purge_interval_minutes * 60,
)


@app.on_event("startup")
async def check_admin_config_on_startup():
    """Warn when login cannot work (non-fatal; login reports 500)"""
    missing = [
        name for name, value in {
            "ADMIN_USERNAME": settings.admin_username,
            "ADMIN_PASSWORD": settings.admin_password or settings.admin_password_hash,
            "SESSION_SECRET": settings.session_secret,
        }.items()
        if not value
    ]
    if missing:
        logger.warning(f"Startup check: Missing environment variables: {', '.join(missing)}. Admin login is disabled.")
    elif settings.admin_password_hash and not is_password_hash(settings.admin_password_hash):
        logger.warning("Startup check: ADMIN_PASSWORD_HASH is not a recognised hash. Admin login is disabled.")
    else:
        logger.info("Startup check: Admin credentials configured")


# Initialize database on startup
@app.on_event("startup")
async def initialize_database():
    """Create all tables, clear out expired sessions and start the sweeper."""
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    await purge_expired_sessions(AsyncSessionLocal)
    session_reaper.start()


@app.on_event("shutdown")
async def stop_background_jobs():
    await session_reaper.stop()


# ============================================================================
# INCLUDE ROUTERS
# ============================================================================
app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(pages_router)
app.include_router(settings_router)


@app.get("/api/health", tags=["health"])
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
