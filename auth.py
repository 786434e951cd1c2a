"""
Admin authentication routes and dependencies
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional
from fastapi import APIRouter, Depends, Header, Cookie, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from crud.session import SessionRepository
from errors import Unauthorized
from models.admin import LoginRequest, LoginResponse, MessageResponse, SessionStatus
from services.auth_service import AdminConfig, AuthService, SessionState
from config import settings

SESSION_COOKIE_NAME = "admin_session"

# Create admin auth router
auth_router = APIRouter(prefix="/api/admin", tags=["admin"])


def get_admin_config() -> AdminConfig:
    """
    Build the admin identity from settings.
    Tests override this dependency to inject fake credentials.
    """
    return AdminConfig(
        username=settings.admin_username,
        password=settings.admin_password,
        password_hash=settings.admin_password_hash,
        session_secret=settings.session_secret,
        session_ttl=timedelta(hours=settings.session_ttl_hours),
    )


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    admin: AdminConfig = Depends(get_admin_config),
) -> AuthService:
    return AuthService(SessionRepository(db), admin)


def get_session_credential(
    admin_session: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[str]:
    """
    Extract the session credential for this request.

    Authentication priority:
    1. The admin_session httpOnly cookie set by login (browser clients)
    2. Fallback to Authorization: Bearer <value> (API consumers)
    """
    if admin_session:
        return admin_session
    if authorization and authorization.startswith("Bearer "):
        return authorization.replace("Bearer ", "", 1).strip()
    return None


# Dependency for protected routes
async def require_admin(
    credential: Optional[str] = Depends(get_session_credential),
    auth_service: AuthService = Depends(get_auth_service),
) -> SessionState:
    """
    Authorization gate: raises Unauthorized before the handler runs
    unless the request carries an authenticated session.
    """
    session = await auth_service.current_session(credential)
    if not session.is_authenticated:
        raise Unauthorized()
    return session


def route_requires_admin(route) -> bool:
    """True when `require_admin` is anywhere in the route's dependency tree."""
    pending = list(getattr(getattr(route, "dependant", None), "dependencies", []))
    while pending:
        dependant = pending.pop()
        if dependant.call is require_admin:
            return True
        pending.extend(dependant.dependencies)
    return False


async def request_has_admin_session(request: Request) -> bool:
    """
    Run the gate check outside dependency injection.

    Used when FastAPI rejects a request before dependencies resolve (an
    unparseable JSON body). Honours `app.dependency_overrides` for the
    database session and admin config.
    """
    overrides = request.app.dependency_overrides
    db_provider = overrides.get(get_db, get_db)
    admin = overrides.get(get_admin_config, get_admin_config)()
    credential = get_session_credential(
        request.cookies.get(SESSION_COOKIE_NAME),
        request.headers.get("Authorization"),
    )
    async with asynccontextmanager(db_provider)() as db:
        session = await AuthService(SessionRepository(db), admin).current_session(credential)
    return session.is_authenticated


def _set_session_cookie(response: JSONResponse, value: str, max_age: int) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=value,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=max_age,
    )


@auth_router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with the configured admin credentials and set the session cookie"""
    result = await auth_service.login(request.username, request.password)

    response = JSONResponse(
        content={
            "message": "Login successful",
            "username": result.username,
        }
    )
    _set_session_cookie(
        response,
        result.cookie_value,
        max_age=int(auth_service.admin.session_ttl.total_seconds()),
    )
    return response


@auth_router.post(
    "/logout",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def logout(
    credential: Optional[str] = Depends(get_session_credential),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Destroy the current session and clear the session cookie"""
    await auth_service.logout(credential)

    response = JSONResponse(content={"message": "Logout successful"})
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return response


@auth_router.get(
    "/session",
    response_model=SessionStatus,
    response_model_exclude_none=True,
)
async def get_session(
    credential: Optional[str] = Depends(get_session_credential),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Report whether the caller holds an authenticated admin session"""
    session = await auth_service.current_session(credential)
    return SessionStatus(
        is_authenticated=session.is_authenticated,
        username=session.username,
    )
