"""Authentication and authorization services.

Resolves the caller from the Authorization header and decides admin access.
In TEST_MODE, accepts dev tokens for stable test identities without real Supabase auth.

Two tiers only: an authenticated user, and the single admin whose email matches
the configured ADMIN_EMAIL (trimmed, case-insensitive). A missing ADMIN_EMAIL
fails closed. Identity resolution never raises; any failure means "unauthenticated".
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from config import load_settings_from_env
from database_adapter import DatabaseAdapter
from models.users import CurrentUser
from services.database import get_db, verify_token
from services.errors import BlogError, ConfigurationError, Unauthenticated, Unauthorized
from services.security_logger import log_auth_failure, log_configuration_error, log_unauthorized_access

DEV_TOKEN_PREFIX = "dev-token-"


@dataclass(frozen=True)
class Caller:
    """Explicit request context threaded into every blog operation."""
    user: Optional[CurrentUser] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


@dataclass(frozen=True)
class AdminCheck:
    """Outcome of an admin check. ``error`` is set exactly when access is denied."""
    user: Optional[CurrentUser] = None
    error: Optional[BlogError] = None

    @property
    def allowed(self) -> bool:
        return self.error is None


def check_admin(user: Optional[CurrentUser], admin_email: Optional[str]) -> AdminCheck:
    """Decide whether ``user`` is the configured admin without raising."""
    if user is None:
        return AdminCheck(error=Unauthenticated())

    configured = (admin_email or "").strip().lower()
    if not configured:
        return AdminCheck(user=user, error=ConfigurationError())

    email = (user.email or "").strip().lower()
    if not email or email != configured:
        return AdminCheck(user=user, error=Unauthorized())

    return AdminCheck(user=user)


def ensure_admin(caller: Caller, admin_email: Optional[str]) -> CurrentUser:
    """
    Enforce admin-only access for mutations.

    Raises Unauthenticated, ConfigurationError or Unauthorized; the denial is
    recorded in the security log first.
    """
    check = check_admin(caller.user, admin_email)
    if check.allowed:
        return check.user

    if isinstance(check.error, ConfigurationError):
        log_configuration_error(check.error.detail)
    elif isinstance(check.error, Unauthorized):
        log_unauthorized_access(caller.user.id, "admin", f"Attempted admin action as {caller.user.email}")
    else:
        log_auth_failure(None, "Admin action without a session")
    raise check.error


def _user_from_supabase(user) -> CurrentUser:
    """Normalize a Supabase auth user (object or dict) into CurrentUser."""
    def attr(name):
        if isinstance(user, dict):
            return user.get(name)
        return getattr(user, name, None)

    meta = attr("user_metadata") or {}
    email = attr("email")
    name = meta.get("name") or meta.get("full_name") or (email.split("@")[0] if email else None)
    return CurrentUser(
        id=str(attr("id")),
        email=email,
        name=name,
        avatar_url=meta.get("avatar_url") or meta.get("picture"),
    )


def resolve_current_user(authorization: Optional[str], db: DatabaseAdapter) -> Optional[CurrentUser]:
    """
    Resolve the Authorization header to a user, or None.

    In TEST_MODE (dev):
      - Accepts: "dev-token-<user_id>" or "Bearer dev-token-<user_id>"
      - The user must exist in the local users table

    In production (TEST_MODE=false):
      - Accepts: valid Supabase JWT, checked via verify_token()
    """
    if not authorization:
        return None

    token = authorization.replace("Bearer ", "").strip()
    if not token:
        return None

    # Fresh settings so tests that patch TEST_MODE are observed
    settings = load_settings_from_env()

    try:
        if settings.TEST_MODE and token.startswith(DEV_TOKEN_PREFIX):
            user_id = token[len(DEV_TOKEN_PREFIX):].strip()
            response = db.table("users").select("*").eq("id", user_id).execute()
            if not response.data:
                log_auth_failure(user_id, "Dev token user not found in database")
                return None
            row = response.data[0]
            return CurrentUser(
                id=row["id"],
                email=row.get("email"),
                name=row.get("name"),
                avatar_url=row.get("avatar_url"),
            )

        return _user_from_supabase(verify_token(token, db))
    except Exception as e:
        log_auth_failure(None, f"Token verification failed: {e}")
        return None


async def get_caller(
    authorization: Optional[str] = Header(None),
    db=Depends(get_db),
) -> Caller:
    """FastAPI dependency building the request's Caller context."""
    return Caller(user=resolve_current_user(authorization, db))
