"""Main application entry point for the portfolio blog API.

Sets up FastAPI app with security middleware, CORS and routes for the blog and
its admin editor. Persistence goes through database_adapter (SQLite or Supabase).
"""
import logging
import os
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from config import Settings, settings, load_settings_from_env
from routers import auth, blog_posts
from services.error_handler import handle_blog_error, handle_exception
from services.errors import BlogError

API_VERSION = "1.0.0"

app = FastAPI(
    title="Portfolio Blog API",
    version=API_VERSION,
    description="API for the portfolio site blog and admin editor"
)

# Setup rate limiter
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

logger = logging.getLogger(__name__)

LOCAL_DEV_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def is_production(current_settings: Settings) -> bool:
    """Detect production by Supabase URL, production domain or explicit env flag."""
    return bool(any([
        current_settings.SUPABASE_URL and
        "supabase.co" in current_settings.SUPABASE_URL and
        "dummy" not in current_settings.SUPABASE_URL,

        current_settings.PRODUCTION_URL and
        "localhost" not in current_settings.PRODUCTION_URL and
        current_settings.PRODUCTION_URL.strip(),

        os.getenv("ENVIRONMENT") == "production",
        os.getenv("ENV") == "production",
    ]))


@app.on_event("startup")
async def validate_security_configuration():
    """Validate critical security settings on startup.

    Raises RuntimeError for issues that must be fixed before running.
    """
    local_settings = load_settings_from_env()
    production = is_production(local_settings)

    # CRITICAL: Prevent TEST_MODE in production
    if local_settings.TEST_MODE and production:
        raise RuntimeError(
            "CRITICAL SECURITY ERROR: TEST_MODE=true in production environment!\n"
            "\n"
            "Dev tokens would let anyone impersonate the admin.\n"
            "Set TEST_MODE=false in your .env file and restart.\n"
        )

    if not (local_settings.ADMIN_EMAIL or "").strip():
        logger.warning(
            "ADMIN_EMAIL is not set - every admin operation will fail with a configuration error"
        )

    if local_settings.TEST_MODE:
        logger.warning(
            "TEST_MODE enabled - dev tokens (dev-token-*) are accepted. "
            "NEVER enable TEST_MODE in production!"
        )

    logger.info(
        f"Security configuration validated:\n"
        f"  - Production mode: {production}\n"
        f"  - TEST_MODE: {local_settings.TEST_MODE}\n"
        f"  - Admin configured: {bool((local_settings.ADMIN_EMAIL or '').strip())}\n"
        f"  - CORS origins: {len(get_cors_origins())} configured\n"
    )


def site_origin_variants(site_url: str) -> list:
    """Return the site origin plus its www/non-www twin."""
    parsed = urlparse(site_url.strip())
    if not parsed.scheme or not parsed.hostname:
        return []

    port = f":{parsed.port}" if parsed.port else ""
    host = parsed.hostname
    twin = host[4:] if host.startswith("www.") else f"www.{host}"
    return [f"{parsed.scheme}://{host}{port}", f"{parsed.scheme}://{twin}{port}"]


def get_cors_origins(current_settings: Settings = None):
    """Build strict CORS allowlist from environment.

    Security: Never use wildcard origins with credentials.
    """
    current_settings = current_settings or settings
    origins = set(LOCAL_DEV_ORIGINS)

    if current_settings.FRONTEND_URL:
        origins.add(current_settings.FRONTEND_URL)
    if current_settings.PRODUCTION_URL:
        origins.add(current_settings.PRODUCTION_URL)
    if current_settings.SITE_URL:
        origins.update(site_origin_variants(current_settings.SITE_URL))

    # Support additional origins via env var (comma-separated)
    extra = os.getenv("CORS_EXTRA_ORIGINS", "")
    if extra:
        origins.update(o.strip() for o in extra.split(",") if o.strip())

    return sorted(origins)


origins = get_cors_origins()

# ============================================================================
# Security Middleware
# ============================================================================

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Content-Security-Policy"] = (
        "default-src 'self'; "
        "img-src 'self' data: https:; "
        "frame-ancestors 'none'"
    )

    # HSTS (only in production with HTTPS)
    if not settings.TEST_MODE:
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )

    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,  # Explicit allowlist only
    allow_credentials=True,  # Required for Authorization headers
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Trusted hosts (prevent host header injection)
allowed_hosts = ["localhost", "127.0.0.1", "0.0.0.0"]
# Allow testserver for TestClient in tests
if settings.TEST_MODE:
    allowed_hosts.append("testserver")

for origin in [settings.PRODUCTION_URL, settings.FRONTEND_URL, *site_origin_variants(settings.SITE_URL)]:
    host = urlparse(origin).hostname if origin else None
    if host and host not in allowed_hosts:
        allowed_hosts.append(host)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=allowed_hosts
)

app.add_exception_handler(BlogError, handle_blog_error)
app.add_exception_handler(Exception, handle_exception)

# ============================================================================
# Root Endpoints
# ============================================================================

@app.get("/")
@limiter.limit("60/minute")  # Prevent abuse
async def root(request: Request):
    """API root endpoint."""
    return {
        "message": "Portfolio Blog API",
        "version": API_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint (no rate limit for monitoring)."""
    current_settings = load_settings_from_env()

    return {
        "status": "healthy",
        "mode": "production" if is_production(current_settings) else "development",
        "test_mode": current_settings.TEST_MODE,
        "admin_configured": bool((current_settings.ADMIN_EMAIL or "").strip()),
        "database": "sqlite" if current_settings.DATABASE_URL else "supabase",
    }


# Include routers
app.include_router(blog_posts.router)
app.include_router(auth.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
