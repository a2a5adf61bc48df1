"""Database access layer providing unified interface to SQLite and Supabase.

Uses database_adapter for automatic backend selection based on settings.
Also hosts Supabase JWT verification, the production identity lookup.
"""
from typing import Optional

from supabase import create_client, Client
from config import settings
from database_adapter import DatabaseAdapter

# Initialize database adapter - automatically chooses SQLite (if DATABASE_URL set) or Supabase
db_adapter = DatabaseAdapter(settings)
db_adapter.init()

# Separate client for auth calls so the anon key can be used when configured
if settings.SUPABASE_URL:
    supabase: Optional[Client] = create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY or settings.SUPABASE_KEY,
    )
else:
    supabase = None


def get_db():
    """
    Dependency for FastAPI endpoints to get database adapter.
    Works with both SQLite (test) and Supabase (production).

    Usage:
        @app.get("/example")
        def example(db = Depends(get_db)):
            result = db.table('blog_posts').select('*').execute()
            return result.data
    """
    return db_adapter


def verify_token(token: str, db: Optional[DatabaseAdapter] = None):
    """Validate a Supabase access token and return the auth user.

    Raises ValueError for rejected tokens and RuntimeError when Supabase is not
    configured. Callers in services.auth translate both into "unauthenticated".
    """
    client = supabase
    if client is None and db is not None:
        client = db.supabase
    if client is None:
        raise RuntimeError("Supabase auth is not configured")

    response = client.auth.get_user(token)
    user = getattr(response, "user", None)
    if user is None:
        raise ValueError("Invalid or expired token")
    return user
