"""Session endpoints.

The frontend uses /api/auth/me to decide whether to show the admin editor.
Sign-in itself happens against Supabase Auth directly from the browser.
"""
from fastapi import APIRouter, Depends

from models.users import CurrentUserResponse
from routers.blog_posts import get_blog_manager
from services.auth import Caller, get_caller
from services.blog_manager import BlogContentManager

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    caller: Caller = Depends(get_caller),
    manager: BlogContentManager = Depends(get_blog_manager),
):
    """Current caller or null. Never fails for anonymous or invalid sessions."""
    return CurrentUserResponse(user=caller.user, is_admin=manager.is_admin(caller))
