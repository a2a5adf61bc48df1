"""Blog post endpoints.

Single-author blog: public readers see published posts, the configured admin
manages everything. Security: all mutations require the admin; reads never
reveal drafts to anyone else.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from config import settings
from models.blog_posts import BlogPostCreate, BlogPostResponse, BlogPostUpdate
from services.auth import Caller, get_caller
from services.blog_manager import BlogContentManager
from services.database import get_db

router = APIRouter(prefix="/api/blog-posts", tags=["blog"])


def get_blog_manager(db=Depends(get_db)) -> BlogContentManager:
    """Dependency wiring the manager to the database and the configured admin."""
    return BlogContentManager(db, admin_email=settings.ADMIN_EMAIL)


@router.get("", response_model=List[BlogPostResponse])
async def list_published_posts(manager: BlogContentManager = Depends(get_blog_manager)):
    return manager.list_published()


@router.get("/all", response_model=List[BlogPostResponse])
async def list_all_posts(
    caller: Caller = Depends(get_caller),
    manager: BlogContentManager = Depends(get_blog_manager),
):
    """Admin dashboard listing. Non-admins receive an empty list, not an error."""
    return manager.list_all(caller)


@router.get("/slug/{slug}", response_model=BlogPostResponse)
async def get_post_by_slug(slug: str, manager: BlogContentManager = Depends(get_blog_manager)):
    post = manager.get_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_post(
    post_id: str,
    caller: Caller = Depends(get_caller),
    manager: BlogContentManager = Depends(get_blog_manager),
):
    post = manager.get_by_id(caller, post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.post("", response_model=BlogPostResponse, status_code=201)
async def create_post(
    payload: BlogPostCreate,
    caller: Caller = Depends(get_caller),
    manager: BlogContentManager = Depends(get_blog_manager),
):
    post_id = manager.create(caller, **payload.model_dump())
    return manager.get_by_id(caller, post_id)


@router.patch("/{post_id}", response_model=BlogPostResponse)
async def update_post(
    post_id: str,
    updates: BlogPostUpdate,
    caller: Caller = Depends(get_caller),
    manager: BlogContentManager = Depends(get_blog_manager),
):
    manager.update(caller, post_id, updates.model_dump(exclude_unset=True))
    return manager.get_by_id(caller, post_id)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    caller: Caller = Depends(get_caller),
    manager: BlogContentManager = Depends(get_blog_manager),
):
    manager.remove(caller, post_id)
    return {"success": True}
