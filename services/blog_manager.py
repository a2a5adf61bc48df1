"""Blog content manager.

Owns the lifecycle of blog post records: creation, slug assignment, partial
updates, draft/published transitions, deletion and read visibility.

Visibility has two tiers. Public readers only ever see published posts; the
configured admin sees everything. Mutations require the admin and raise the
denial; reads degrade to the public view instead of failing.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from database_adapter import utcnow_ms
from models.blog_posts import PostStatus
from services.auth import Caller, check_admin, ensure_admin
from services.content import calculate_reading_time, derive_excerpt, parse_tags, to_timestamp_ms
from services.errors import BlogError, InvalidInput, NotFound
from services.id_generator import derive_slug, resolve_unique_slug

logger = logging.getLogger(__name__)

TABLE = "blog_posts"

# Fields that may not be cleared by sending null in a patch
_REQUIRED_FIELDS = ("title", "excerpt", "content", "tags", "status")


def _require_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise InvalidInput("Title cannot be blank")
    return title


def normalize_post(record: Dict[str, Any]) -> Dict[str, Any]:
    """Fill defaults and coerce timestamps so both backends return one shape."""
    post = dict(record)
    post["tags"] = post.get("tags") or []
    post["excerpt"] = post.get("excerpt") or ""
    post["content"] = post.get("content") or ""
    for field in ("published_at", "created_at", "updated_at"):
        post[field] = to_timestamp_ms(post.get(field))
    if not post.get("reading_time"):
        post["reading_time"] = calculate_reading_time(post["content"])
    return post


class BlogContentManager:
    """
    Blog CRUD with admin gating.

    ``admin_email`` is injected once at construction; ``clock`` returns epoch
    milliseconds and exists so tests can control timestamps.
    """

    def __init__(self, db, admin_email: Optional[str], clock: Callable[[], int] = utcnow_ms):
        self.db = db
        self.admin_email = admin_email
        self.clock = clock

    # ----- Authorization -----

    def is_admin(self, caller: Caller) -> bool:
        return check_admin(caller.user, self.admin_email).allowed

    # ----- Reads -----

    def list_published(self) -> List[Dict[str, Any]]:
        """Published posts, newest publish time first (unset sorts last)."""
        response = self.db.table(TABLE).select("*").eq("status", PostStatus.PUBLISHED.value).execute()
        posts = [normalize_post(p) for p in (response.data or [])]
        posts.sort(key=lambda p: p.get("published_at") or 0, reverse=True)
        return posts

    def list_all(self, caller: Caller) -> List[Dict[str, Any]]:
        """Every post for the admin, most recently updated first.

        Anyone else gets an empty list rather than an error so the admin
        dashboard stays quiet before login.
        """
        if not self.is_admin(caller):
            return []

        response = self.db.table(TABLE).select("*").execute()
        posts = [normalize_post(p) for p in (response.data or [])]
        posts.sort(key=lambda p: p.get("updated_at") or 0, reverse=True)
        return posts

    def get_by_id(self, caller: Caller, post_id: str) -> Optional[Dict[str, Any]]:
        """Admin sees any post; others only published ones.

        Drafts are reported as missing to non-admins so their existence is not
        revealed.
        """
        post = self._fetch(post_id)
        if post is None:
            return None
        if self.is_admin(caller) or post["status"] == PostStatus.PUBLISHED.value:
            return post
        return None

    def get_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        """Public article lookup. Unpublished posts are treated as missing."""
        response = self.db.table(TABLE).select("*").eq("slug", slug).limit(1).execute()
        if not response.data:
            return None
        post = normalize_post(response.data[0])
        if post["status"] != PostStatus.PUBLISHED.value:
            return None
        return post

    # ----- Mutations -----

    def create(
        self,
        caller: Caller,
        title: str,
        content: str,
        excerpt: Optional[str] = None,
        cover_image: Optional[str] = None,
        tags: Iterable[str] = (),
        status: PostStatus = PostStatus.DRAFT,
    ) -> str:
        """Create a post and return its id."""
        user = ensure_admin(caller, self.admin_email)

        status = PostStatus(status)
        created_at = self.clock()
        title = _require_title(title)
        content = (content or "").strip()
        slug = resolve_unique_slug(self.db, derive_slug(title))

        record = {
            "title": title,
            "slug": slug,
            "excerpt": derive_excerpt(title, excerpt),
            "content": content,
            "cover_image": (cover_image or "").strip() or None,
            "tags": parse_tags(tags if isinstance(tags, (str, list)) else list(tags)),
            "status": status.value,
            "published_at": created_at if status == PostStatus.PUBLISHED else None,
            "created_at": created_at,
            "updated_at": created_at,
            "reading_time": calculate_reading_time(content),
            "author_id": user.id,
        }

        response = self.db.table(TABLE).insert(record).execute()
        if not response.data:
            raise BlogError("Failed to create blog post")

        post_id = response.data[0]["id"]
        logger.info(f"Created blog post {post_id} ({slug}, {status.value}) by {user.id}")
        return post_id

    def update(self, caller: Caller, post_id: str, changes: Dict[str, Any]) -> str:
        """Apply a partial patch. Only keys present in ``changes`` are touched."""
        ensure_admin(caller, self.admin_email)

        existing = self._fetch(post_id)
        if existing is None:
            raise NotFound()

        changes = {
            key: value for key, value in changes.items()
            if not (key in _REQUIRED_FIELDS and value is None)
        }
        updated_at = self.clock()
        patch: Dict[str, Any] = {"updated_at": updated_at}

        if "title" in changes:
            patch["title"] = _require_title(changes["title"])
            patch["slug"] = resolve_unique_slug(self.db, derive_slug(patch["title"]), exclude_id=post_id)

        if "excerpt" in changes:
            patch["excerpt"] = derive_excerpt(patch.get("title", existing["title"]), changes["excerpt"])

        if "content" in changes:
            patch["content"] = changes["content"].strip()
            patch["reading_time"] = calculate_reading_time(patch["content"])

        if "cover_image" in changes:
            patch["cover_image"] = (changes["cover_image"] or "").strip() or None

        if "tags" in changes:
            patch["tags"] = parse_tags(changes["tags"])

        if "status" in changes:
            status = PostStatus(changes["status"])
            patch["status"] = status.value
            if status == PostStatus.PUBLISHED and not existing.get("published_at"):
                patch["published_at"] = updated_at
            elif status == PostStatus.DRAFT:
                patch["published_at"] = None

        self.db.table(TABLE).update(patch).eq("id", post_id).execute()
        logger.info(f"Updated blog post {post_id}: {sorted(k for k in patch if k != 'updated_at')}")
        return post_id

    def remove(self, caller: Caller, post_id: str) -> None:
        """Delete permanently. Deleting a missing post is a no-op."""
        ensure_admin(caller, self.admin_email)
        self.db.table(TABLE).delete().eq("id", post_id).execute()
        logger.info(f"Deleted blog post {post_id}")

    def _fetch(self, post_id: str) -> Optional[Dict[str, Any]]:
        response = self.db.table(TABLE).select("*").eq("id", post_id).limit(1).execute()
        if not response.data:
            return None
        return normalize_post(response.data[0])
