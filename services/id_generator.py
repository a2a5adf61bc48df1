"""Human-readable slug generation from post titles.

Generates URL-safe kebab-case slugs with uniqueness guarantees.
Format: "Hello, World!" becomes "hello-world", with numeric suffix if needed
(`hello-world-2`). Slugs are the public URL key of a post: /blog/hello-world
"""
import re
from typing import Optional

from services.errors import SlugGenerationFailed

MAX_SLUG_ATTEMPTS = 50
FALLBACK_SLUG = "post"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def derive_slug(title: str) -> str:
    """
    Normalize a title to a kebab-case URL slug.

    Examples:
        "Hello, World!" -> "hello-world"
        "  React Native & Expo  " -> "react-native-expo"
        "!!!" -> ""
    """
    if not title:
        return ""
    return _NON_SLUG_CHARS.sub("-", title.lower()).strip("-")


def resolve_unique_slug(db, base_slug: str, exclude_id: Optional[str] = None) -> str:
    """
    Return the first free slug in the sequence base, base-2, base-3, ...

    A slug held by ``exclude_id`` counts as free so re-saving a post under the
    same title keeps its slug. Raises SlugGenerationFailed after
    MAX_SLUG_ATTEMPTS candidates.
    """
    base_slug = base_slug or FALLBACK_SLUG

    candidate = base_slug
    for attempt in range(MAX_SLUG_ATTEMPTS):
        existing = db.table("blog_posts").select("id").eq("slug", candidate).limit(1).execute()
        if not existing.data or (exclude_id and existing.data[0]["id"] == exclude_id):
            return candidate
        candidate = f"{base_slug}-{attempt + 2}"

    raise SlugGenerationFailed(f"No free slug for '{base_slug}' after {MAX_SLUG_ATTEMPTS} attempts")
