"""Content helpers: reading time, excerpts, tag parsing and legacy record cleanup."""
import math
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional, Union

from services.id_generator import FALLBACK_SLUG, derive_slug

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 150


def calculate_reading_time(content: str) -> int:
    """Minutes to read ``content`` at 200 words/minute, never less than one."""
    word_count = len((content or "").split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def derive_excerpt(title: str, excerpt: Optional[str] = None) -> str:
    """Use the given excerpt, or fall back to the first 150 chars of the title."""
    if excerpt and excerpt.strip():
        return excerpt.strip()
    return title.strip()[:EXCERPT_LENGTH] + "..."


def parse_tags(value: Union[str, List[str], None]) -> List[str]:
    """Accept a list or a comma separated string; trim entries and drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [tag.strip() for tag in value if tag and tag.strip()]


def to_timestamp_ms(value: Optional[object]) -> Optional[int]:
    """Coerce ms numbers, datetimes and ISO strings into epoch milliseconds."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=UTC)
        return int(dt.timestamp() * 1000)
    if isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        dt = dt if dt.tzinfo else dt.replace(tzinfo=UTC)
        return int(dt.timestamp() * 1000)
    return None


def normalize_legacy_post(raw: Dict[str, Any], now_ms: int) -> Dict[str, Any]:
    """Convert an older post document into a current ``blog_posts`` record.

    Older exports used camelCase keys, ``_id``, ISO date strings and could omit
    slug, status or reading time. Published posts without a publish time take
    their creation time.
    """
    def pick(*keys, default=None):
        for key in keys:
            if raw.get(key) is not None:
                return raw[key]
        return default

    title = pick("title", default="Untitled")
    content = pick("content", default="")
    status = pick("status", default="draft")
    if status not in ("draft", "published"):
        status = "draft"

    created_at = to_timestamp_ms(pick("created_at", "createdAt")) or now_ms
    published_at = to_timestamp_ms(pick("published_at", "publishedAt"))
    if published_at is None and status == "published":
        published_at = created_at

    record = {
        "title": title,
        "slug": derive_slug(pick("slug") or title) or FALLBACK_SLUG,
        "excerpt": pick("excerpt", default=""),
        "content": content,
        "cover_image": pick("cover_image", "coverImage"),
        "tags": parse_tags(pick("tags")),
        "status": status,
        "published_at": published_at,
        "created_at": created_at,
        "updated_at": to_timestamp_ms(pick("updated_at", "updatedAt")) or created_at,
        "reading_time": pick("reading_time", "readingTime") or calculate_reading_time(content),
        "author_id": pick("author_id", "authorId"),
    }
    legacy_id = pick("id", "_id")
    if legacy_id is not None:
        record["id"] = str(legacy_id)
    return record
