"""
Seed the local SQLite database for development

Creates:
1. The dev admin identity (email = ADMIN_EMAIL), usable as dev-token-<id> in TEST_MODE
2. A regular dev user
3. Sample blog posts, loaded through the legacy post normalizer

Run with: uv run python seed_dev_data.py
"""

import os
import sys
from dotenv import load_dotenv

# Load environment variables before importing settings
load_dotenv(os.getenv("ENV_FILE", ".env"))

from config import load_settings_from_env
from database_adapter import DatabaseAdapter, utcnow_ms
from services.content import normalize_legacy_post

# Fixed IDs so resets keep dev tokens stable
DEV_ADMIN_ID = "49366adb-2d13-412f-9ae5-4c35dbffab10"
DEV_USER_ID = "2a3b7c3e-971b-4b42-9c8c-0f1843486c50"

# Older export format (camelCase keys, ISO dates) on purpose
SAMPLE_POSTS = [
    {
        "_id": "1",
        "title": "Building Scalable Mobile Apps with React Native & Expo",
        "excerpt": "Architectural patterns I learned while building production-ready mobile applications.",
        "content": (
            "# Building Scalable Mobile Apps with React Native & Expo\n\n"
            "When I started building **Planrr**, I knew we needed an architecture that could scale.\n\n"
            "## Lessons Learned\n\n"
            "1. **Start with TypeScript**\n2. **Invest in offline-first**\n3. **Test on real devices**\n"
        ),
        "coverImage": "/blog/react-native-expo.jpg",
        "tags": ["React Native", "Expo", "Mobile Development", "Architecture"],
        "createdAt": "2025-01-03T10:00:00Z",
        "status": "published",
    },
    {
        "_id": "2",
        "title": "From Moringa to Production: My Developer Journey",
        "excerpt": "Reflections on moving from bootcamp learning to shipping real products at startups.",
        "content": (
            "# From Moringa to Production\n\n"
            "It's been an incredible journey from my first lines of code to shipping production applications.\n\n"
            "## Advice for New Developers\n\n"
            "Ship early, read other people's code, build in public, find mentors.\n"
        ),
        "coverImage": "/blog/developer-journey.jpg",
        "tags": "Career, Learning, Bootcamp, Personal",
        "createdAt": "2025-01-01T14:30:00Z",
        "status": "published",
    },
    {
        "_id": "3",
        "title": "Integrating AI into Full-Stack Applications",
        "excerpt": "",
        "content": "# Integrating AI into Full-Stack Applications\n\nDraft notes on structured prompts and validation layers.\n",
        "tags": ["AI", "TypeScript"],
        "createdAt": "2024-12-28T09:00:00Z",
    },
]


def seed(db: DatabaseAdapter, admin_email: str) -> int:
    """Insert dev users and any sample posts whose slug is not taken yet."""
    users = [
        {"id": DEV_ADMIN_ID, "email": admin_email, "name": "Admin User"},
        {"id": DEV_USER_ID, "email": "user@example.com", "name": "Regular User"},
    ]
    for user in users:
        existing = db.table("users").select("id").eq("id", user["id"]).execute()
        if existing.data:
            print(f"  User {user['email']} already exists")
            continue
        db.table("users").insert(user).execute()
        print(f"✓ Created user {user['email']} (dev-token-{user['id']})")

    created = 0
    now = utcnow_ms()
    for raw in SAMPLE_POSTS:
        record = normalize_legacy_post(raw, now)
        record.pop("id", None)
        record["author_id"] = DEV_ADMIN_ID
        existing = db.table("blog_posts").select("id").eq("slug", record["slug"]).execute()
        if existing.data:
            print(f"  Post '{record['slug']}' already exists")
            continue
        db.table("blog_posts").insert(record).execute()
        created += 1
        print(f"✓ Created {record['status']} post '{record['slug']}'")
    return created


def main() -> int:
    settings = load_settings_from_env()
    if not settings.DATABASE_URL:
        print("Error: DATABASE_URL must point at a local SQLite database")
        print("This script never writes to Supabase.")
        return 1
    if not settings.ADMIN_EMAIL:
        print("Error: ADMIN_EMAIL must be set so the dev admin can manage posts")
        return 1

    db = DatabaseAdapter(settings)
    db.init()
    created = seed(db, settings.ADMIN_EMAIL)
    print(f"\nDone: {created} post(s) created")
    return 0


if __name__ == "__main__":
    sys.exit(main())
