"""Tests for the development seed script"""
from seed_dev_data import DEV_ADMIN_ID, SAMPLE_POSTS, seed


def test_seed_creates_users_and_posts(clean_database):
    created = seed(clean_database, "admin@example.com")
    assert created == len(SAMPLE_POSTS)

    admin = clean_database.table("users").select("*").eq("id", DEV_ADMIN_ID).execute().data[0]
    assert admin["email"] == "admin@example.com"

    posts = clean_database.table("blog_posts").select("*").execute().data
    assert {p["status"] for p in posts} == {"draft", "published"}
    assert all(p["author_id"] == DEV_ADMIN_ID for p in posts)
    assert all(p["published_at"] for p in posts if p["status"] == "published")


def test_seed_is_repeatable(clean_database):
    seed(clean_database, "admin@example.com")
    assert seed(clean_database, "admin@example.com") == 0
    assert len(clean_database.table("blog_posts").select("id").execute().data) == len(SAMPLE_POSTS)
