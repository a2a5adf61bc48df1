"""Tests for slug derivation and uniqueness resolution"""
import re

import pytest

from services.id_generator import derive_slug, resolve_unique_slug

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

TITLES = [
    "Hello, World!",
    "  Leading and trailing  ",
    "React Native & Expo: Lessons",
    "Ünïcödé Tïtle",
    "3D Printing 101",
    "---already-slugged---",
    "UPPER lower MiXeD",
    "tabs\tand\nnewlines",
    "!!!",
    "",
]


@pytest.mark.parametrize("title,expected", [
    ("Hello, World!", "hello-world"),
    ("From Moringa to Production: My Developer Journey", "from-moringa-to-production-my-developer-journey"),
    ("3D Printer", "3d-printer"),
    ("C++ & Rust", "c-rust"),
    ("!!!", ""),
    ("", ""),
])
def test_derive_slug_examples(title, expected):
    assert derive_slug(title) == expected


@pytest.mark.parametrize("title", TITLES)
def test_derive_slug_shape_and_idempotence(title):
    slug = derive_slug(title)
    assert slug == slug.lower()
    assert slug == "" or SLUG_PATTERN.match(slug)
    assert derive_slug(slug) == slug


def _insert(db, slug):
    return db.table("blog_posts").insert(
        {"title": slug, "slug": slug, "content": "", "status": "draft"}
    ).execute().data[0]


class TestResolveUniqueSlug:

    def test_free_base_is_used(self, clean_database):
        assert resolve_unique_slug(clean_database, "fresh") == "fresh"

    def test_collision_starts_suffix_at_two(self, clean_database):
        _insert(clean_database, "taken")
        assert resolve_unique_slug(clean_database, "taken") == "taken-2"

    def test_skips_every_taken_suffix(self, clean_database):
        for slug in ("taken", "taken-2", "taken-3"):
            _insert(clean_database, slug)
        assert resolve_unique_slug(clean_database, "taken") == "taken-4"

    def test_own_record_is_not_a_collision(self, clean_database):
        row = _insert(clean_database, "mine")
        assert resolve_unique_slug(clean_database, "mine", exclude_id=row["id"]) == "mine"

    def test_other_record_still_collides_with_exclusion(self, clean_database):
        _insert(clean_database, "shared")
        mine = _insert(clean_database, "other")
        assert resolve_unique_slug(clean_database, "shared", exclude_id=mine["id"]) == "shared-2"

    def test_empty_base_falls_back(self, clean_database):
        assert resolve_unique_slug(clean_database, "") == "post"
