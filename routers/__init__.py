"""Routers package for the portfolio blog API endpoints"""
from . import auth, blog_posts

__all__ = [
	"auth",
	"blog_posts",
]
