"""
Pydantic schemas for the blog endpoints.

Fields that depend on an optional database column are declared
``Optional`` and only set when the column exists. Responses are dumped
with ``exclude_unset=True``: a detected column whose value is NULL still
appears as ``null``, while a column the installed schema lacks does not
appear at all.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class PostCategory(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None


class BlogPost(BaseModel):
    """A post in any of the blog listings, or a single post."""

    id: int
    slug: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[PostCategory] = None
    date: Any = None
    url: str
    excerpt: Optional[str] = None
    description: Optional[str] = None
    cover_photo: Optional[str] = None
    # Older releases stored status as an integer flag
    status: Any = None
    scheduled_date: Any = None


class Category(BaseModel):
    id: int
    name: Optional[str] = None
    slug: Optional[str] = None
    post_count: int = 0
    url: str


class Comment(BaseModel):
    id: int
    post_id: Optional[int] = None
    author: Optional[str] = None
    email: Optional[str] = None
    content: Optional[str] = None
    date: Any = None
    approved: Optional[bool] = None
