"""
Query handlers for the ``blog/*`` endpoints.

Every handler first validates its required parameters, then checks that
the blog database is installed, then reads through ``BlogStore``. Optional
post and comment fields follow the detected ``BlogStructure``.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..context import ApiRequest, Payload
from ..errors import BlogUnavailableError, NotFoundError
from ..text import excerpt
from ..cms.store import load_site
from .schemas import BlogPost, Category, Comment, PostCategory
from .store import BlogStore, BlogStructure, Row, blog_exists


DEFAULT_PAGE_SIZE = 10
DEFAULT_RECENT = 5
EXCERPT_LENGTH = 200
RECENT_EXCERPT_LENGTH = 150


def open_store(req: ApiRequest, message: str = "SimpleBlog not installed") -> BlogStore:
    db_path = req.settings.blog_db_path
    if not blog_exists(db_path):
        raise BlogUnavailableError(message)
    return BlogStore(db_path)


def post_url(site_url: str, slug: str) -> str:
    return f"{site_url}blog/{slug}"


def post_excerpt(row: Row, structure: BlogStructure, length: int = EXCERPT_LENGTH) -> str:
    """The stored description when there is one, else a cut of the content."""
    if structure.has_description and row.get("description"):
        return row["description"]
    return excerpt(row.get("content"), length)


def _window(req: ApiRequest, default_limit: int) -> Dict[str, int]:
    limit = req.get_int("limit", default_limit)
    offset = req.get_int("offset", 0)
    return {"limit": max(0, limit), "offset": max(0, offset)}


def _dump(models: List[Any]) -> List[Dict[str, Any]]:
    return [m.model_dump(exclude_unset=True) for m in models]


def _full_post(row: Row, structure: BlogStructure, site_url: str, with_excerpt: bool) -> BlogPost:
    fields: Dict[str, Any] = {
        "id": row["id"],
        "slug": row.get("slug"),
        "title": row.get("title"),
        "content": row.get("content"),
        "category": PostCategory(
            id=row.get("category_id"),
            name=row.get("category_name"),
            slug=row.get("category_slug"),
        ),
        "date": row.get("date"),
        "url": post_url(site_url, row.get("slug") or ""),
    }
    if with_excerpt:
        fields["excerpt"] = post_excerpt(row, structure)
    if structure.has_description:
        fields["description"] = row.get("description")
    if structure.has_cover_photo:
        fields["cover_photo"] = row.get("cover_photo")
    if structure.has_status:
        fields["status"] = row.get("status")
    if structure.has_scheduled:
        fields["scheduled_date"] = row.get("scheduled_date")
    return BlogPost(**fields)


def _teaser(
    row: Row,
    structure: BlogStructure,
    site_url: str,
    with_category: bool = True,
    excerpt_length: int = EXCERPT_LENGTH,
) -> BlogPost:
    """Short post form used by recent, search and per-category listings."""
    fields: Dict[str, Any] = {
        "id": row["id"],
        "slug": row.get("slug"),
        "title": row.get("title"),
        "date": row.get("date"),
        "url": post_url(site_url, row.get("slug") or ""),
        "excerpt": post_excerpt(row, structure, excerpt_length),
    }
    if with_category:
        fields["category"] = PostCategory(
            name=row.get("category_name"), slug=row.get("category_slug"),
        )
    if structure.has_cover_photo:
        fields["cover_photo"] = row.get("cover_photo")
    return BlogPost(**fields)


def get_posts(req: ApiRequest) -> Payload:
    blog = open_store(req, "SimpleBlog not installed or database not accessible")
    window = _window(req, DEFAULT_PAGE_SIZE)
    site_url = load_site(req.settings).site_url
    structure = blog.structure()

    total = blog.count_posts()
    posts = [
        _full_post(row, structure, site_url, with_excerpt=True)
        for row in blog.list_posts(window["limit"], window["offset"])
    ]
    return {
        "success": True,
        "total": total,
        "count": len(posts),
        "offset": window["offset"],
        "limit": window["limit"],
        "posts": _dump(posts),
    }


def get_single_post(req: ApiRequest) -> Payload:
    slug = req.require("slug", "Slug parameter is required")
    blog = open_store(req)
    structure = blog.structure()

    row = blog.get_post(slug)
    if row is None:
        raise NotFoundError("Post not found")

    site_url = load_site(req.settings).site_url
    post = _full_post(row, structure, site_url, with_excerpt=False)
    return {"success": True, "post": post.model_dump(exclude_unset=True)}


def get_categories(req: ApiRequest) -> Payload:
    blog = open_store(req)
    site_url = load_site(req.settings).site_url
    categories = [
        Category(
            id=row["id"],
            name=row.get("name"),
            slug=row.get("slug"),
            post_count=row.get("post_count") or 0,
            url=f"{site_url}blog/category/{row.get('slug')}",
        )
        for row in blog.list_categories()
    ]
    return {
        "success": True,
        "count": len(categories),
        "categories": _dump(categories),
    }


def get_category_posts(req: ApiRequest) -> Payload:
    slug = req.require("slug", "Category slug is required")
    blog = open_store(req)
    window = _window(req, DEFAULT_PAGE_SIZE)
    site_url = load_site(req.settings).site_url
    structure = blog.structure()

    category = blog.get_category(slug)
    if category is None:
        raise NotFoundError("Category not found")

    total = blog.count_posts(category["id"])
    posts = [
        _teaser(row, structure, site_url, with_category=False)
        for row in blog.list_category_posts(category["id"], window["limit"], window["offset"])
    ]
    return {
        "success": True,
        "category": {
            "id": category["id"],
            "name": category.get("name"),
            "slug": category.get("slug"),
        },
        "total": total,
        "count": len(posts),
        "offset": window["offset"],
        "limit": window["limit"],
        "posts": _dump(posts),
    }


def get_recent_posts(req: ApiRequest) -> Payload:
    blog = open_store(req)
    limit = _window(req, DEFAULT_RECENT)["limit"]
    site_url = load_site(req.settings).site_url
    structure = blog.structure()

    posts = [
        _teaser(row, structure, site_url, excerpt_length=RECENT_EXCERPT_LENGTH)
        for row in blog.list_posts(limit)
    ]
    return {"success": True, "count": len(posts), "posts": _dump(posts)}


def search_posts(req: ApiRequest) -> Payload:
    query = req.require("q", "Query parameter (q) is required")
    blog = open_store(req)
    site_url = load_site(req.settings).site_url
    structure = blog.structure()

    posts = [
        _teaser(row, structure, site_url)
        for row in blog.search_posts(query, structure.has_description)
    ]
    return {
        "success": True,
        "query": query,
        "count": len(posts),
        "results": _dump(posts),
    }


def get_comments(req: ApiRequest) -> Payload:
    blog = open_store(req)
    structure = blog.structure()

    comments: List[Comment] = []
    for row in blog.list_comments(req.get_int("post_id"), structure.has_approved):
        fields: Dict[str, Any] = {
            "id": row["id"],
            "post_id": row.get("post_id"),
            "author": row.get("author"),
            "email": row.get("email"),
            "content": row.get("content"),
            "date": row.get("date"),
        }
        if structure.has_approved:
            fields["approved"] = bool(row.get("approved"))
        comments.append(Comment(**fields))

    return {"success": True, "count": len(comments), "comments": _dump(comments)}
