"""
Endpoint registry for the ``?api=`` dispatcher.

``ENDPOINTS`` maps each endpoint name to its handler together with the
usage line and parameter notes clients see in the ``info`` response and in
the body of an "Invalid endpoint" error. Blog endpoints are listed only
when the blog database is installed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from . import API_VERSION
from .blog import handlers as blog
from .blog.store import blog_exists
from .cms import handlers as cms
from .cms.store import load_site
from .context import ApiRequest, Payload
from .errors import UnknownEndpointError


logger = logging.getLogger(__name__)

Handler = Callable[[ApiRequest], Payload]


@dataclass(frozen=True)
class Endpoint:
    handler: Handler
    url: str
    description: str
    params: Dict[str, str] = field(default_factory=dict)
    blog: bool = False
    # Short text used in the "Invalid endpoint" listing, when it differs
    summary: Optional[str] = None

    def usage(self) -> str:
        return f"{self.url} - {self.summary or self.description}"

    def describe(self) -> Dict[str, object]:
        entry: Dict[str, object] = {
            "url": self.url,
            "method": "GET",
            "description": self.description,
        }
        if self.params:
            entry["params"] = dict(self.params)
        return entry


def get_info(req: ApiRequest) -> Payload:
    site = load_site(req.settings)
    has_blog = blog_exists(req.settings.blog_db_path)
    return {
        "success": True,
        "api_version": API_VERSION,
        "site_name": site.site_name,
        "site_url": site.site_url,
        "auth_required": req.config.require_auth,
        "simpleblog_enabled": has_blog,
        "endpoints": {
            name: endpoint.describe()
            for name, endpoint in ENDPOINTS.items()
            if name != "info" and (has_blog or not endpoint.blog)
        },
    }


ENDPOINTS: Dict[str, Endpoint] = {
    # CMS
    "info": Endpoint(get_info, "?api=info", "API information"),
    "pages": Endpoint(
        cms.get_all_pages, "?api=pages", "Get all pages",
        params={
            "include_private": "boolean (optional)",
            "limit": "integer (optional)",
            "offset": "integer (optional)",
            "sort": "string (optional)",
            "order": "asc|desc (optional)",
        },
    ),
    "page": Endpoint(
        cms.get_single_page, "?api=page&slug=SLUG", "Get single page",
        params={"slug": "string (required)"},
    ),
    "menu": Endpoint(cms.get_menu, "?api=menu", "Get menu structure", summary="Get menu"),
    "navigation": Endpoint(
        cms.get_navigation, "?api=navigation", "Get hierarchical navigation",
        summary="Get navigation",
    ),
    "search": Endpoint(
        cms.search_pages, "?api=search&q=QUERY", "Search pages",
        params={"q": "string (required)"},
    ),
    "components": Endpoint(
        cms.get_components, "?api=components", "Get components",
        params={"name": "string (optional)"},
    ),
    "settings": Endpoint(
        cms.get_settings, "?api=settings", "Get site settings", summary="Get settings",
    ),
    # SimpleBlog
    "blog/posts": Endpoint(
        blog.get_posts, "?api=blog/posts", "Get all blog posts",
        params={"limit": "integer (optional)", "offset": "integer (optional)"},
        blog=True,
    ),
    "blog/post": Endpoint(
        blog.get_single_post, "?api=blog/post&slug=SLUG", "Get single blog post",
        params={"slug": "string (required)"}, blog=True, summary="Get single post",
    ),
    "blog/categories": Endpoint(
        blog.get_categories, "?api=blog/categories", "Get all blog categories",
        blog=True, summary="Get categories",
    ),
    "blog/category": Endpoint(
        blog.get_category_posts, "?api=blog/category&slug=SLUG", "Get posts by category",
        params={
            "slug": "string (required)",
            "limit": "integer (optional)",
            "offset": "integer (optional)",
        },
        blog=True,
    ),
    "blog/recent": Endpoint(
        blog.get_recent_posts, "?api=blog/recent&limit=5", "Get recent blog posts",
        params={"limit": "integer (optional, default: 5)"}, blog=True,
        summary="Get recent posts",
    ),
    "blog/search": Endpoint(
        blog.search_posts, "?api=blog/search&q=QUERY", "Search blog posts",
        params={"q": "string (required)"}, blog=True, summary="Search posts",
    ),
    "blog/comments": Endpoint(
        blog.get_comments, "?api=blog/comments&post_id=ID", "Get comments for post",
        params={"post_id": "integer (optional)"}, blog=True, summary="Get comments",
    ),
}


def available_endpoints(req: ApiRequest) -> Dict[str, str]:
    has_blog = blog_exists(req.settings.blog_db_path)
    return {
        name: endpoint.usage()
        for name, endpoint in ENDPOINTS.items()
        if has_blog or not endpoint.blog
    }


def dispatch(name: str, req: ApiRequest) -> Payload:
    """Run the handler registered for ``name``.

    Raises
    ------
    UnknownEndpointError
        When no endpoint of that name exists. Blog endpoints stay routable
        without a database and answer with their own 404.
    """
    endpoint = ENDPOINTS.get(name)
    if endpoint is None:
        raise UnknownEndpointError(name, available_endpoints(req))
    logger.debug("Dispatching %s", name, extra={"endpoint": name})
    return endpoint.handler(req)
