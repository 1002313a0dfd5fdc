"""
Query handlers for the CMS endpoints.

Each handler takes the ``ApiRequest`` built by the dispatcher and returns
the JSON payload for one ``?api=`` endpoint:

- ``pages``       : every page, with optional sort and offset/limit slicing
- ``page``        : one page by slug
- ``menu``        : pages shown in the menu, by menu order
- ``navigation``  : the menu as a two-level tree
- ``search``      : substring search over title, content and description
- ``components``  : component snippets, all or one by name
- ``settings``    : site identity

Errors are raised as ``ApiError`` subclasses and rendered by the
dispatcher.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from typing_extensions import Literal

from ..context import ApiRequest, Payload
from ..errors import NotFoundError
from ..text import excerpt, strip_tags
from . import store
from .schemas import (
    MenuItem,
    NavItem,
    Page,
    PageDetail,
    PageRecord,
    SearchHit,
)


SortOrder = Literal["asc", "desc"]


def _page_url(site_url: str, slug: str) -> str:
    return f"{site_url}{slug}/"


def _to_listed_page(record: PageRecord, site_url: str) -> Page:
    return Page(
        slug=record.slug,
        title=record.title,
        content=record.content,
        excerpt=excerpt(record.content),
        meta_description=record.meta,
        meta_keywords=record.meta_keywords,
        parent=record.parent,
        template=record.template,
        date=record.pub_date,
        menu_status=record.menu_status,
        menu_order=record.menu_order,
        private=record.private,
        url=_page_url(site_url, record.slug),
    )


def _to_menu_item(record: PageRecord, site_url: str) -> MenuItem:
    return MenuItem(
        slug=record.slug,
        title=record.title,
        menu_text=record.menu_text,
        parent=record.parent,
        menu_order=record.menu_order,
        url=_page_url(site_url, record.slug),
    )


def sort_pages(pages: List[Dict[str, Any]], field: str, order: SortOrder) -> List[Dict[str, Any]]:
    """Stable sort of page dicts on ``field``.

    An unknown field leaves the input order untouched, so clients passing a
    typo still get the default filename order rather than an error.
    """
    if not pages or field not in pages[0]:
        return pages
    return sorted(pages, key=lambda p: p[field], reverse=(order == "desc"))


def slice_window(items: List[Any], offset: int, limit: Optional[int]) -> List[Any]:
    """Apply offset/limit only when a positive limit was requested."""
    if not limit or limit < 0:
        return items
    start = max(0, offset)
    return items[start:start + limit]


def get_all_pages(req: ApiRequest) -> Payload:
    site_url = store.load_site(req.settings).site_url
    include_private = req.get("include_private") == "true"
    limit = req.get_int("limit")
    offset = req.get_int("offset", 0)

    pages = [
        _to_listed_page(record, site_url).model_dump()
        for record in store.list_pages(req.settings.pages_path)
        if include_private or not record.private
    ]

    sort_field = req.get("sort")
    if sort_field is not None:
        order: SortOrder = "desc" if req.get("order") == "desc" else "asc"
        pages = sort_pages(pages, sort_field, order)

    total = len(pages)
    pages = slice_window(pages, offset, limit)

    return {
        "success": True,
        "total": total,
        "count": len(pages),
        "offset": offset,
        "limit": limit,
        "pages": pages,
    }


def get_single_page(req: ApiRequest) -> Payload:
    slug = req.require("slug", "Slug parameter is required")
    record = store.get_page(req.settings.pages_path, slug)
    if record is None:
        raise NotFoundError("Page not found")

    site_url = store.load_site(req.settings).site_url
    page = PageDetail(
        slug=record.slug,
        title=record.title,
        content=record.content,
        meta_description=record.meta,
        meta_keywords=record.meta_keywords,
        parent=record.parent,
        template=record.template,
        date=record.pub_date,
        menu_status=record.menu_status,
        menu_order=record.menu_order,
        menu_text=record.menu_text,
        private=record.private,
        url=_page_url(site_url, record.slug),
    )
    return {"success": True, "page": page.model_dump()}


def get_menu(req: ApiRequest) -> Payload:
    site_url = store.load_site(req.settings).site_url
    menu = [
        _to_menu_item(record, site_url)
        for record in store.list_pages(req.settings.pages_path)
        if record.menu_status
    ]
    menu.sort(key=lambda item: item.menu_order)
    return {
        "success": True,
        "count": len(menu),
        "menu": [item.model_dump() for item in menu],
    }


def build_navigation(records: List[PageRecord], site_url: str) -> List[NavItem]:
    """Arrange menu pages into roots and their direct children.

    Pages without a parent are roots. A page whose parent is a root is
    attached to it; a page whose parent is not a root (a grandchild, or a
    parent that is hidden from the menu) is left out. Roots and children
    keep filename order. When two files share a slug the later one wins
    but keeps the position of the first.
    """
    nodes: Dict[str, NavItem] = {}
    for record in records:
        if not record.menu_status:
            continue
        nodes[record.slug] = NavItem(**_to_menu_item(record, site_url).model_dump())

    roots: Dict[str, NavItem] = {}
    children: Dict[str, List[NavItem]] = {}
    for slug, node in nodes.items():
        if not node.parent:
            roots[slug] = node
        else:
            children.setdefault(node.parent, []).append(node)

    for slug, node in roots.items():
        node.children = children.get(slug, [])
    return list(roots.values())


def get_navigation(req: ApiRequest) -> Payload:
    site_url = store.load_site(req.settings).site_url
    navigation = build_navigation(store.list_pages(req.settings.pages_path), site_url)
    return {
        "success": True,
        "navigation": [node.model_dump() for node in navigation],
    }


def search_pages(req: ApiRequest) -> Payload:
    query = req.require("q", "Query parameter (q) is required")
    needle = query.lower()
    site_url = store.load_site(req.settings).site_url

    results: List[Dict[str, Any]] = []
    for record in store.list_pages(req.settings.pages_path):
        if record.private:
            continue
        haystacks = (
            record.title.lower(),
            strip_tags(record.content).lower(),
            record.meta.lower(),
        )
        if any(needle in h for h in haystacks):
            hit = SearchHit(
                slug=record.slug,
                title=record.title,
                excerpt=excerpt(record.content),
                meta_description=record.meta,
                url=_page_url(site_url, record.slug),
            )
            results.append(hit.model_dump())

    return {
        "success": True,
        "query": query,
        "count": len(results),
        "results": results,
    }


def get_components(req: ApiRequest) -> Payload:
    path = req.settings.components_path
    if not path.is_dir():
        return {"success": True, "count": 0, "components": []}

    name = req.get("name")
    if name is not None:
        component = store.get_component(path, name)
        if component is None:
            raise NotFoundError("Component not found")
        return {"success": True, "component": component.model_dump()}

    components = store.list_components(path) or []
    return {
        "success": True,
        "count": len(components),
        "components": [c.model_dump() for c in components],
    }


def get_settings(req: ApiRequest) -> Payload:
    return {"success": True, "settings": store.load_site(req.settings).model_dump()}
