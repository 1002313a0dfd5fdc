"""
Pydantic schema definitions for the CMS page store.

``PageRecord`` is what the store reads out of one page XML file. The
remaining models are the shapes the API hands to clients: a page in a
listing, a single page, a menu entry, a navigation node, a search hit, a
component snippet and the site identity block. They are dumped in field
order, so the declaration order below is also the JSON key order.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PageRecord(BaseModel):
    """One page file as stored by the CMS.

    Text fields are empty strings when the element is missing. The
    ``menu_status`` and ``private`` flags are true only for a literal
    ``Y`` in the file.
    """

    slug: str = ""
    title: str = ""
    content: str = ""
    meta: str = ""
    meta_keywords: str = ""
    parent: str = ""
    template: str = ""
    pub_date: str = ""
    menu_text: str = ""
    menu_status: bool = False
    menu_order: int = 0
    private: bool = False


class Page(BaseModel):
    """A page as it appears in the ``pages`` listing."""

    slug: str
    title: str
    content: str
    excerpt: str
    meta_description: str
    meta_keywords: str
    parent: str
    template: str
    date: str
    menu_status: bool
    menu_order: int
    private: bool
    url: str


class PageDetail(BaseModel):
    """A single page: the listing fields minus the excerpt, plus menu text."""

    slug: str
    title: str
    content: str
    meta_description: str
    meta_keywords: str
    parent: str
    template: str
    date: str
    menu_status: bool
    menu_order: int
    menu_text: str
    private: bool
    url: str


class MenuItem(BaseModel):
    slug: str
    title: str
    menu_text: str
    parent: str
    menu_order: int
    url: str


class NavItem(MenuItem):
    children: List[NavItem] = Field(default_factory=list)


class SearchHit(BaseModel):
    slug: str
    title: str
    excerpt: str
    meta_description: str
    url: str


class Component(BaseModel):
    name: str
    content: str
    title: str


class SiteSettings(BaseModel):
    site_name: str = ""
    site_url: str = ""
    template: str = ""
