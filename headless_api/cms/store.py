"""
Read access to the CMS flat-file store.

The host CMS keeps one XML file per page under ``pages/``, component
snippets under ``other/components/`` and the site identity in
``other/website.xml``. This module only reads those files; the CMS owns
and writes them. Every scan walks the directory in filename order, which
is the order the API reports pages in unless a sort is requested.

A file that cannot be parsed is logged and skipped during scans and
treated as absent when fetched by name. Names coming from the query string
are accepted only when they are plain file names, so a request can never
reach outside the store directories.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from ..config import Settings
from ..text import to_int
from .schemas import Component, PageRecord, SiteSettings


logger = logging.getLogger(__name__)


def _safe_name(name: str) -> bool:
    """Return True when ``name`` is a bare file stem with no path parts."""
    if not name or name in (".", ".."):
        return False
    if "\x00" in name or "/" in name or "\\" in name:
        return False
    return Path(name).name == name


def _read_xml(path: Path) -> Optional[ET.Element]:
    try:
        return ET.parse(path).getroot()
    except (ET.ParseError, OSError) as exc:
        logger.warning("Skipping unreadable XML file %s: %s", path, exc)
        return None


def _text(root: ET.Element, tag: str) -> str:
    """Text of the first ``tag`` child, CDATA included; empty when missing."""
    node = root.find(tag)
    if node is None or node.text is None:
        return ""
    return node.text


def _to_page(root: ET.Element) -> PageRecord:
    return PageRecord(
        slug=_text(root, "url"),
        title=_text(root, "title"),
        content=_text(root, "content"),
        meta=_text(root, "meta"),
        meta_keywords=_text(root, "metad"),
        parent=_text(root, "parent"),
        template=_text(root, "template"),
        pub_date=_text(root, "pubDate"),
        menu_text=_text(root, "menu"),
        menu_status=_text(root, "menuStatus") == "Y",
        menu_order=to_int(_text(root, "menuOrder")),
        private=_text(root, "private") == "Y",
    )


def list_pages(pages_path: Path) -> List[PageRecord]:
    """Load every page file in ``pages_path``, in filename order.

    Parameters
    ----------
    pages_path : Path
        Directory holding the ``*.xml`` page files.

    Returns
    -------
    List[PageRecord]
        One record per readable file. A missing directory yields an
        empty list.
    """
    if not pages_path.is_dir():
        return []
    pages: List[PageRecord] = []
    for file in sorted(pages_path.glob("*.xml")):
        root = _read_xml(file)
        if root is not None:
            pages.append(_to_page(root))
    return pages


def get_page(pages_path: Path, slug: str) -> Optional[PageRecord]:
    """Load the page stored as ``<slug>.xml``, or ``None``."""
    if not _safe_name(slug):
        return None
    file = pages_path / f"{slug}.xml"
    if not file.is_file():
        return None
    root = _read_xml(file)
    return _to_page(root) if root is not None else None


def _to_component(file: Path, root: ET.Element) -> Component:
    return Component(
        name=file.stem,
        content=_text(root, "content"),
        title=_text(root, "title"),
    )


def list_components(components_path: Path) -> Optional[List[Component]]:
    """Load all component snippets.

    Returns ``None`` when the components directory does not exist, so the
    caller can tell "no components feature" from "no components yet".
    """
    if not components_path.is_dir():
        return None
    components: List[Component] = []
    for file in sorted(components_path.glob("*.xml")):
        root = _read_xml(file)
        if root is not None:
            components.append(_to_component(file, root))
    return components


def get_component(components_path: Path, name: str) -> Optional[Component]:
    if not _safe_name(name):
        return None
    file = components_path / f"{name}.xml"
    if not file.is_file():
        return None
    root = _read_xml(file)
    return _to_component(file, root) if root is not None else None


def load_site(settings: Settings) -> SiteSettings:
    """Resolve the site identity.

    Each field comes from the environment settings when set there,
    otherwise from ``other/website.xml`` (``SITENAME``, ``SITEURL``,
    ``TEMPLATE``), otherwise it is empty.
    """
    stored = SiteSettings()
    if settings.website_file.is_file():
        root = _read_xml(settings.website_file)
        if root is not None:
            stored = SiteSettings(
                site_name=_text(root, "SITENAME"),
                site_url=_text(root, "SITEURL"),
                template=_text(root, "TEMPLATE"),
            )
    return SiteSettings(
        site_name=settings.site_name if settings.site_name is not None else stored.site_name,
        site_url=settings.site_url if settings.site_url is not None else stored.site_url,
        template=settings.template if settings.template is not None else stored.template,
    )
