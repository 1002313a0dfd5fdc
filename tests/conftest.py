"""Shared fixtures: a throwaway GetSimple data directory and blog databases."""

import os
import sqlite3
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

# Keep a developer's environment out of the tests
for _var in ("HEADLESS_SITE_NAME", "HEADLESS_SITE_URL", "HEADLESS_TEMPLATE", "HEADLESS_CONFIG_FILE"):
    os.environ.pop(_var, None)

from headless_api.config import Settings, get_settings  # noqa: E402
from headless_api.main import app  # noqa: E402


SITE_URL = "http://example.com/"

LONG_TEXT = "Lorem ipsum dolor sit amet. " * 12


def _cdata(value: str) -> str:
    return f"<![CDATA[{value}]]>"


def write_page(pages: Path, slug: str, **fields: str) -> None:
    values = {
        "pubDate": "Mon, 01 Jan 2024 10:00:00 +0000",
        "title": slug.title(),
        "url": slug,
        "meta": "",
        "metad": "",
        "menu": "",
        "menuOrder": "0",
        "menuStatus": "",
        "template": "template.php",
        "parent": "",
        "content": "",
        "private": "",
    }
    values.update(fields)
    body = "".join(f"<{tag}>{_cdata(val)}</{tag}>" for tag, val in values.items())
    (pages / f"{slug}.xml").write_text(
        f'<?xml version="1.0" encoding="UTF-8"?>\n<item>{body}</item>\n', encoding="utf-8",
    )


def write_component(components: Path, name: str, title: str, content: str) -> None:
    (components / f"{name}.xml").write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<item><title>{_cdata(title)}</title><content>{_cdata(content)}</content></item>\n",
        encoding="utf-8",
    )


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    pages = root / "pages"
    other = root / "other"
    components = other / "components"
    for d in (pages, components):
        d.mkdir(parents=True)

    write_page(
        pages, "about", title="About Us", content="<p>We build <strong>things</strong>.</p>",
        meta="About the company", metad="company, team", menu="About",
        menuStatus="Y", menuOrder="3", pubDate="2024-02-01",
    )
    write_page(
        pages, "contact", title="Contact", content="<p>Write to us</p>",
        menu="Contact", menuStatus="Y", menuOrder="2",
    )
    write_page(
        pages, "history", title="History", content="<p>Founded long ago</p>",
        parent="team", menu="History", menuStatus="Y", menuOrder="5",
    )
    write_page(
        pages, "index", title="Welcome", content="<h1>Hello</h1><p>Welcome to our site.</p>",
        meta="Homepage", menu="Home", menuStatus="Y", menuOrder="1", template="home.php",
    )
    write_page(
        pages, "secret", title="Secret", content="<p>Hidden welcome</p>",
        private="Y", menuOrder="abc",
    )
    write_page(
        pages, "team", title="Our Team", content=f"<p>{LONG_TEXT}</p>",
        parent="about", menu="Team", menuStatus="Y", menuOrder="4",
    )

    (other / "website.xml").write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<item><SITENAME>Example Site</SITENAME>"
        f"<SITEURL>{SITE_URL}</SITEURL><TEMPLATE>Innovation</TEMPLATE></item>\n",
        encoding="utf-8",
    )

    write_component(components, "footer", "Footer", "<p>(c) Example</p>")
    write_component(components, "sidebar", "Sidebar", "<ul><li>Links</li></ul>")
    return root


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(data_path=data_dir, _env_file=None)


@pytest.fixture
def client(settings: Settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api(client):
    """Call ``GET /?api=<endpoint>`` with extra query parameters."""

    def _call(endpoint: str, headers: Optional[Dict[str, str]] = None, **params):
        return client.get("/", params={"api": endpoint, **params}, headers=headers or {})

    return _call


# ─── Blog databases ─────────────────────────────────────────────

CURRENT_SCHEMA = """
CREATE TABLE categories (id INTEGER PRIMARY KEY, name TEXT, slug TEXT);
CREATE TABLE posts (
    id INTEGER PRIMARY KEY, title TEXT, slug TEXT, content TEXT,
    category_id INTEGER, date TEXT, status TEXT, scheduled_date TEXT,
    description TEXT, cover_photo TEXT
);
CREATE TABLE comments (
    id INTEGER PRIMARY KEY, post_id INTEGER, author TEXT, email TEXT,
    content TEXT, date TEXT, approved INTEGER
);
INSERT INTO categories VALUES (1, 'News', 'news'), (2, 'Guides', 'guides'), (3, 'Empty', 'empty');
INSERT INTO posts VALUES
    (1, 'First post', 'first-post', '<p>Hello blog world</p>', 1, '2024-01-01 09:00:00',
     'published', NULL, 'Intro post', '/img/first.jpg'),
    (2, 'Python tips', 'python-tips', '<p>Use list comprehensions</p>', 2, '2024-02-01 09:00:00',
     'published', NULL, '', NULL),
    (3, 'Loose ends', 'loose', '<p>No category here</p>', NULL, '2024-03-01 09:00:00',
     'draft', '2024-04-01 09:00:00', NULL, NULL);
INSERT INTO comments VALUES
    (1, 1, 'Ann', 'ann@example.com', 'Nice!', '2024-01-02 10:00:00', 1),
    (2, 1, 'Spam', 'spam@example.com', 'Buy now', '2024-01-03 10:00:00', 0),
    (3, 2, 'Bob', 'bob@example.com', 'Thanks', '2024-02-05 10:00:00', 1);
"""

LEGACY_SCHEMA = """
CREATE TABLE categories (id INTEGER PRIMARY KEY, name TEXT, slug TEXT);
CREATE TABLE posts (
    id INTEGER PRIMARY KEY, title TEXT, slug TEXT, content TEXT,
    category_id INTEGER, date TEXT
);
CREATE TABLE comments (
    id INTEGER PRIMARY KEY, post_id INTEGER, author TEXT, email TEXT,
    content TEXT, date TEXT
);
INSERT INTO categories VALUES (1, 'News', 'news');
INSERT INTO posts VALUES
    (1, 'First post', 'first-post', '<p>Hello blog world</p>', 1, '2024-01-01 09:00:00'),
    (2, 'Second post', 'second-post', '<p>More intro text</p>', 1, '2024-02-01 09:00:00');
INSERT INTO comments VALUES
    (1, 1, 'Ann', 'ann@example.com', 'Nice!', '2024-01-02 10:00:00'),
    (2, 1, 'Spam', 'spam@example.com', 'Buy now', '2024-01-03 10:00:00');
"""


def _build_db(path: Path, script: str) -> Path:
    conn = sqlite3.connect(path)
    try:
        conn.executescript(script)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def blog_db(settings: Settings) -> Path:
    return _build_db(settings.blog_db_path, CURRENT_SCHEMA)


@pytest.fixture
def legacy_blog_db(settings: Settings) -> Path:
    return _build_db(settings.blog_db_path, LEGACY_SCHEMA)
