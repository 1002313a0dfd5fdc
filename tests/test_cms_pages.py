"""Page endpoints: pages, page, menu, navigation, search.

Tests cover:
    - pages skips private pages unless include_private=true
    - page fields, URL and excerpt shape
    - sort/order, unknown sort field keeps filename order
    - limit/offset slicing and the total/count/offset/limit envelope
    - single page by slug, 400 without slug, 404 for unknown or unsafe slugs
    - menu ordering by menu_order
    - navigation tree: roots, children, dropped grandchildren
    - search over title, stripped content and meta; private pages excluded
"""

from .conftest import LONG_TEXT, SITE_URL


class TestPages:

    def test_lists_public_pages_in_filename_order(self, api):
        resp = api("pages")
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert [p["slug"] for p in data["pages"]] == ["about", "contact", "history", "index", "team"]
        assert data["total"] == 5
        assert data["count"] == 5
        assert data["offset"] == 0
        assert data["limit"] is None

    def test_include_private(self, api):
        data = api("pages", include_private="true").json()
        assert "secret" in [p["slug"] for p in data["pages"]]
        assert data["total"] == 6

    def test_include_private_requires_literal_true(self, api):
        data = api("pages", include_private="1").json()
        assert "secret" not in [p["slug"] for p in data["pages"]]

    def test_page_shape(self, api):
        about = api("pages").json()["pages"][0]
        assert about == {
            "slug": "about",
            "title": "About Us",
            "content": "<p>We build <strong>things</strong>.</p>",
            "excerpt": "We build things....",
            "meta_description": "About the company",
            "meta_keywords": "company, team",
            "parent": "",
            "template": "template.php",
            "date": "2024-02-01",
            "menu_status": True,
            "menu_order": 3,
            "private": False,
            "url": f"{SITE_URL}about/",
        }

    def test_excerpt_is_cut_at_200_characters(self, api):
        team = next(p for p in api("pages").json()["pages"] if p["slug"] == "team")
        assert team["excerpt"] == LONG_TEXT[:200] + "..."

    def test_sort_by_menu_order_desc(self, api):
        data = api("pages", sort="menu_order", order="desc").json()
        assert [p["menu_order"] for p in data["pages"]] == [5, 4, 3, 2, 1]

    def test_sort_by_title_asc(self, api):
        data = api("pages", sort="title").json()
        titles = [p["title"] for p in data["pages"]]
        assert titles == sorted(titles)

    def test_unknown_sort_field_keeps_order(self, api):
        data = api("pages", sort="nope", order="desc").json()
        assert [p["slug"] for p in data["pages"]] == ["about", "contact", "history", "index", "team"]

    def test_limit_and_offset(self, api):
        data = api("pages", limit="2", offset="1").json()
        assert [p["slug"] for p in data["pages"]] == ["contact", "history"]
        assert data["total"] == 5
        assert data["count"] == 2
        assert data["offset"] == 1
        assert data["limit"] == 2

    def test_offset_without_limit_is_ignored(self, api):
        data = api("pages", offset="3").json()
        assert data["count"] == 5
        assert data["offset"] == 3

    def test_zero_limit_returns_everything(self, api):
        data = api("pages", limit="0").json()
        assert data["count"] == 5
        assert data["limit"] == 0

    def test_non_numeric_limit_reads_as_zero(self, api):
        data = api("pages", limit="many").json()
        assert data["count"] == 5
        assert data["limit"] == 0


class TestSinglePage:

    def test_get_page(self, api):
        resp = api("page", slug="index")
        assert resp.status_code == 200
        page = resp.json()["page"]
        assert page["slug"] == "index"
        assert page["title"] == "Welcome"
        assert page["menu_text"] == "Home"
        assert page["template"] == "home.php"
        assert page["url"] == f"{SITE_URL}index/"
        assert "excerpt" not in page

    def test_private_page_is_returned_by_slug(self, api):
        page = api("page", slug="secret").json()["page"]
        assert page["private"] is True
        assert page["menu_order"] == 0

    def test_missing_slug(self, api):
        resp = api("page")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Slug parameter is required"}

    def test_unknown_slug(self, api):
        resp = api("page", slug="nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Page not found"}

    def test_path_traversal_is_not_found(self, api):
        resp = api("page", slug="../other/website")
        assert resp.status_code == 404


class TestMenu:

    def test_menu_sorted_by_order(self, api):
        data = api("menu").json()
        assert data["count"] == 5
        assert [m["slug"] for m in data["menu"]] == ["index", "contact", "about", "team", "history"]

    def test_menu_item_shape(self, api):
        item = api("menu").json()["menu"][0]
        assert item == {
            "slug": "index",
            "title": "Welcome",
            "menu_text": "Home",
            "parent": "",
            "menu_order": 1,
            "url": f"{SITE_URL}index/",
        }


class TestNavigation:

    def test_roots_in_filename_order(self, api):
        nav = api("navigation").json()["navigation"]
        assert [n["slug"] for n in nav] == ["about", "contact", "index"]

    def test_children_attached_to_root(self, api):
        about = api("navigation").json()["navigation"][0]
        assert [c["slug"] for c in about["children"]] == ["team"]
        assert about["children"][0]["children"] == []
        assert about["children"][0]["parent"] == "about"

    def test_grandchildren_are_dropped(self, api):
        nav = api("navigation").json()["navigation"]
        slugs = {n["slug"] for n in nav} | {c["slug"] for n in nav for c in n["children"]}
        assert "history" not in slugs


class TestSearch:

    def test_matches_title_case_insensitively(self, api):
        data = api("search", q="WELCOME").json()
        assert data["query"] == "WELCOME"
        assert [r["slug"] for r in data["results"]] == ["index"]

    def test_matches_stripped_content_only(self, api):
        assert api("search", q="things").json()["count"] == 1
        # Markup is not searchable
        assert api("search", q="strong").json()["count"] == 0

    def test_matches_meta_description(self, api):
        data = api("search", q="company").json()
        assert [r["slug"] for r in data["results"]] == ["about"]

    def test_private_pages_excluded(self, api):
        assert api("search", q="hidden").json()["count"] == 0

    def test_result_shape(self, api):
        hit = api("search", q="write").json()["results"][0]
        assert hit == {
            "slug": "contact",
            "title": "Contact",
            "excerpt": "Write to us...",
            "meta_description": "",
            "url": f"{SITE_URL}contact/",
        }

    def test_missing_query(self, api):
        resp = api("search")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Query parameter (q) is required"}

    def test_empty_query_matches_all_public_pages(self, api):
        assert api("search", q="").json()["count"] == 5
