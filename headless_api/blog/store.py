"""
Read access to the SimpleBlog SQLite database.

The blog add-on owns ``other/blog.db`` and its schema has grown over
releases: ``posts.status``, ``posts.scheduled_date``, ``posts.description``,
``posts.cover_photo`` and ``comments.approved`` may or may not exist.
``BlogStore.structure()`` detects them from the table metadata instead of
assuming a version, and the result is cached per database file and
modification time so a schema upgrade is picked up without a restart.

The database is opened read-only and without connection pooling: every
request opens its own connection and closes it when done. All queries are
parameterized. SQLAlchemy errors are logged and surfaced as
``DatabaseError``.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from ..errors import DatabaseError


logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_POST_WITH_CATEGORY = """
    SELECT p.*, c.name AS category_name, c.slug AS category_slug
    FROM posts p
    LEFT JOIN categories c ON p.category_id = c.id
"""


@dataclass(frozen=True)
class BlogStructure:
    """Which optional columns the installed blog schema has."""

    has_status: bool = False
    has_scheduled: bool = False
    has_description: bool = False
    has_cover_photo: bool = False
    has_approved: bool = False


# Resolved database path -> (mtime_ns, structure); a newer mtime replaces the entry
_structure_cache: Dict[str, Tuple[int, BlogStructure]] = {}
_structure_lock = threading.Lock()


def blog_exists(db_path: Path) -> bool:
    return db_path.is_file()


def _readonly_engine(db_path: Path) -> Engine:
    uri = f"{db_path.resolve().as_uri()}?mode=ro"
    return create_engine(
        "sqlite://",
        creator=lambda: sqlite3.connect(uri, uri=True),
        poolclass=NullPool,
    )


def _columns(conn: Connection, table: str) -> Set[str]:
    try:
        return {col["name"] for col in inspect(conn).get_columns(table)}
    except NoSuchTableError:
        return set()


class BlogStore:
    """Queries against one blog database file."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.engine = _readonly_engine(db_path)

    @contextmanager
    def connect(self, operation: str) -> Iterator[Connection]:
        """Yield a connection; map any SQLAlchemy failure to ``DatabaseError``."""
        try:
            with self.engine.connect() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error(
                "Blog query failed during %s: %s", operation, exc,
                extra={"error_code": DatabaseError.code},
            )
            raise DatabaseError(operation) from exc

    def _fetch_all(self, operation: str, sql: str, **params: Any) -> List[Row]:
        with self.connect(operation) as conn:
            return [dict(row) for row in conn.execute(text(sql), params).mappings()]

    def _fetch_one(self, operation: str, sql: str, **params: Any) -> Optional[Row]:
        with self.connect(operation) as conn:
            row = conn.execute(text(sql), params).mappings().first()
            return dict(row) if row is not None else None

    def structure(self) -> BlogStructure:
        key = str(self.db_path.resolve())
        mtime = self.db_path.stat().st_mtime_ns
        with _structure_lock:
            cached = _structure_cache.get(key)
        if cached is not None and cached[0] == mtime:
            return cached[1]

        with self.connect("structure") as conn:
            post_cols = _columns(conn, "posts")
            comment_cols = _columns(conn, "comments")
        structure = BlogStructure(
            has_status="status" in post_cols,
            has_scheduled="scheduled_date" in post_cols,
            has_description="description" in post_cols,
            has_cover_photo="cover_photo" in post_cols,
            has_approved="approved" in comment_cols,
        )
        logger.debug("Detected blog structure for %s: %s", self.db_path, structure)
        with _structure_lock:
            _structure_cache[key] = (mtime, structure)
        return structure

    # ─── posts ──────────────────────────────────────────────────

    def count_posts(self, category_id: Optional[int] = None) -> int:
        if category_id is None:
            row = self._fetch_one("count_posts", "SELECT COUNT(*) AS total FROM posts")
        else:
            row = self._fetch_one(
                "count_posts",
                "SELECT COUNT(*) AS total FROM posts WHERE category_id = :category_id",
                category_id=category_id,
            )
        return int(row["total"]) if row else 0

    def list_posts(self, limit: int, offset: int = 0) -> List[Row]:
        return self._fetch_all(
            "list_posts",
            _POST_WITH_CATEGORY + " ORDER BY p.date DESC LIMIT :limit OFFSET :offset",
            limit=limit, offset=offset,
        )

    def get_post(self, slug: str) -> Optional[Row]:
        return self._fetch_one(
            "get_post", _POST_WITH_CATEGORY + " WHERE p.slug = :slug", slug=slug,
        )

    def list_category_posts(self, category_id: int, limit: int, offset: int = 0) -> List[Row]:
        return self._fetch_all(
            "list_category_posts",
            "SELECT * FROM posts WHERE category_id = :category_id"
            " ORDER BY date DESC LIMIT :limit OFFSET :offset",
            category_id=category_id, limit=limit, offset=offset,
        )

    def search_posts(self, query: str, include_description: bool) -> List[Row]:
        columns = ["p.title", "p.content"]
        if include_description:
            columns.append("p.description")
        where = " OR ".join(f"{col} LIKE :pattern" for col in columns)
        return self._fetch_all(
            "search_posts",
            _POST_WITH_CATEGORY + f" WHERE {where} ORDER BY p.date DESC",
            pattern=f"%{query}%",
        )

    # ─── categories ─────────────────────────────────────────────

    def list_categories(self) -> List[Row]:
        return self._fetch_all(
            "list_categories",
            """
            SELECT c.*, COUNT(p.id) AS post_count
            FROM categories c
            LEFT JOIN posts p ON c.id = p.category_id
            GROUP BY c.id
            ORDER BY c.name
            """,
        )

    def get_category(self, slug: str) -> Optional[Row]:
        return self._fetch_one(
            "get_category", "SELECT * FROM categories WHERE slug = :slug", slug=slug,
        )

    # ─── comments ───────────────────────────────────────────────

    def list_comments(self, post_id: Optional[int], approved_only: bool) -> List[Row]:
        clauses: List[str] = []
        params: Dict[str, Any] = {}
        if post_id is not None:
            clauses.append("post_id = :post_id")
            params["post_id"] = post_id
        if approved_only:
            clauses.append("approved = 1")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return self._fetch_all(
            "list_comments", f"SELECT * FROM comments {where} ORDER BY date DESC", **params,
        )
