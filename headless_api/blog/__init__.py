"""
Blog package: read-only access to the optional SimpleBlog database.

The blog endpoints are only advertised when ``other/blog.db`` exists.
Column differences between blog releases are handled by schema
introspection in ``store.BlogStore.structure``.
"""

from . import handlers  # noqa: F401
