"""
CMS package: read-only access to the host CMS page store.

The store module reads the XML files the CMS writes (pages, component
snippets, site identity); the handlers map them onto the JSON shapes the
``?api=`` endpoints return. Nothing in this package writes to the store.
"""

from . import handlers  # noqa: F401
