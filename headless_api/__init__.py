"""Headless JSON API over a GetSimple page store and its SimpleBlog database."""

__version__ = "1.2.0"
API_VERSION = "1.2"
