"""Error hierarchy for the headless API.

Every error carries the HTTP status it maps to and renders as the flat
``{"error": "..."}`` envelope the API clients expect. The FastAPI handlers in
``main.py`` turn these into responses; nothing below the dispatcher builds
error responses by hand.
"""

from typing import Any, Dict, Optional


class ApiError(Exception):
    """Base exception for all API failures."""

    http_status: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        body.update(self.extra)
        return body


# ─── Request errors (400-level) ─────────────────────────────────

class MissingParameterError(ApiError):
    """A required query parameter was not supplied."""

    http_status = 400
    code = "MISSING_PARAMETER"

    def __init__(self, message: str, parameter: str):
        super().__init__(message)
        self.parameter = parameter


class UnauthorizedError(ApiError):
    http_status = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized - invalid or missing API key"):
        super().__init__(message)


class NotFoundError(ApiError):
    """The requested page, component, post or category does not exist."""

    http_status = 404
    code = "NOT_FOUND"


class BlogUnavailableError(NotFoundError):
    """The blog database is not installed."""

    code = "BLOG_UNAVAILABLE"

    def __init__(self, message: str = "SimpleBlog not installed"):
        super().__init__(message)


class UnknownEndpointError(NotFoundError):
    code = "INVALID_ENDPOINT"

    def __init__(self, endpoint: str, available: Dict[str, str]):
        super().__init__("Invalid endpoint", {"available_endpoints": available})
        self.endpoint = endpoint


# ─── Server errors (500-level) ──────────────────────────────────

class DatabaseError(ApiError):
    """A blog database query failed."""

    code = "DATABASE_ERROR"

    def __init__(self, operation: str, message: str = "Database query failed"):
        super().__init__(message)
        self.operation = operation


class ConfigError(ApiError):
    """The configuration file exists but cannot be read."""

    code = "CONFIG_ERROR"


class ApiDisabledError(ApiError):
    http_status = 503
    code = "API_DISABLED"

    def __init__(self, message: str = "API is currently disabled"):
        super().__init__(message)
