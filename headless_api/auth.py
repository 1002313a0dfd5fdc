# headless_api/auth.py
import secrets
from typing import Mapping, Optional

from .errors import UnauthorizedError
from .models import ApiConfig


API_KEY_HEADER = "X-API-Key"


def provided_key(params: Mapping[str, str], headers: Mapping[str, str]) -> str:
    # The query parameter wins over the header
    key: Optional[str] = params.get("key")
    if key is None:
        key = headers.get(API_KEY_HEADER)
    return key or ""


def check_auth(config: ApiConfig, params: Mapping[str, str], headers: Mapping[str, str]) -> None:
    """Raise ``UnauthorizedError`` unless auth is off or the shared key matches."""
    if not config.require_auth:
        return
    key = provided_key(params, headers)
    if not key or not secrets.compare_digest(key.encode("utf-8"), config.api_key.encode("utf-8")):
        raise UnauthorizedError()
