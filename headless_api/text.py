# headless_api/text.py
import re
from typing import Any, Optional


_TAG_RE = re.compile(r"<[^>]*>")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def strip_tags(html: Optional[str]) -> str:
    return _TAG_RE.sub("", html or "")


def excerpt(html: Optional[str], length: int = 200) -> str:
    """First ``length`` characters of the tag-stripped text, always with an ellipsis."""
    return strip_tags(html)[:length] + "..."


def to_int(value: Any, default: int = 0) -> int:
    """Lenient integer parse: ``"12abc"`` -> 12, ``"abc"`` -> ``default``."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    m = _LEADING_INT_RE.match(str(value))
    return int(m.group(1)) if m else default
