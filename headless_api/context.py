# headless_api/context.py
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .config import Settings
from .errors import MissingParameterError
from .models import ApiConfig
from .text import to_int


@dataclass
class ApiRequest:
    """Everything a handler may read: query parameters, settings and config."""

    settings: Settings
    config: ApiConfig
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        return self.params.get(name)

    def require(self, name: str, message: str) -> str:
        value = self.params.get(name)
        if value is None:
            raise MissingParameterError(message, name)
        return value

    def get_int(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = self.params.get(name)
        if value is None:
            return default
        return to_int(value)


Payload = Dict[str, object]
