# headless_api/models.py
from typing import Optional

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    """The plugin's only persisted state."""

    api_key: str
    api_enabled: bool = True
    require_auth: bool = False
    cors_enabled: bool = Field(
        default=True,
        description="Send Access-Control-Allow-* headers on API responses.",
    )


class ConfigUpdate(BaseModel):
    api_enabled: Optional[bool] = None
    require_auth: Optional[bool] = None
    cors_enabled: Optional[bool] = None
