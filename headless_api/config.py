# headless_api/config.py
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Literal


class Settings(BaseSettings):
    """Process settings, read from ``HEADLESS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HEADLESS_", env_file=".env", case_sensitive=False
    )

    # Root of the CMS data directory (holds pages/ and other/)
    data_path: Path = Path("data")
    # Defaults to <data_path>/other/headless_api_config.json
    config_file: Optional[Path] = None

    # Override the values found in other/website.xml
    site_name: Optional[str] = None
    site_url: Optional[str] = None
    template: Optional[str] = None

    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @property
    def pages_path(self) -> Path:
        return self.data_path / "pages"

    @property
    def other_path(self) -> Path:
        return self.data_path / "other"

    @property
    def components_path(self) -> Path:
        return self.other_path / "components"

    @property
    def website_file(self) -> Path:
        return self.other_path / "website.xml"

    @property
    def blog_db_path(self) -> Path:
        return self.other_path / "blog.db"

    @property
    def api_config_path(self) -> Path:
        if self.config_file is not None:
            return self.config_file
        return self.other_path / "headless_api_config.json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
