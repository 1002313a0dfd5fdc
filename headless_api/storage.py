# headless_api/storage.py
import json
import logging
import os
import secrets
import tempfile
import threading
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigError
from .models import ApiConfig, ConfigUpdate


logger = logging.getLogger(__name__)

# Serialises writes to the configuration file
_config_lock = threading.Lock()


def generate_key() -> str:
    return secrets.token_hex(32)


def save_config(path: Path, config: ApiConfig) -> None:
    """Write the configuration atomically.

    The JSON goes to a temporary file in the same directory which then
    replaces the old one, so a reader in another process sees either the
    previous file or the new one, never a half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with _config_lock:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, ensure_ascii=False, indent=4)
            os.replace(tmp_name, path)
        except BaseException:
            os.unlink(tmp_name)
            raise


def load_config(path: Path) -> ApiConfig:
    """Return the stored configuration, creating it on first use.

    A missing file is replaced by a fresh configuration with a newly
    generated key. A file that exists but cannot be parsed raises
    ``ConfigError`` rather than silently rotating the key.
    """
    if not path.exists():
        config = ApiConfig(api_key=generate_key())
        save_config(path, config)
        logger.info("Created API configuration at %s", path)
        return config

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return ApiConfig.model_validate(data)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("Unreadable API configuration %s: %s", path, exc)
        raise ConfigError("API configuration is unreadable") from exc


def update_config(path: Path, update: ConfigUpdate) -> ApiConfig:
    config = load_config(path)
    changes = update.model_dump(exclude_none=True)
    if changes:
        config = config.model_copy(update=changes)
        save_config(path, config)
    return config


def regenerate_key(path: Path) -> ApiConfig:
    """Replace the API key. Clients holding the old key start getting 401."""
    config = load_config(path).model_copy(update={"api_key": generate_key()})
    save_config(path, config)
    logger.info("API key regenerated")
    return config
