"""Configuration management for greenlog."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

GREENLOG_HOME = Path(os.environ.get("GREENLOG_HOME", Path.home() / "greenlog"))
CONFIG_FILE = GREENLOG_HOME / "config" / "greenlog.conf"
DATA_DIR = GREENLOG_HOME / "data"


@dataclass
class Config:
    """greenlog configuration."""

    store_backend: str = "file"
    data_dir: str = ""
    default_user_id: str = ""
    feed_limit: int = 20
    # Firestore settings
    firestore_project_id: str = ""
    firestore_database: str = "(default)"
    firestore_id_token: str = ""

    @property
    def data_path(self) -> Path:
        """Directory for the file store."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from greenlog.conf, then apply env overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "store_backend":
                    config.store_backend = value.lower()
                case "data_dir":
                    config.data_dir = value
                case "default_user_id":
                    config.default_user_id = value
                case "feed_limit":
                    try:
                        config.feed_limit = int(value)
                    except ValueError:
                        logger.warning(f"Ignoring non-numeric FEED_LIMIT: {value!r}")
                case "firestore_project_id":
                    config.firestore_project_id = value
                case "firestore_database":
                    config.firestore_database = value
                case "firestore_id_token":
                    config.firestore_id_token = value
                case _:
                    logger.debug(f"Unknown config key: {key}")

    # Tokens are short-lived; let the environment supply a fresh one
    token = os.environ.get("GREENLOG_FIRESTORE_TOKEN")
    if token:
        config.firestore_id_token = token

    return config
