"""Configuration management for Keepsake."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

KEEPSAKE_HOME = Path(os.environ.get("KEEPSAKE_HOME", Path.home() / "keepsake"))
CONFIG_FILE = KEEPSAKE_HOME / "config" / "keepsake.conf"
DATA_DIR = KEEPSAKE_HOME / "data"
TOKEN_FILE = KEEPSAKE_HOME / "config" / "token.json"

BACKENDS = ("local", "google")


@dataclass
class Config:
    """Keepsake configuration."""

    backend: str = "local"
    data_dir: str = field(default_factory=lambda: str(DATA_DIR))
    # Google backend settings
    google_client_secret_file: str = ""
    google_token_file: str = field(default_factory=lambda: str(TOKEN_FILE))
    spreadsheet_id: str = ""
    drive_folder_id: str = ""


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from keepsake.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

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
            case "backend":
                value = value.lower()
                if value in BACKENDS:
                    config.backend = value
                else:
                    logger.warning(f"Unknown BACKEND '{value}', using '{config.backend}'")
            case "data_dir":
                config.data_dir = value
            case "google_client_secret_file":
                config.google_client_secret_file = value
            case "google_token_file":
                config.google_token_file = value
            case "spreadsheet_id":
                config.spreadsheet_id = value
            case "drive_folder_id":
                config.drive_folder_id = value
            case _:
                logger.warning(f"Ignoring unknown config key: {key.upper()}")

    return config
