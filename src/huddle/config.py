"""Configuration management for Huddle."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.feed import ONGOING_LABELS, UPCOMING_LABELS

logger = logging.getLogger(__name__)

HUDDLE_HOME = Path(os.environ.get("HUDDLE_HOME", Path.home() / "huddle"))
CONFIG_FILE = HUDDLE_HOME / "config" / "huddle.conf"
DATA_FILE = HUDDLE_HOME / "data" / "activities.json"


@dataclass
class Config:
    """Huddle configuration."""

    data_file: str = ""
    user_id: str = ""
    # Display only; instants are always compared in UTC
    timezone: str = "UTC"
    ongoing_singular: str = ONGOING_LABELS[0]
    ongoing_plural: str = ONGOING_LABELS[1]
    upcoming_singular: str = UPCOMING_LABELS[0]
    upcoming_plural: str = UPCOMING_LABELS[1]

    @property
    def ongoing_labels(self) -> tuple[str, str]:
        return self.ongoing_singular, self.ongoing_plural

    @property
    def upcoming_labels(self) -> tuple[str, str]:
        return self.upcoming_singular, self.upcoming_plural


def _unquote(value: str) -> str:
    """Strip matching quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from huddle.conf file."""
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
            case "data_file":
                config.data_file = value
            case "user_id":
                config.user_id = value
            case "timezone":
                config.timezone = value
            case "ongoing_singular":
                config.ongoing_singular = value
            case "ongoing_plural":
                config.ongoing_plural = value
            case "upcoming_singular":
                config.upcoming_singular = value
            case "upcoming_plural":
                config.upcoming_plural = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
