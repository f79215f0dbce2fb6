"""Configuration management for Notus."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

NOTUS_HOME = Path(os.environ.get("NOTUS_HOME", Path.home() / "notus"))
CONFIG_FILE = NOTUS_HOME / "config" / "notus.conf"
DATA_DIR = NOTUS_HOME / "data"


@dataclass
class Config:
    """Notus configuration."""

    data_file: Path = field(default_factory=lambda: DATA_DIR / "notus.json")
    timezone: str = "America/Toronto"
    # Daily reminder digest settings
    digest_time: str = "08:00"
    reminder_horizon_months: int = 1


def _unquote(value: str) -> str:
    """Strip quotes from a value, or an inline comment from an unquoted one."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from notus.conf file."""
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
                config.data_file = Path(value).expanduser()
            case "timezone":
                config.timezone = value
            case "digest_time":
                config.digest_time = value
            case "reminder_horizon_months":
                try:
                    months = int(value)
                except ValueError:
                    logger.warning(f"Invalid REMINDER_HORIZON_MONTHS: {value!r}, using 1")
                    continue
                if months < 1:
                    logger.warning(f"REMINDER_HORIZON_MONTHS must be positive, got {months}")
                    continue
                config.reminder_horizon_months = months

    return config
