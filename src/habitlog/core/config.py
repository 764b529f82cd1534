"""Configuration management for habitlog"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .db import get_data_dir

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_config_path() -> Path:
    return get_data_dir() / "config.yaml"


@dataclass
class Config:
    """Main configuration for habitlog"""
    config_file: Path = field(default_factory=default_config_path)

    # First day of week for reports (0=Monday, 6=Sunday)
    week_start: int = 0

    # Correlations with |r| above this are reported
    insight_threshold: float = 0.3

    # Default look-back windows, in days
    insight_days: int = 30
    stats_days: int = 30

    # Display
    date_format: str = "%B %d, %Y"  # October 19, 2026

    log_level: str = "WARNING"

    def __post_init__(self):
        """Ensure paths are Path objects"""
        if isinstance(self.config_file, str):
            self.config_file = Path(self.config_file)


def _coerce(data: dict, key: str, kind: type, default):
    """Convert a config value, keeping the default when it has the wrong type."""
    try:
        return kind(data[key])
    except (TypeError, ValueError):
        logger.warning("Ignoring %s: expected %s, got %r", key, kind.__name__, data[key])
        return default


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file"""
    config = Config()
    if config_path is not None:
        config.config_file = Path(config_path)

    if not config.config_file.exists():
        return config

    try:
        with open(config.config_file) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read %s, using defaults: %s", config.config_file, e)
        return config

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", config.config_file)
        return config

    if "week_start" in data:
        week_start = _coerce(data, "week_start", int, config.week_start)
        if 0 <= week_start <= 6:
            config.week_start = week_start
        else:
            logger.warning("week_start must be 0-6, got %s", week_start)
    if "insight_threshold" in data:
        config.insight_threshold = _coerce(data, "insight_threshold", float, config.insight_threshold)
    if "insight_days" in data:
        config.insight_days = _coerce(data, "insight_days", int, config.insight_days)
    if "stats_days" in data:
        config.stats_days = _coerce(data, "stats_days", int, config.stats_days)
    if "date_format" in data:
        config.date_format = data["date_format"]
    if "log_level" in data:
        level = str(data["log_level"]).upper()
        if level in LOG_LEVELS:
            config.log_level = level
        else:
            logger.warning("Unknown log_level %s", data["log_level"])

    return config


def save_config(config: Config) -> None:
    """Save configuration to YAML file"""
    data = {
        "week_start": config.week_start,
        "insight_threshold": config.insight_threshold,
        "insight_days": config.insight_days,
        "stats_days": config.stats_days,
        "date_format": config.date_format,
        "log_level": config.log_level,
    }

    config.config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config.config_file, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def get_default_config_yaml() -> str:
    """Return default config as YAML string"""
    return """# habitlog configuration

# First day of week for weekly reports (0=Monday, 6=Sunday)
week_start: 0

# Insights: only correlations stronger than this are shown
insight_threshold: 0.3
insight_days: 30          # Look-back window for insights

# Statistics look-back window
stats_days: 30

# Date format for headers
date_format: "%B %d, %Y"  # October 19, 2026

# DEBUG, INFO, WARNING or ERROR
log_level: WARNING
"""
