"""
Settings and configuration for PetPal.
"""

import os
import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..models.base import GameConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "game.yaml"


class Settings:
    """Process-level settings read from the environment."""

    # Logging settings
    LOG_LEVEL: str = os.getenv("PETPAL_LOG_LEVEL", "INFO")
    ENABLE_JSON_LOGS: bool = os.getenv("PETPAL_ENABLE_JSON_LOGS", "false").lower() == "true"

    # Game tuning file
    CONFIG_PATH: str = os.getenv("PETPAL_CONFIG_PATH", str(DEFAULT_CONFIG_PATH))

    # Realtime mode configuration
    SIM_SPEED_FACTOR: float = float(os.getenv("SIM_SPEED_FACTOR", "1.0"))
    ENABLE_REALTIME: bool = os.getenv("ENABLE_REALTIME", "false").lower() == "true"

    @classmethod
    def validate_sim_speed_factor(cls) -> None:
        """Validate SIM_SPEED_FACTOR is in reasonable range."""
        if not (0.1 <= cls.SIM_SPEED_FACTOR <= 1000.0):
            raise ValueError(
                f"SIM_SPEED_FACTOR must be between 0.1 and 1000, got {cls.SIM_SPEED_FACTOR}"
            )


def load_config(path: Optional[Union[str, Path]] = None) -> GameConfig:
    """
    Load game tuning from a YAML file.

    Args:
        path: YAML file; defaults to Settings.CONFIG_PATH. A missing
            default file falls back to built-in defaults, a missing
            explicit path is an error.

    Returns:
        GameConfig

    Raises:
        ConfigError: file missing (explicit path), unreadable YAML or invalid values
    """
    explicit = path is not None
    config_path = Path(path) if explicit else Path(Settings.CONFIG_PATH)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return GameConfig()

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Game config in {config_path} must be a mapping")

    try:
        config = GameConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid game config in {config_path}: {e}") from e

    logger.info(f"GameConfig loaded from {config_path}")
    return config


# Global settings instance
settings = Settings()

# Validate critical settings on import
settings.validate_sim_speed_factor()
