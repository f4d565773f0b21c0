"""Configuration system."""

from scalp_core.config.loader import load_config
from scalp_core.config.schema import AppConfig, ThresholdsConfig

__all__ = ["AppConfig", "ThresholdsConfig", "load_config"]
