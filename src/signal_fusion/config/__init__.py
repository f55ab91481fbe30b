"""Configuration system."""

from signal_fusion.config.loader import load_config
from signal_fusion.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
