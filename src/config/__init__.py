"""Configuration module."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import Settings, StockPolicy, get_settings, reset_settings

__all__ = [
    "Settings",
    "StockPolicy",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
