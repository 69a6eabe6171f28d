"""
Settings package for layerforge.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from layerforge.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigError, ValidationResult
from .paths import PathSettings
from .context import ContextSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigError",
    "ValidationResult",
    "PathSettings",
    "ContextSettings",
    "LoggingSettings",
]
