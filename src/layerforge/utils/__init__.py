"""
Utility helpers for layerforge.
"""

from .logging_config import (
    ColoredFormatter,
    CSVFormatter,
    DiagnosticsFormatter,
    DiagnosticsLogHandler,
    setup_logging,
)

__all__ = [
    "ColoredFormatter",
    "CSVFormatter",
    "DiagnosticsFormatter",
    "DiagnosticsLogHandler",
    "setup_logging",
]
