"""
Logging configuration for layerforge.
"""

import copy
import logging
import logging.handlers
from collections import deque
from pathlib import Path
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..settings import AppSettings

DiagnosticsCallback = Callable[[logging.LogRecord, str], None]


LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps ``%(levelname)s`` in an ANSI color.

    ``level_width`` pads the level name after the reset code so columns line
    up. The color codes would otherwise count towards ``%(levelname)-8s``.
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        level_width: int = 0,
    ):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.level_width = level_width

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        name = record.levelname
        padding = " " * max(self.level_width - len(name), 0)
        colored = copy.copy(record)
        colored.levelname = f"{color}{name}{RESET}{padding}"
        return super().format(colored)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


class CSVFormatter(logging.Formatter):
    """One semicolon separated line per record for the log file.

    Columns: time, level, ms since startup, logger, line, message. Line
    breaks of the message and of an attached traceback are flattened so a
    record never spans rows.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message} | {self.formatException(record.exc_info)}"
        message = " | ".join(line for line in message.splitlines() if line.strip())

        fields = [
            _quote(self.formatTime(record, self.datefmt)),
            record.levelname.ljust(8),
            _quote(f"{int(record.relativeCreated)} ms"),
            _quote(record.name),
            _quote(str(record.lineno)),
            _quote(message),
        ]
        return ";".join(fields)


class DiagnosticsFormatter(logging.Formatter):
    """Short one-line format for diagnostics shown to the user."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%H:%M:%S")
        return f"{timestamp} {record.levelname}: {record.getMessage()} ({record.name})"


class DiagnosticsLogHandler(logging.Handler):
    """
    Log handler that keeps recent records for the host application.

    Records are buffered (bounded) and forwarded to optional callbacks, so an
    editor can show degraded loads and unresolved fields to the user.
    """

    def __init__(self, max_lines: int = 1000, level: int = logging.WARNING):
        super().__init__(level)
        self.max_lines = max_lines
        self.buffer: deque[logging.LogRecord] = deque(maxlen=max_lines)
        self.log_callback: Optional[DiagnosticsCallback] = None
        self.error_callback: Optional[DiagnosticsCallback] = None

    def emit(self, record: logging.LogRecord) -> None:
        """Buffer a record and forward it to the callbacks."""
        try:
            msg = self.format(record)
            self.buffer.append(record)

            if self.log_callback:
                self.log_callback(record, msg)

            if record.levelno >= logging.ERROR and self.error_callback:
                self.error_callback(record, msg)

        except Exception:
            # Don't let logging errors crash the application
            self.handleError(record)

    def get_buffer(self) -> List[logging.LogRecord]:
        """Get current log buffer as a list."""
        return list(self.buffer)

    def clear_buffer(self) -> None:
        """Clear the log buffer."""
        self.buffer.clear()

    def set_log_callback(self, callback: Optional[DiagnosticsCallback]) -> None:
        """Set callback for every buffered record."""
        self.log_callback = callback

    def set_error_callback(self, callback: Optional[DiagnosticsCallback]) -> None:
        """Set callback for ERROR and above."""
        self.error_callback = callback


def setup_logging(settings: "AppSettings") -> DiagnosticsLogHandler:
    """
    Setup application logging with console, file, and diagnostics handlers.

    Args:
        settings: AppSettings instance for all logging configuration

    Returns:
        The installed diagnostics handler
    """
    console_enabled = settings.console_logging
    console_level = settings.console_log_level
    use_colors = settings.console_use_colors
    file_enabled = settings.file_logging
    log_file = settings.log_file_path
    diagnostics_level = settings.diagnostics_level
    diagnostics_max_lines = settings.diagnostics_max_lines

    # Configure root logger to capture everything
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger("layerforge").setLevel(logging.DEBUG)

    # Clear any existing handlers
    root_logger.handlers.clear()

    # Console handler - only if enabled
    if console_enabled:
        if use_colors:
            console_formatter: logging.Formatter = ColoredFormatter(
                fmt="%(asctime)s : %(levelname)s : %(message)s",
                datefmt="%H:%M:%S",
                level_width=8,
            )
        else:
            console_formatter = logging.Formatter(
                fmt="%(asctime)s : %(levelname)-8s : %(message)s", datefmt="%H:%M:%S"
            )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation - only if enabled
    log_path = None
    if file_enabled:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
            root_logger.addHandler(file_handler)
        except OSError as e:
            # If file logging fails, just continue with console logging
            root_logger.warning(f"Could not setup file logging: {e}")

    # Suppress DEBUG logs from noisy libraries
    logging.getLogger("asyncio").setLevel(logging.INFO)

    # Diagnostics handler - always enabled
    diagnostics_handler = DiagnosticsLogHandler(
        max_lines=diagnostics_max_lines,
        level=getattr(logging, diagnostics_level.upper(), logging.WARNING),
    )
    diagnostics_handler.setFormatter(DiagnosticsFormatter())
    root_logger.addHandler(diagnostics_handler)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if console_enabled:
        logger.debug(f"Console logging: {console_level} (colors: {use_colors})")
    if file_enabled and log_path:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
    logger.debug(f"Diagnostics: {diagnostics_level} (buffer: {diagnostics_max_lines})")

    return diagnostics_handler
