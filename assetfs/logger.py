"""
assetfs Logger Module

Logging for the generator and the runtime filesystem:
- Structured logging with contextual information
- Component-specific loggers under the ``assetfs`` hierarchy
- Optional file output
- In-memory buffer of recent records for inspection
- Thread-safe operation
"""

import logging
import sys
import threading
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, List, TextIO


class LogLevel(IntEnum):
    """Log level enumeration with numeric values for comparison."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Parse a level name such as ``"debug"`` or ``"INFO"``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


class LogFormatter(logging.Formatter):
    """
    Log formatter for assetfs.

    Produces lines of the form::

        [2024-01-01 12:00:00.000] INFO     [builder] Walk finished {files=3}
    """

    # ANSI color codes for terminal output
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__()
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    @staticmethod
    def _supports_color(stream: TextIO) -> bool:
        """Check if the stream is a terminal."""
        if not hasattr(stream, 'isatty'):
            return False
        return stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        timestamp = datetime.fromtimestamp(record.created).strftime(
            '%Y-%m-%d %H:%M:%S.%f'
        )[:-3]

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level_display = f"{self.COLORS[level]}{level:8s}{self.RESET}"
        else:
            level_display = f"{level:8s}"

        components = [f"[{timestamp}]", level_display]

        if hasattr(record, 'component'):
            components.append(f"[{record.component}]")

        components.append(str(record.getMessage()))

        if hasattr(record, 'context') and record.context:
            context_str = " ".join(f"{k}={v}" for k, v in record.context.items())
            components.append(f"{{{context_str}}}")

        message = " ".join(components)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


class LogBufferHandler(logging.Handler):
    """
    Keeps the most recent log records in memory.

    Used by the CLI to report what a build did and by tests to assert on
    emitted events.
    """

    def __init__(self, max_entries: int = 10000):
        super().__init__()
        self.max_entries = max_entries
        self._log_buffer: List[dict[str, Any]] = []
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        """Store log record in buffer."""
        log_entry = {
            'timestamp': record.created,
            'level': record.levelname,
            'message': record.getMessage(),
            'component': getattr(record, 'component', None),
            'context': getattr(record, 'context', {}),
        }

        with self._lock:
            self._log_buffer.append(log_entry)
            if len(self._log_buffer) > self.max_entries:
                self._log_buffer = self._log_buffer[-self.max_entries:]

    def get_logs(
        self,
        level: Optional[str] = None,
        component: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Retrieve logs with optional filtering."""
        with self._lock:
            logs = self._log_buffer.copy()

        if level:
            logs = [l for l in logs if l['level'] == level]

        if component:
            logs = [l for l in logs if l['component'] == component]

        return logs[-limit:]

    def clear(self) -> None:
        """Clear the log buffer."""
        with self._lock:
            self._log_buffer.clear()


class Logger:
    """
    Main logging class for assetfs.

    One instance per component, all attached to the ``assetfs`` root
    logger so a single ``initialize`` call configures output for the
    generator and the runtime alike.

    Example:
        >>> log = Logger('builder')
        >>> log.info("Walk started", context={'root': 'static'})
    """

    _instances: dict[str, 'Logger'] = {}
    _lock = threading.Lock()
    _initialized = False
    _buffer_handler: Optional[LogBufferHandler] = None
    _handlers: List[logging.Handler] = []

    def __new__(cls, component: str = 'assetfs') -> 'Logger':
        """Get or create a logger for a component."""
        with cls._lock:
            if component not in cls._instances:
                instance = super().__new__(cls)
                instance._component = component
                instance._logger = logging.getLogger(f'assetfs.{component}')
                cls._instances[component] = instance
            return cls._instances[component]

    @classmethod
    def initialize(
        cls,
        level: int = LogLevel.INFO,
        log_file: Optional[str] = None,
        use_colors: bool = True,
        stream: Optional[TextIO] = None
    ) -> None:
        """
        Initialize the logging system.

        Safe to call more than once; only the first call configures
        handlers until ``reset`` is called.

        Args:
            level: Minimum log level to capture
            log_file: Optional file path for log output
            use_colors: Whether to use ANSI colors in console output
            stream: Console stream, defaults to stderr
        """
        with cls._lock:
            if cls._initialized:
                return

            root_logger = logging.getLogger('assetfs')
            root_logger.setLevel(level)

            cls._buffer_handler = LogBufferHandler()
            cls._buffer_handler.setLevel(level)

            console_stream = stream or sys.stderr
            console_handler = logging.StreamHandler(console_stream)
            console_handler.setLevel(level)
            console_handler.setFormatter(
                LogFormatter(use_colors=use_colors, stream=console_stream)
            )

            handlers: List[logging.Handler] = [console_handler, cls._buffer_handler]

            if log_file:
                file_path = Path(log_file)
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setLevel(level)
                file_handler.setFormatter(LogFormatter(use_colors=False))
                handlers.append(file_handler)

            for handler in handlers:
                root_logger.addHandler(handler)

            cls._handlers = handlers
            cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Detach all handlers installed by ``initialize``."""
        with cls._lock:
            root_logger = logging.getLogger('assetfs')
            for handler in cls._handlers:
                root_logger.removeHandler(handler)
                handler.close()
            cls._handlers = []
            cls._buffer_handler = None
            cls._initialized = False

    @classmethod
    def get_buffered_logs(
        cls,
        level: Optional[str] = None,
        component: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Get logs from the in-memory buffer."""
        if cls._buffer_handler is None:
            return []
        return cls._buffer_handler.get_logs(level=level, component=component, limit=limit)

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Internal logging method."""
        extra = {
            'component': self._component,
            'context': context or {},
        }
        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, context)

    def error(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log an error message."""
        self._log(LogLevel.ERROR, message, context)

    def critical(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a critical message."""
        self._log(LogLevel.CRITICAL, message, context)

    def exception(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log an exception with stack trace."""
        self._logger.error(
            message,
            exc_info=exc if exc is not None else True,
            extra={
                'component': self._component,
                'context': context or {},
            }
        )


def get_logger(component: str) -> Logger:
    """
    Get a logger for the specified component.

    Args:
        component: Name of the component (e.g., 'builder', 'vfs', 'cli')

    Returns:
        Logger instance for the component
    """
    return Logger(component)
