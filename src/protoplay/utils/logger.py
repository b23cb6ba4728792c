"""
Structured console logger

One process-wide Logger; modules bind it to their category at import time:

    log = get_logger().for_category(LogCategory.VARIANT)
    log.info("Variant switch", source="1:1", target="1:3")

    [14:23:45] VARIANT   ✓ Variant switch
               ├─ source: 1:1
               └─ target: 1:3
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from protoplay.models.enums import LogCategory, LogLevel

# Receives (timestamp, level, category, message) for every emitted record
LogSink = Callable[[str, str, str, str], None]

DETAIL_INDENT = " " * 11
CATEGORY_WIDTH = 9


class Colors:
    """ANSI escape codes"""
    RESET = '\033[0m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.DETECTION: Colors.BRIGHT_BLUE,
    LogCategory.LAYOUT: Colors.BLUE,
    LogCategory.DOM: Colors.BRIGHT_CYAN,
    LogCategory.TRANSITION: Colors.MAGENTA,
    LogCategory.VARIANT: Colors.BRIGHT_GREEN,
    LogCategory.ANIMATION: Colors.BRIGHT_YELLOW,
    LogCategory.REACTION: Colors.YELLOW,
    LogCategory.EVENT: Colors.BRIGHT_MAGENTA,
    LogCategory.TASK: Colors.DIM,
    LogCategory.SCENE: Colors.GREEN,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
}

# (symbol, color) per level
LEVEL_STYLES = {
    LogLevel.DEBUG: ('·', Colors.DIM),
    LogLevel.INFO: ('✓', Colors.GREEN),
    LogLevel.WARN: ('⚠', Colors.YELLOW),
    LogLevel.ERROR: ('✗', Colors.RED),
}

LEVEL_ORDER = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]


@dataclass(frozen=True)
class LogRecord:
    category: LogCategory
    level: LogLevel
    message: str
    details: Tuple[str, ...] = ()
    created: datetime = field(default_factory=datetime.now)

    @property
    def flat_message(self) -> str:
        """Message with details inlined, as handed to the sink"""
        if not self.details:
            return self.message
        return f"{self.message} ({', '.join(self.details)})"


class Logger:
    """
    Console logger with per-category colors and tree-drawn details.

    Args:
        min_level: Records below this level are dropped
        use_colors: ANSI colors (disable when output is not a terminal)
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors
        self._sink: Optional[LogSink] = None

    def set_sink(self, sink: Optional[LogSink]) -> None:
        """Forward every emitted record to `sink` as well (None detaches)."""
        self._sink = sink

    def is_enabled(self, level: LogLevel) -> bool:
        return LEVEL_ORDER.index(level) >= LEVEL_ORDER.index(self.min_level)

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def render(self, record: LogRecord) -> List[str]:
        """Console lines of a record: header, then one line per detail."""
        symbol, color = LEVEL_STYLES[record.level]
        category = record.category.name.ljust(CATEGORY_WIDTH)
        lines = [
            f"{record.created.strftime('[%H:%M:%S]')} "
            f"{self._paint(category, CATEGORY_COLORS.get(record.category, Colors.WHITE))} "
            f"{self._paint(symbol, color)} {self._paint(record.message, color)}"
        ]
        last = len(record.details) - 1
        for i, detail in enumerate(record.details):
            branch = "└─" if i == last else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, Colors.DIM)} {detail}")
        return lines

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs
    ) -> None:
        """
        Emit a record.

        Args:
            category: Log category (DETECTION, VARIANT, ...)
            message: Main message text
            level: DEBUG, INFO, WARN or ERROR
            details: Extra detail lines, printed before the keyword details
            **kwargs: Shown as "key: value" detail lines
        """
        if not self.is_enabled(level):
            return

        record = LogRecord(
            category,
            level,
            message,
            tuple(details or ()) + tuple(f"{k}: {v}" for k, v in kwargs.items()),
        )
        for line in self.render(record):
            print(line)

        if self._sink:
            self._sink(record.created.isoformat(), level.name, category.name, record.flat_message)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


class BoundLogger:
    """Logger bound to a default category (overridable per call)."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True) -> None:
    """
    Reconfigure the shared logger in place.

    Bound loggers created at import time and an attached sink stay valid.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
