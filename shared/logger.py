"""
AdScope Structured Logger
==========================

Provides :class:`ScopeLogger`, a structured logging facade that emits
human-friendly Rich console output on stderr and, optionally, plain or
JSON-lines records to a rotating log file.

Rendered advertisement reports go to stdout through the console layer;
everything written here is diagnostic and stays on stderr.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_ROOT_NAME = "adscope"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


# ========================== JSON Formatter =================================


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "DEBUG",
          "logger": "adscope.decoders",
          "message": "...",
          "component": "decoders",
          "extra": { ... }
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        component = getattr(record, "component", None)
        if component is not None:
            entry["component"] = component

        extra = getattr(record, "scope_extra", None)
        if extra is not None:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ========================== Rich Console Handler ===========================


class _ColorConsoleHandler(RichHandler):
    """:class:`rich.logging.RichHandler` bound to a themed stderr console."""

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


def _file_handler(
    log_file: str | Path,
    level: int,
    json_logs: bool,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> RotatingFileHandler:
    file_path = Path(log_file)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    fh = RotatingFileHandler(
        filename=str(file_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    fh.setLevel(level)
    if json_logs:
        fh.setFormatter(_JSONFormatter())
    else:
        fh.setFormatter(logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT))
    return fh


def _level_of(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


# ========================== ScopeLogger ====================================


class ScopeLogger:
    """Structured logger for AdScope components.

    Each instance is bound to a *component* (e.g. ``"decoders"``).
    Keyword arguments other than the standard logging ones are carried
    into the JSON ``extra`` field.

    Usage::

        log = ScopeLogger("collectors.ble")
        log.info("Scan started")
        log.debug("Advertisement from %s", address, rssi=-60)

    Args:
        component:       Dotted component name below ``adscope``.
        log_level:       Minimum severity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file:        Path to the rotating log file. ``None`` disables file logging.
        json_logs:       If ``True`` the file handler emits JSON lines.
        console_output:  If ``True`` attach a colour Rich console handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        console_output: bool = True,
    ) -> None:
        self._component = component

        self._logger = logging.getLogger(f"{_ROOT_NAME}.{component}")
        self._logger.setLevel(_level_of(log_level))
        self._logger.propagate = False

        # Prevent duplicate handlers on re-instantiation
        self._logger.handlers.clear()

        if console_output:
            self._logger.addHandler(_ColorConsoleHandler(level=_level_of(log_level)))

        if log_file is not None:
            self._logger.addHandler(
                _file_handler(log_file, _level_of(log_level), json_logs)
            )

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Inject the component name and keyword fields into *extra*."""
        extra = kwargs.pop("extra", {}) or {}

        scope_extra: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                scope_extra[key] = kwargs.pop(key)

        extra["component"] = self._component
        if scope_extra:
            extra["scope_extra"] = scope_extra

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Context manager for measuring and logging elapsed time."""

        def __init__(self, logger_inst: ScopeLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> ScopeLogger._TimingContext:
            self._start = time.perf_counter()
            self._logger.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.info(
                "Completed: %s (%.3f sec)", self._label, self.elapsed
            )

        @property
        def elapsed(self) -> float:
            """Seconds elapsed since entering the context."""
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start / finish and elapsed time."""
        return self._TimingContext(self, label)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def component(self) -> str:
        """Name of the AdScope component this logger is bound to."""
        return self._component

    @property
    def underlying(self) -> logging.Logger:
        """Direct access to the stdlib :class:`logging.Logger`."""
        return self._logger


# ========================= Module-level configuration ======================


def configure_logging(
    log_level: str = "WARNING",
    log_file: str | Path | None = None,
    json_logs: bool = False,
) -> None:
    """Re-apply level and file output to every ``adscope.*`` logger.

    Module-level :class:`ScopeLogger` instances are created at import
    time with defaults; the CLI calls this once the configuration is
    known. Existing file handlers are replaced, console handlers kept.
    """
    level = _level_of(log_level)
    prefix = f"{_ROOT_NAME}."
    # One shared handler so rotation is not raced by several file objects
    shared_fh = _file_handler(log_file, level, json_logs) if log_file else None
    for name, candidate in list(logging.Logger.manager.loggerDict.items()):
        if not name.startswith(prefix) or not isinstance(candidate, logging.Logger):
            continue
        candidate.setLevel(level)
        for handler in list(candidate.handlers):
            if isinstance(handler, RotatingFileHandler):
                candidate.removeHandler(handler)
                handler.close()
            else:
                handler.setLevel(level)
        if shared_fh is not None:
            candidate.addHandler(shared_fh)
