"""
Classicrypt Structured Logger
==============================

:class:`LabLogger` wraps a stdlib logger in the ``classicrypt.`` namespace.
Records go to a Rich handler on stderr and, when a log file is configured,
to a size-rotated file as plain text or JSON lines. Every record carries
the component name and the operation currently in scope.

References:
    - Python logging cookbook. https://docs.python.org/3/howto/logging-cookbook.html
    - Rich logging handler. https://rich.readthedocs.io/en/stable/logging.html
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

NAMESPACE = "classicrypt"

_STDLIB_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(component)s:%(operation)s] %(message)s"

_THEME = Theme(
    {
        "log.level.debug": "dim",
        "log.level.info": "cyan",
        "log.level.warning": "yellow",
        "log.level.error": "bold red",
        "log.level.critical": "reverse red",
    }
)


class _ContextFilter(logging.Filter):
    """Stamps component and current operation onto every record."""

    def __init__(self, owner: LabLogger) -> None:
        super().__init__()
        self._owner = owner

    def filter(self, record: logging.LogRecord) -> bool:
        record.component = self._owner.component
        record.operation = self._owner.current_operation or "-"
        if not hasattr(record, "fields"):
            record.fields = {}
        return True


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp``, ``level``, ``logger``, ``component``,
    ``operation``, ``message`` and, when present, ``fields`` (keyword
    arguments passed to the log call) and ``exc_info``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": getattr(record, "component", None),
            "operation": getattr(record, "operation", None),
            "message": record.getMessage(),
        }
        if payload["operation"] == "-":
            payload["operation"] = None
        fields = getattr(record, "fields", None)
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True, theme=_THEME),
        level=level,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    return handler


def _file_handler(path: Path, level: int, json_lines: bool, max_bytes: int, backups: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(
        _JsonLineFormatter() if json_lines else logging.Formatter(_TEXT_FORMAT)
    )
    return handler


@dataclass
class Timer:
    """Wall-clock timer yielded by :meth:`LabLogger.timed`.

    ``elapsed`` keeps growing while the block runs and is fixed once the
    block exits.
    """

    label: str
    started: float = field(default_factory=time.perf_counter)
    stopped: Optional[float] = None

    def stop(self) -> None:
        self.stopped = time.perf_counter()

    @property
    def elapsed(self) -> float:
        end = time.perf_counter() if self.stopped is None else self.stopped
        return end - self.started


class LabLogger:
    """Component logger for the lab.

    Usage::

        log = LabLogger("engine", log_level="INFO")
        with log.operation("simulate_mitm"):
            log.info("Trying %d keys", 26, cipher="shift")

    Extra keyword arguments on a log call end up under ``fields`` in the
    JSON file output.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self.component = component
        self._operations: list[str] = []

        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

        logger = logging.getLogger(f"{NAMESPACE}.{component}")
        logger.setLevel(level)
        logger.propagate = False
        # a second instance for the same component replaces the handlers
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        for old in list(logger.filters):
            logger.removeFilter(old)
        logger.addFilter(_ContextFilter(self))

        if console_output:
            logger.addHandler(_console_handler(level))
        if log_file is not None:
            logger.addHandler(
                _file_handler(Path(log_file), level, json_logs, max_bytes, backup_count)
            )
        self._logger = logger

    @classmethod
    def from_config(cls, component: str, config: Any) -> LabLogger:
        """Logger configured from the ``[global]`` section of a LabConfig."""
        settings = config.global_settings
        level = "DEBUG" if settings.debug else settings.log_level
        return cls(
            component,
            log_level=level,
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )

    @property
    def current_operation(self) -> Optional[str]:
        return self._operations[-1] if self._operations else None

    @property
    def underlying(self) -> logging.Logger:
        return self._logger

    @contextmanager
    def operation(self, name: str) -> Iterator[LabLogger]:
        """Tag records emitted inside the block with *name*. Scopes nest."""
        self._operations.append(name)
        try:
            yield self
        finally:
            self._operations.pop()

    @contextmanager
    def timed(self, label: str) -> Iterator[Timer]:
        """Time the block, logging its start at DEBUG and duration at INFO."""
        timer = Timer(label)
        self.debug("Started: %s", label)
        try:
            yield timer
        finally:
            timer.stop()
            self.info("Completed: %s (%.3f sec)", label, timer.elapsed)

    def _log(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in _STDLIB_KWARGS}
        extra = dict(kwargs.pop("extra", None) or {})
        extra["fields"] = fields
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, args, kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, kwargs)
