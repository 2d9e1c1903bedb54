from __future__ import annotations

import json
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Optional

from appdirs import user_log_dir

from airgrab.constants.logging_constants import (
    LOG_DEFAULT_BACKUPS,
    LOG_DEFAULT_LEVEL,
    LOG_DEFAULT_MAX_BYTES,
    LOG_DEFAULT_NAME,
    LOG_ENV_PREFIX,
    LOG_LEVEL_MAP,
    env_flag,
    env_log_json,
    env_log_level,
    env_log_stderr,
)

# Package roots that already carry our handlers.
_CONFIGURED_ROOTS: set[str] = set()

# LogRecord attributes that are not user context.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(threadName)s | %(name)s | %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(f"{LOG_ENV_PREFIX}{name}")
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _level(level: int | str | None) -> int:
    if level is None:
        return env_log_level()
    if isinstance(level, str):
        return LOG_LEVEL_MAP.get(level.upper(), LOG_DEFAULT_LEVEL)
    return int(level)


def _resolve_log_file(explicit_path: Optional[Path] = None) -> Path:
    """
    Pick the log file: `explicit_path`, then $AIRGRAB_LOG_FILE, then
    ``<user_log_dir>/airgrab.log``. The parent directory is created.
    """
    env_path = os.getenv(f"{LOG_ENV_PREFIX}FILE")
    if explicit_path is not None:
        path = Path(explicit_path)
    elif env_path:
        path = Path(env_path)
    else:
        path = Path(user_log_dir(LOG_DEFAULT_NAME)) / f"{LOG_DEFAULT_NAME}.log"
    path = path.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


class _JsonFormatter(logging.Formatter):
    """
    One JSON object per line. Context added through `add_context` or
    ``extra=`` is carried as top-level keys; values that do not serialise
    are stringified.
    """

    def __init__(self, *, use_utc: bool = False) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")
        if use_utc:
            self.converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RECORD_FIELDS:
                continue
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _formatter(fmt: str, *, use_json: bool, use_utc: bool) -> logging.Formatter:
    if use_json:
        return _JsonFormatter(use_utc=use_utc)
    formatter = logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")
    if use_utc:
        formatter.converter = time.gmtime
    return formatter


def _sync_levels(logger: logging.Logger, console_level: int) -> None:
    """File handlers record everything; the console shows `console_level`."""
    has_file = False
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            has_file = True
        else:
            handler.setLevel(console_level)
    logger.setLevel(min(console_level, logging.DEBUG) if has_file else console_level)


def setup_logger(
    name: str = LOG_DEFAULT_NAME,
    level: int | str | None = None,
    *,
    with_console: bool | None = None,
    with_file: bool = True,
    file_path: Optional[Path] = None,
    fmt_console: str = CONSOLE_FORMAT,
    fmt_file: str = FILE_FORMAT,
    use_json: Optional[bool] = None,
    use_utc: Optional[bool] = None,
    force_reconfigure: bool = False,
    extra_filters: Optional[Iterable[logging.Filter]] = None,
) -> logging.Logger:
    """
    Attach console and file handlers to the `name` logger.

    The console handler (stderr) uses `level`. The rotating file handler
    always records DEBUG, so a `watch` session can be inspected afterwards
    even when the terminal only showed INFO. File lines carry the thread
    name, which tells the clipboard producer from the download consumer.

    A second call for the same root only changes the console level, unless
    `force_reconfigure` is set.

    Parameters
    ----------
    name : str
        Root logger name; module loggers under it inherit the handlers.
    level : int | str | None
        Console level. None reads AIRGRAB_LOG_LEVEL (default INFO).
    with_console : bool | None
        None reads AIRGRAB_LOG_STDERR (default on).
    with_file : bool
        Add the rotating file handler.
    file_path : Optional[Path]
        Log file; otherwise AIRGRAB_LOG_FILE or the user log dir.
    use_json, use_utc : Optional[bool]
        None reads AIRGRAB_LOG_JSON / AIRGRAB_LOG_UTC.
    force_reconfigure : bool
        Rebuild the handlers from scratch.
    extra_filters : Optional[Iterable[logging.Filter]]
        Filters attached to the root logger.

    Notes
    -----
    Rotation honours AIRGRAB_LOG_MAX_BYTES and AIRGRAB_LOG_BACKUPS.
    """
    lvl = _level(level)
    logger = logging.getLogger(name)
    logger.propagate = False

    if name in _CONFIGURED_ROOTS and not force_reconfigure:
        _sync_levels(logger, lvl)
        return logger

    if with_console is None:
        with_console = env_log_stderr()
    if use_json is None:
        use_json = env_log_json()
    if use_utc is None:
        use_utc = env_flag("UTC", False)

    reset_logging(name)

    if with_console:
        console = logging.StreamHandler()
        console.setFormatter(_formatter(fmt_console, use_json=use_json, use_utc=use_utc))
        logger.addHandler(console)

    if with_file:
        handler = RotatingFileHandler(
            _resolve_log_file(file_path),
            maxBytes=_env_int("MAX_BYTES", LOG_DEFAULT_MAX_BYTES),
            backupCount=_env_int("BACKUPS", LOG_DEFAULT_BACKUPS),
            encoding="utf-8",
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_formatter(fmt_file, use_json=use_json, use_utc=use_utc))
        logger.addHandler(handler)

    for flt in extra_filters or ():
        logger.addFilter(flt)

    _sync_levels(logger, lvl)
    _CONFIGURED_ROOTS.add(name)
    return logger


def get_logger(name: str = LOG_DEFAULT_NAME) -> logging.Logger:
    """
    Module logger under the package root. The root is configured from the
    environment the first time any module asks for a logger.
    """
    if LOG_DEFAULT_NAME not in _CONFIGURED_ROOTS:
        setup_logger(LOG_DEFAULT_NAME)
    return logging.getLogger(name)


def log_file_path(name: str = LOG_DEFAULT_NAME) -> Optional[Path]:
    """Path of the file handler on `name`, or None if it has none."""
    for handler in get_logger(name).handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


class _ContextFilter(logging.Filter):
    """Stamp fixed attributes on every record (e.g. component='source')."""

    def __init__(self, **static_context: Any) -> None:
        super().__init__()
        self._ctx = static_context

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for k, v in self._ctx.items():
            setattr(record, k, v)
        return True


def add_context(logger: logging.Logger, **context: Any) -> None:
    """Attach static context to `logger`; shows up as JSON keys."""
    if context:
        logger.addFilter(_ContextFilter(**context))


def set_global_level(level: int | str, name: str = LOG_DEFAULT_NAME) -> None:
    """Set `level` on the root logger and on every handler, file included."""
    lvl = _level(level)
    logger = get_logger(name)
    logger.setLevel(lvl)
    for handler in logger.handlers:
        handler.setLevel(lvl)


def silence_external() -> None:
    """Keep the HTTP stack's connection chatter out of our logs."""
    for noisy in ("urllib3", "requests"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def reset_logging(name: str = LOG_DEFAULT_NAME) -> None:
    """
    Close and remove the handlers and filters of `name` and mark it
    unconfigured.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for flt in list(logger.filters):
        logger.removeFilter(flt)
    _CONFIGURED_ROOTS.discard(name)
