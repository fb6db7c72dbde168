"""Logging setup for the ``go2ts`` logger namespace.

Modules call ``get_logger(__name__)`` and log freely; nothing is emitted until
``configure_logging`` installs handlers from the ``[logging]`` config table:

* console: records below ERROR on stdout, ERROR and above on stderr;
* ``<log dir>/go2ts-<timestamp>.log`` when ``file_logging`` is on (or a log
  directory is passed explicitly);
* a JSON-lines twin of the text log when ``jsonl`` is on.
"""

import datetime as _dt
import json
import logging as _logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

_LOGGER_NAMESPACE = "go2ts"

_LINE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_COLORS = {
    _logging.DEBUG: "\033[36m",
    _logging.INFO: "\033[37m",
    _logging.WARNING: "\033[33m",
    _logging.ERROR: "\033[31m",
    _logging.CRITICAL: "\033[41m",
}
_COLOR_RESET = "\033[0m"

# attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(_logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


@dataclass
class LoggingState:
    log_dir: Optional[str]
    text_log_path: Optional[str]
    jsonl_log_path: Optional[str]
    console_level: int
    file_level: int
    jsonl_enabled: bool


_state: Optional[LoggingState] = None


def _parse_level(value, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    name = str(value).strip().upper()
    if name.isdigit():
        return int(name)
    level = _logging.getLevelNamesMapping().get(name)
    if level is None:
        raise ValueError(f"Unknown log level: {value}")
    return level


class _ConsoleFormatter(_logging.Formatter):
    def __init__(self, use_color: bool) -> None:
        super().__init__(fmt=_LINE_FORMAT, datefmt=_DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: _logging.LogRecord) -> str:
        text = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{text}{_COLOR_RESET}" if color else text


class _BelowLevelFilter(_logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: _logging.LogRecord) -> bool:
        return record.levelno < self.level


class _JsonLinesFormatter(_logging.Formatter):
    def format(self, record: _logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, _DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.lineno}",
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            try:
                json.dumps(value)
            except TypeError:
                value = repr(value)
            entry[key] = value
        return json.dumps(entry, ensure_ascii=False)


def _log_file_name(pattern: str, timestamp_format: str, suffix: str) -> str:
    stamp = _dt.datetime.now().strftime(timestamp_format)
    name = pattern.format(timestamp=stamp)
    root, _ = os.path.splitext(name)
    return root + suffix


def _resolve_log_dir(logging_cfg: Dict[str, Any], override: Optional[str]) -> Optional[str]:
    if override:
        return os.path.abspath(override)
    if not logging_cfg.get("file_logging", False):
        return None
    configured = logging_cfg.get("dir") or os.path.join(os.getcwd(), logging_cfg.get("subdir", "logs"))
    return os.path.abspath(configured)


def _console_handlers(level: int, use_color: bool) -> List[_logging.Handler]:
    out = _logging.StreamHandler(stream=sys.stdout)
    out.setLevel(level)
    out.addFilter(_BelowLevelFilter(_logging.ERROR))
    out.setFormatter(_ConsoleFormatter(use_color and sys.stdout.isatty()))

    err = _logging.StreamHandler(stream=sys.stderr)
    err.setLevel(max(level, _logging.ERROR))
    err.setFormatter(_ConsoleFormatter(use_color and sys.stderr.isatty()))
    return [out, err]


def _file_handler(path: str, level: int, formatter: _logging.Formatter) -> _logging.Handler:
    handler = _logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: Optional[str] = None) -> _logging.Logger:
    """Return the package logger, or a child of it for ``name``."""
    if not name or name == _LOGGER_NAMESPACE:
        return _logging.getLogger(_LOGGER_NAMESPACE)
    if name.startswith(_LOGGER_NAMESPACE + "."):
        return _logging.getLogger(name)
    return _logging.getLogger(f"{_LOGGER_NAMESPACE}.{name}")


def configure_logging(
    config: Dict[str, Any],
    *,
    console_level_override: Optional[str] = None,
    file_level_override: Optional[str] = None,
    log_dir_override: Optional[str] = None,
    disable_color: bool = False,
    enable_jsonl_override: Optional[bool] = None,
    force_reconfigure: bool = False,
) -> LoggingState:
    """Install go2ts handlers from ``config["logging"]``.

    A second call is a no-op returning the current state unless
    ``force_reconfigure`` is set.
    """
    global _state

    logging_cfg: Dict[str, Any] = (config or {}).get("logging", {})
    console_level = _parse_level(
        console_level_override, _parse_level(logging_cfg.get("console_level"), _logging.INFO))
    file_level = _parse_level(
        file_level_override, _parse_level(logging_cfg.get("file_level"), _logging.DEBUG))

    logger = get_logger()
    if _state is not None and logger.handlers and not force_reconfigure:
        return _state

    log_dir = _resolve_log_dir(logging_cfg, log_dir_override)
    jsonl_enabled = bool(
        logging_cfg.get("jsonl", False) if enable_jsonl_override is None else enable_jsonl_override)
    use_color = bool(logging_cfg.get("color", True)) and not disable_color

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False
    logger.setLevel(min(console_level, file_level) if log_dir else console_level)
    for handler in _console_handlers(console_level, use_color):
        logger.addHandler(handler)

    text_log_path = None
    jsonl_log_path = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        pattern = logging_cfg.get("filename_pattern", "go2ts-{timestamp}.log")
        timestamp_format = logging_cfg.get("timestamp_format", "%Y%m%dT%H%M%S")

        text_log_path = os.path.join(log_dir, _log_file_name(pattern, timestamp_format, ".log"))
        logger.addHandler(_file_handler(
            text_log_path, file_level, _logging.Formatter(_LINE_FORMAT, _DATE_FORMAT)))
        if jsonl_enabled:
            jsonl_log_path = os.path.join(log_dir, _log_file_name(pattern, timestamp_format, ".jsonl"))
            logger.addHandler(_file_handler(jsonl_log_path, file_level, _JsonLinesFormatter()))

    _state = LoggingState(
        log_dir=log_dir,
        text_log_path=text_log_path,
        jsonl_log_path=jsonl_log_path,
        console_level=console_level,
        file_level=file_level,
        jsonl_enabled=jsonl_enabled,
    )
    logger.debug("Logging configured: console=%s, log_dir=%s",
                 _logging.getLevelName(console_level), log_dir or "-")
    return _state


def get_logging_state() -> Optional[LoggingState]:
    return _state


def is_configured() -> bool:
    return bool(get_logger().handlers)
