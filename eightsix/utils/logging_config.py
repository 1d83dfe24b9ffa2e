"""Logging setup for the `eightsix` command.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
CLI calls :func:`setup_logging` once at startup.

What the CLI gets:
    - One stderr handler, human or JSON lines (--log-json)
    - An optional log file (--log-file), rotated by size when
      --log-max-bytes is given
    - Fields pushed with push_context() (app, seed) on every line
    - Python warnings and uncaught exceptions routed into the log

Line formats:
    Human: 2026-10-19T13:45:12.345Z | INFO     | app=eightsix seed=12345 | Wrote logo.svg
    JSON:  {"t": "2026-10-19T13:45:12.345000+00:00", "lvl": "INFO", "seed": 12345, "msg": "..."}

Calling setup_logging() again replaces the handlers it installed.
"""

import contextvars
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_fields: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    'eightsix_log_fields', default={}
)

# Handlers owned by setup_logging(); anything else on the root is left alone
_installed: List[logging.Handler] = []

_LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Render records with the pushed context fields.

    Parameters
    ----------
    fmt_mode : str
        "human" or "json"
    use_color : bool
        Colour the level name; only honoured when stderr is a terminal
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True):
        super().__init__()
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        fields = _fields.get()
        if self.fmt_mode == "json":
            return self._as_json(record, stamp, fields)
        return self._as_text(record, stamp, fields)

    def _as_json(self, record: logging.LogRecord, stamp: datetime, fields: dict) -> str:
        entry = {
            't': stamp.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'msg': record.getMessage(),
            **fields,
        }
        if record.exc_info:
            entry['exc'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)

    def _as_text(self, record: logging.LogRecord, stamp: datetime, fields: dict) -> str:
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_LEVEL_COLORS.get(record.levelname, '')}{level}{_RESET}"

        parts = [stamp.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z', level]
        if fields:
            parts.append(' '.join(f"{k}={v}" for k, v in fields.items()))
        parts.append(record.getMessage())

        line = ' | '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    max_bytes: Optional[int] = None,
    backup_count: int = 3,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Configure the root logger for a CLI run.

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    log_file : str, optional
        Also write every record to this file (parent directories created)
    json : bool
        JSON lines on every handler instead of the human format
    color : bool
        Coloured level names on the terminal
    max_bytes : int, optional
        Rotate *log_file* once it reaches this size
    backup_count : int
        Rotated files kept when *max_bytes* is set
    quiet_libs : list[str], optional
        Loggers capped at WARNING (e.g. ["PIL", "cairosvg"])
    context : dict, optional
        Fields pushed before the first record

    Returns
    -------
    dict
        {"handlers": [...]} installed by this call
    """
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    root.setLevel(getattr(logging, log_level.upper()))
    fmt_mode = "json" if json else "human"

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ContextFormatter(fmt_mode, color))
    _installed.append(console)

    if log_file:
        _installed.append(_file_handler(log_file, fmt_mode, max_bytes, backup_count))

    for handler in _installed:
        root.addHandler(handler)

    if context:
        push_context(**context)

    for lib in quiet_libs or []:
        logging.getLogger(lib).setLevel(logging.WARNING)

    logging.captureWarnings(True)

    return {'handlers': list(_installed)}


def _file_handler(
    log_file: str,
    fmt_mode: str,
    max_bytes: Optional[int],
    backup_count: int,
) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    if max_bytes:
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
    else:
        handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
    return handler


def push_context(**fields: Any) -> None:
    """Attach *fields* to every following record in this context.

    >>> push_context(seed=12345)
    >>> logger.info("Wrote logo.svg")  # ... | seed=12345 | Wrote logo.svg
    """
    _fields.set({**_fields.get(), **fields})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop *keys* from the context, or every field when *keys* is None."""
    if keys is None:
        _fields.set({})
        return
    _fields.set({k: v for k, v in _fields.get().items() if k not in keys})


def install_excepthook() -> None:
    """Log uncaught exceptions at CRITICAL before the interpreter exits."""
    def log_uncaught(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger(__name__).critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_uncaught
