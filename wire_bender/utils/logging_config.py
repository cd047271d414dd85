"""Logging configuration for the command-line entry points.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are installed here, once, by whichever script owns the process.

Public API:
    setup_logging(log_level="INFO", context={"app": "compile_bend"})
    push_context(program="part.bend")
    pop_context(keys=["program"])

Format examples:
    Human: 2026-10-19T13:45:12.345Z | INFO     | app=compile_bend | Message
    JSON: {"t":"2026-10-19T13:45:12.345Z","lvl":"INFO","app":"compile_bend","msg":"..."}

Context uses contextvars for thread isolation.
Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


_context_var = contextvars.ContextVar('logging_context', default={})

_configured = False


class ContextFormatter(logging.Formatter):
    """Formatter that appends contextual fields to every record.

    Supports a human-readable format with optional colors and a JSON
    lines format.
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True):
        super().__init__()
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

        self.colors = {
            'DEBUG': '\033[36m',
            'INFO': '\033[32m',
            'WARNING': '\033[33m',
            'ERROR': '\033[31m',
            'CRITICAL': '\033[35m',
            'RESET': '\033[0m'
        }

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get({})
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)

        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: dict
    ) -> str:
        log_dict = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'msg': record.getMessage()
        }
        log_dict.update(context)

        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)

        return json.dumps(log_dict)

    def _format_human(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: dict
    ) -> str:
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'

        level = record.levelname
        if self.use_color:
            level = f"{self.colors.get(level, '')}{level:8s}{self.colors['RESET']}"
        else:
            level = f"{level:8s}"

        parts = [ts_str, '|', level, '|']
        context_str = ' '.join(f"{k}={v}" for k, v in context.items())
        if context_str:
            parts.extend([context_str, '|'])
        parts.append(record.getMessage())

        line = ' '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure root logger (idempotent).

    Parameters
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    log_file : str, optional
        Log file path; None for no file logging
    json : bool
        Use JSON lines on the console, default False
    color : bool
        Use ANSI colors in console output, default True
    context : dict, optional
        Initial contextual fields (e.g., {"app": "compile_bend"})

    Returns
    -------
    list[logging.Handler]
        Handlers attached to the root logger.
    """
    global _configured

    root = logging.getLogger()
    if _configured:
        root.handlers.clear()

    root.setLevel(getattr(logging, log_level.upper()))

    handlers: List[logging.Handler] = []
    fmt_mode = "json" if json else "human"

    # Console output goes to stderr; stdout may carry the generated G-code.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ContextFormatter(fmt_mode, color))
    root.addHandler(console_handler)
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
        root.addHandler(file_handler)
        handlers.append(file_handler)

    if context:
        push_context(**context)

    logging.captureWarnings(True)

    _configured = True
    return handlers


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(app="compile_bend")
    >>> logger.info("Started")  # → "... | app=compile_bend | Started"
    """
    current = _context_var.get({})
    _context_var.set({**current, **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; clears all context when *keys* is None."""
    if keys is None:
        _context_var.set({})
    else:
        current = dict(_context_var.get({}))
        for key in keys:
            current.pop(key, None)
        _context_var.set(current)
