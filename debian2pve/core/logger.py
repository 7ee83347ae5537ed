# SPDX-License-Identifier: LGPL-3.0-or-later
# debian2pve/core/logger.py
"""
Logging for debian2pve.

Console lines look like

    12:00:01 ✅ INFO     ✅ Rewrote interfaces bridge=vmbr0 path=/etc/network/interfaces

Structured context travels in `extra={"ctx": {...}}` (see Log.ok / Log.warn)
and is appended as sorted key=value pairs, or as a `ctx` object in NDJSON
mode (--json-logs).
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from termcolor import colored as _colored

TRACE = 5
if not hasattr(logging, "TRACE"):
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.addLevelName(TRACE, "TRACE")


def _logger_trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _logger_trace  # type: ignore[attr-defined]

_LEVEL_EMOJI = {
    "TRACE": "🧬",
    "DEBUG": "🔍",
    "INFO": "✅",
    "WARNING": "⚠️",
    "ERROR": "💥",
    "CRITICAL": "🧨",
}
_LEVEL_COLOR = {
    "TRACE": "cyan",
    "DEBUG": "blue",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red",
}


def c(text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None, *, enable: bool = True) -> str:
    """Colorize text if enabled."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


def _ctx_pairs(ctx: Optional[Dict[str, Any]]) -> str:
    if not ctx:
        return ""
    return "".join(f" {k}={str(ctx[k]).replace(chr(10), ' ')}" for k in sorted(ctx))


class EmojiFormatter(logging.Formatter):
    """
    Human console/file format. Colour is applied only when `color` is set and
    stderr is a terminal; log files never get ANSI codes.
    """

    def __init__(self, *, color: bool = True, show_src: bool = False, show_pid: bool = False):
        super().__init__()
        self.color = color
        self.show_src = show_src
        self.show_pid = show_pid

    def format(self, record: logging.LogRecord) -> str:
        color_ok = self.color and sys.stderr.isatty()
        ts = _dt.datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = record.levelname
        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, _LEVEL_COLOR.get(level), ["bold"], enable=color_ok)

        where = []
        if self.show_pid:
            where.append(f"pid={os.getpid()}")
        if self.show_src:
            where.append(f"{record.module}:{record.lineno}")
        where_s = f" [{' '.join(where)}]" if where else ""

        line = (
            f"{ts} {_LEVEL_EMOJI.get(level, '•')} "
            f"{c(f'{level:<8}', _LEVEL_COLOR.get(level), enable=color_ok)}{where_s} {msg}"
            f"{_ctx_pairs(getattr(record, 'ctx', None))}"
        )
        if record.exc_info:
            line += "\n" + "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "lineno": record.lineno,
        }
        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = {str(k): str(v) for k, v in ctx.items()}
        if record.exc_info:
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False)


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
        -q WARNING, -qq ERROR, default INFO, -vv DEBUG, -vvv TRACE.
        Quiet wins over verbose.
        """
        if quiet >= 2:
            return logging.ERROR
        if quiet == 1:
            return logging.WARNING
        if verbose >= 3:
            return TRACE
        if verbose >= 2:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def banner(logger: logging.Logger, title: str) -> None:
        t = f" {title.strip()} "
        side = "─" * max(8, (72 - len(t)) // 2)
        logger.info((side + t + side)[:72])

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("➡️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("✅ %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.warning("⚠️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any) -> None:
        logger.trace(msg, *args)  # type: ignore[attr-defined]

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        json_logs: bool = False,
        color: bool = True,
        logger_name: str = "debian2pve",
    ) -> logging.Logger:
        """
        Configure and return the project logger (idempotent: old handlers are
        replaced, so the CLI can call it again once config files are merged).
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        sh = logging.StreamHandler(stream=sys.stderr)
        sh.setFormatter(
            JsonFormatter() if json_logs else EmojiFormatter(color=color, show_src=verbose >= 3, show_pid=verbose >= 2)
        )
        logger.addHandler(sh)

        if log_file:
            fp = Path(log_file).expanduser()
            fp.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(fp, encoding="utf-8")
            fh.setFormatter(JsonFormatter() if json_logs else EmojiFormatter(color=False, show_src=True, show_pid=True))
            logger.addHandler(fh)

        for h in logger.handlers:
            h.setLevel(level)

        logger.debug("Logger initialized (level=%s)", logging.getLevelName(level))
        return logger
