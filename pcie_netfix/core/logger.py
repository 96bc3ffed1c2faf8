# SPDX-License-Identifier: LGPL-3.0-or-later
# pcie_netfix/core/logger.py
"""
Logging for pcie-netfix.

One project logger (`pcie_netfix`) with child loggers per component. On a
terminal records are printed with a level emoji and termcolor colours; under
systemd (`--json-logs`) they are NDJSON lines so the journal keeps the
structured context attached with `Log.bind` or the `**ctx` helpers.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from termcolor import colored as _colored

LOGGER_NAME = "pcie_netfix"

# -vvv
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# levelname -> (emoji, termcolor colour)
_LEVELS: Dict[str, Tuple[str, str]] = {
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}


def is_tty(stream=None) -> bool:
    """True if `stream` (stdout by default) is attached to a terminal."""
    try:
        return (stream or sys.stdout).isatty()
    except (AttributeError, ValueError, OSError):
        return False


def c(
    text: str,
    color: Optional[str] = None,
    attrs: Optional[List[str]] = None,
    *,
    enable: bool = True,
) -> str:
    """Colorize text with termcolor when enabled."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


def _ctx_suffix(ctx: Optional[Mapping[str, Any]]) -> str:
    if not ctx:
        return ""
    parts = []
    for k in sorted(ctx, key=str):
        v = str(ctx[k]).replace("\n", "\\n")
        parts.append(f"{k}={v}")
    return " " + " ".join(parts)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Adds a fixed context dict to every record; `extra={"ctx": {...}}` from the
    call site is merged over it.
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Mapping[str, Any]] = None):
        super().__init__(logger, {"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["ctx"] = {**self.extra["ctx"], **(extra.get("ctx") or {})}
        kwargs["extra"] = extra
        return msg, kwargs


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    show_ms: bool = False
    show_src: bool = False  # module:line
    show_logger: bool = False


class EmojiFormatter(logging.Formatter):
    """`HH:MM:SS <emoji> LEVEL    message key=value ...`"""

    def __init__(self, style: LogStyle):
        super().__init__()
        self._style = style

    def format(self, record: logging.LogRecord) -> str:
        st = self._style
        when = _dt.datetime.fromtimestamp(record.created)
        ts = when.strftime("%H:%M:%S.%f")[:-3] if st.show_ms else when.strftime("%H:%M:%S")
        emoji, colour = _LEVELS.get(record.levelname, ("•", None))
        color_ok = st.color and is_tty(sys.stderr)

        where = []
        if st.show_logger:
            where.append(record.name)
        if st.show_src:
            where.append(f"{record.module}:{record.lineno}")
        where_s = f" [{' '.join(where)}]" if where else ""

        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, colour, ["bold"], enable=color_ok)
        level = c(f"{record.levelname:<8}", colour, enable=color_ok)

        line = f"{ts} {emoji} {level}{where_s} {msg}{_ctx_suffix(getattr(record, 'ctx', None))}"
        if record.exc_info:
            tb = "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
            line += "\n" + c(tb, "red", enable=color_ok)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record (journald / log shipping)."""

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
            obj["ctx"] = dict(ctx)
        if record.exc_info:
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """-q WARNING, -qq ERROR, -vv DEBUG, -vvv TRACE, else INFO. Quiet wins."""
        if quiet:
            return logging.ERROR if quiet >= 2 else logging.WARNING
        if verbose >= 3:
            return TRACE
        if verbose == 2:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def get(name: Optional[str] = None) -> logging.Logger:
        return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def banner(logger: logging.Logger, title: str, *, char: str = "─", width: int = 72) -> None:
        logger.info(f" {title.strip()} ".center(width, char))

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
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        logger_name: str = LOGGER_NAME,
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        (Re)configure the project logger: stderr handler plus an optional file
        handler. The file never gets colours; with json_logs both are NDJSON.
        Safe to call twice (the CLI does, after config files are merged).
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        handlers: List[logging.Handler] = []
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(
            JsonFormatter() if json_logs else EmojiFormatter(LogStyle(color=color, show_src=verbose >= 3))
        )
        handlers.append(stream)

        if log_file:
            path = Path(log_file).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
            fh.setFormatter(
                JsonFormatter()
                if json_logs
                else EmojiFormatter(LogStyle(color=False, show_ms=True, show_src=True, show_logger=True))
            )
            handlers.append(fh)

        for h in handlers:
            h.setLevel(level)
            logger.addHandler(h)

        logger.debug("Logging at %s", logging.getLevelName(level))
        return logger
