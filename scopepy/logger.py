from __future__ import annotations
import sys, datetime as _dt, json, contextvars
from typing import Optional, Dict, Any


_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


class ConsoleLogger:
    """Minimal leveled logger writing one record per line to stderr.

    Args:
        name: Logger name printed with every record
        level: Minimum level emitted (DEBUG, INFO, WARN, ERROR)
        json_output: Emit compact JSON objects instead of text lines
        context: Fields attached to every record

    Example:
        ```python
        log = ConsoleLogger(level="DEBUG").bind(component="db")
        log.debug("opened", path="/tmp/x")
        # [2026-01-01T00:00:00+00:00] scopepy DEBUG: opened component=db path=/tmp/x
        ```
    """
    def __init__(self, name: str = "scopepy", level: str = "WARN", json_output: bool = False, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.level = _LEVELS.get(level.upper(), 30)
        self.json_output = json_output
        self.context = dict(context or {})

    def set_level(self, level: str) -> None:
        self.level = _LEVELS.get(level.upper(), self.level)

    def bind(self, **fields: Any) -> "ConsoleLogger":
        ctx = dict(self.context); ctx.update(fields)
        return ConsoleLogger(self.name, level=self.level_name, json_output=self.json_output, context=ctx)

    @property
    def level_name(self) -> str:
        for k, v in _LEVELS.items():
            if v == self.level: return k
        return "WARN"

    def is_enabled(self, level: str) -> bool:
        return _LEVELS[level] >= self.level

    def _log(self, level: str, msg: str, **fields: Any) -> None:
        if not self.is_enabled(level):
            return
        ts = _dt.datetime.now(_dt.timezone.utc).isoformat()
        data = {
            "ts": ts,
            "name": self.name,
            "level": level,
            "msg": msg,
        }
        all_fields: Dict[str, Any] = {}
        all_fields.update(self.context)
        all_fields.update(fields)
        if self.json_output:
            if all_fields:
                data["fields"] = all_fields
            print(json.dumps(data, separators=(",", ":"), default=repr), file=sys.stderr)
        else:
            extras = "".join([f" {k}={v}" for k, v in sorted(all_fields.items())]) if all_fields else ""
            print(f"[{ts}] {self.name} {level}: {msg}{extras}", file=sys.stderr)

    def debug(self, msg: str, **fields: Any) -> None: self._log("DEBUG", msg, **fields)
    def info(self, msg: str, **fields: Any) -> None: self._log("INFO", msg, **fields)
    def warn(self, msg: str, **fields: Any) -> None: self._log("WARN", msg, **fields)
    def error(self, msg: str, **fields: Any) -> None: self._log("ERROR", msg, **fields)


_default_logger: contextvars.ContextVar[ConsoleLogger] = contextvars.ContextVar('scopepy_logger', default=ConsoleLogger())


def get_logger() -> ConsoleLogger:
    return _default_logger.get()


def set_logger(logger: ConsoleLogger) -> contextvars.Token:
    """Replace the default logger; returns a token usable with ``reset_logger``."""
    return _default_logger.set(logger)


def reset_logger(token: contextvars.Token) -> None:
    _default_logger.reset(token)
