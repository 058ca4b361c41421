"""
JSON logging for the rover pictures service.

Every record is one JSON line on stdout. Structured context (rover, date,
preload outcomes) rides in `extra={"extra": {...}}` and is emitted under
"extra". `setup_logging(force=True)` re-applies the level read from
config/params.yaml once the server has loaded it, and uvicorn's own loggers
are routed through the same handler so access logs share the format.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Optional


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line:
      { "t": 1700000000000, "lvl": "INFO", "name": "picture_service.preload", "msg": "text", "extra": {...} }
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        # log.info("...", extra={"extra": {...}}) lands on record.extra
        if hasattr(record, "extra") and isinstance(record.extra, dict):  # type: ignore[attr-defined]
            payload["extra"] = record.extra  # type: ignore[attr-defined]
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = logging.getLevelName(name)
    return lvl if isinstance(lvl, int) else logging.INFO


def setup_logging(level: Optional[str] = None, *, force: bool = False) -> None:
    """
    Configure the root logger with JSON output on stdout.

    Level precedence: explicit `level`, then env LOG_LEVEL, then INFO.
    Repeated calls are no-ops unless `force=True` (the server calls it again
    once the YAML config has been read).
    """
    root = logging.getLogger()
    if getattr(root, "_pictures_configured", False) and not force:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))
    root._pictures_configured = True  # type: ignore[attr-defined]

    # uvicorn installs its own handlers; route them through ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Module logger; configures the root logger on first use."""
    setup_logging()
    return logging.getLogger(name)
