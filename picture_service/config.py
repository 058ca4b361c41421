from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from picture_service.upstream import DEFAULT_BASE_URL
from picture_service.validation import ROVERS

DEFAULT_CONFIG_PATH = "config/params.yaml"

DEFAULTS: Dict[str, Any] = {
    "upstream": {"base_url": DEFAULT_BASE_URL, "api_key": None, "timeout": None},
    "preload": {"enabled": True, "dates_file": "config/dates.txt", "rover": "curiosity"},
    "server": {"host": "0.0.0.0", "port": 3000},
    "logging": {"level": "INFO"},
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if v is None and isinstance(out.get(k), dict):
            continue
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """YAML config merged over DEFAULTS; a missing file yields the defaults."""
    path = path or os.environ.get("PICTURES_CONFIG") or DEFAULT_CONFIG_PATH
    if not Path(path).exists():
        return copy.deepcopy(DEFAULTS)
    with open(path, "r", encoding="utf-8") as f:
        return _merge(DEFAULTS, yaml.safe_load(f) or {})


@dataclass(frozen=True)
class Settings:
    base_url: str
    api_key: str
    timeout: Optional[float]
    preload_enabled: bool
    dates_file: str
    preload_rover: str
    host: str
    port: int
    log_level: str

    @classmethod
    def from_dict(cls, P: Dict[str, Any]) -> "Settings":
        # an empty YAML section (`upstream:` alone) loads as None
        up = P.get("upstream") or {}
        pre = P.get("preload") or {}
        srv = P.get("server") or {}
        timeout = up.get("timeout")
        rover = str(pre.get("rover") or "curiosity").lower()
        if rover not in ROVERS:
            raise ValueError(f"preload.rover must be one of {','.join(ROVERS)}, got {rover!r}")
        return cls(
            base_url=str(up.get("base_url") or DEFAULT_BASE_URL),
            # read once at startup, used verbatim in every upstream URL
            api_key=str(up.get("api_key") or os.getenv("NASA_API_KEY") or "DEMO_KEY"),
            timeout=None if timeout is None else float(timeout),
            preload_enabled=bool(pre.get("enabled", True)),
            dates_file=str(pre.get("dates_file", "config/dates.txt")),
            preload_rover=rover,
            host=str(srv.get("host", "0.0.0.0")),
            port=int(srv.get("port", 3000)),
            log_level=str((P.get("logging") or {}).get("level", "INFO")),
        )

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Settings":
        return cls.from_dict(load_config(path))
