from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from . import logger


RENDERER_KINDS = ("text", "json", "null")


class ConfigError(ValueError):
    pass


@dataclass
class SimulatorConfig:
    log_dir: str = ".logs"
    log_max_bytes: int = 1_048_576
    log_backups: int = 5
    log_stdout: bool = True
    renderer: str = "text"
    tick_seconds: float = 0.0  # delay between steps when the CLI autoplays


_ENV_KEYS = {
    "BFS_LOG_DIR": "log_dir",
    "BFS_LOG_MAX_BYTES": "log_max_bytes",
    "BFS_LOG_BACKUPS": "log_backups",
    "BFS_LOG_STDOUT": "log_stdout",
    "BFS_RENDERER": "renderer",
    "BFS_TICK_SECONDS": "tick_seconds",
}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"expected a boolean, got {value!r}")


def _coerce(name: str, value: Any) -> Any:
    try:
        if name in ("log_max_bytes", "log_backups"):
            if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
                raise ValueError(value)
            return int(value)
        if name == "tick_seconds":
            return float(value)
        if name == "log_stdout":
            return _parse_bool(value)
        return str(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid value for {name}: {value!r}") from exc


def validate_config(cfg: SimulatorConfig) -> SimulatorConfig:
    if cfg.log_max_bytes <= 0:
        raise ConfigError("log_max_bytes must be > 0")
    if cfg.log_backups < 1:
        raise ConfigError("log_backups must be >= 1")
    if not math.isfinite(cfg.tick_seconds) or cfg.tick_seconds < 0:
        raise ConfigError("tick_seconds must be a finite number >= 0")
    if cfg.renderer not in RENDERER_KINDS:
        raise ConfigError(f"renderer must be one of {', '.join(RENDERER_KINDS)}")
    return cfg


def load_config(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> SimulatorConfig:
    """Build a config from defaults, an optional JSON file, then BFS_* env overrides."""
    if env is None:
        env = os.environ
    known = {f.name for f in fields(SimulatorConfig)}
    values: Dict[str, Any] = {}

    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise ConfigError(f"cannot read config file {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"config file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("config file must contain a JSON object")
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        for k, v in data.items():
            values[k] = _coerce(k, v)

    for env_key, name in _ENV_KEYS.items():
        if env_key in env:
            values[name] = _coerce(name, env[env_key])

    return validate_config(replace(SimulatorConfig(), **values))


def apply_config(cfg: SimulatorConfig) -> None:
    logger.configure(
        log_dir=cfg.log_dir,
        max_bytes=cfg.log_max_bytes,
        backups=cfg.log_backups,
        stdout=cfg.log_stdout,
    )
