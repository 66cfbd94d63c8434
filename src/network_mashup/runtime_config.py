"""Runtime configuration loader (config-first, env-overrides)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from network_mashup.router import ECHO_URL, TOP_FREE_URL, TOP_PAID_URL

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "runtime.toml"
DEFAULT_LOCAL_OVERRIDE_PATH = Path(__file__).resolve().parents[2] / "config" / "runtime.local.toml"


@dataclass(frozen=True)
class RuntimeConfig:
    """Materialized runtime configuration."""

    config_path: Path | None
    top_free_url: str
    top_paid_url: str
    echo_url: str
    max_workers: int
    log_level: str


_CURRENT_RUNTIME_CONFIG: RuntimeConfig | None = None


def set_current_runtime_config(config: RuntimeConfig | None) -> None:
    global _CURRENT_RUNTIME_CONFIG
    _CURRENT_RUNTIME_CONFIG = config


def current_runtime_config() -> RuntimeConfig:
    config = _CURRENT_RUNTIME_CONFIG
    if config is not None:
        return config
    loaded = load_runtime_config()
    set_current_runtime_config(loaded)
    return loaded


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for key, value in overlay.items():
        existing = out.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            out[key] = _deep_merge(existing, value)
        else:
            out[key] = value
    return out


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"failed reading runtime config: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise RuntimeError(f"invalid runtime config TOML: {path}") from exc
    if not isinstance(payload, dict):
        raise RuntimeError(f"runtime config root must be a table: {path}")
    return payload


def _as_table(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise RuntimeError(f"runtime config section [{key}] must be a table")
    return value


def _as_str(value: Any, *, default: str) -> str:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped:
            return stripped
    return default


def _as_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def load_runtime_config(config_path: Path | None = None) -> RuntimeConfig:
    """Load runtime config from `config/runtime.toml` plus optional local override.

    An explicit ``config_path`` must exist. When the default file is absent
    (e.g. an installed wheel) the built-in defaults are used.
    """
    source = (config_path or DEFAULT_CONFIG_PATH).expanduser().resolve()
    if not source.exists():
        if config_path is not None:
            raise RuntimeError(f"runtime config file not found: {source}")
        payload: dict[str, Any] = {}
        resolved_path: Path | None = None
    else:
        payload = _read_toml(source)
        if source == DEFAULT_CONFIG_PATH and DEFAULT_LOCAL_OVERRIDE_PATH.exists():
            payload = _deep_merge(payload, _read_toml(DEFAULT_LOCAL_OVERRIDE_PATH))
        resolved_path = source

    endpoints = _as_table(payload, "endpoints")
    service = _as_table(payload, "service")

    max_workers = _as_int(service.get("max_workers"), default=4)
    if max_workers < 1:
        raise RuntimeError(f"[service] max_workers must be >= 1, got {max_workers}")

    return RuntimeConfig(
        config_path=resolved_path,
        top_free_url=_as_str(endpoints.get("top_free_url"), default=TOP_FREE_URL),
        top_paid_url=_as_str(endpoints.get("top_paid_url"), default=TOP_PAID_URL),
        echo_url=_as_str(endpoints.get("echo_url"), default=ECHO_URL),
        max_workers=max_workers,
        log_level=_as_str(service.get("log_level"), default="WARNING").upper(),
    )
