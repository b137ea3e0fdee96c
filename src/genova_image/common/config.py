"""Provider configuration from environment and optional YAML file."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

LOGGER = logging.getLogger("genova.config")

DEFAULT_TIMEOUT = 120.0

_KEY_VARS = ("GENOVA_API_KEY", "NEXT_PUBLIC_API_KEY")
_BASE_URL_VARS = ("GENOVA_API_BASE_URL", "NEXT_PUBLIC_API_BASE_URL")


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and endpoint of the image-generation provider."""
    api_key: Optional[str]
    base_url: Optional[str]
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key) and bool(self.base_url)

    @property
    def generations_url(self) -> str:
        return f"{self.base_url}/images/generations"

    def redacted(self) -> dict[str, Any]:
        return {
            "has_api_key": bool(self.api_key),
            "has_base_url": bool(self.base_url),
            "base_url": self.base_url,
            "timeout": self.timeout,
        }


def load_cfg(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return {} if data is None else data


def _first_env(names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _parse_timeout(raw: Any) -> float:
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring unparseable timeout %r; using %s", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        LOGGER.warning("Ignoring non-positive timeout %r; using %s", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return timeout


def load_provider_config(path: Optional[str] = None) -> ProviderConfig:
    """
    Resolve provider configuration at call time.

    Args:
        path: Optional YAML file; defaults to $GENOVA_CONFIG. A missing file
            is ignored. Environment variables override file values.
    """
    cfg: dict[str, Any] = {}
    cfg_path = path or os.getenv("GENOVA_CONFIG")
    if cfg_path and Path(cfg_path).is_file():
        try:
            loaded = load_cfg(cfg_path)
        except yaml.YAMLError as e:
            LOGGER.warning("Ignoring unreadable config file %s: %s", cfg_path, e)
            loaded = {}
        if isinstance(loaded, dict):
            cfg = loaded
        else:
            LOGGER.warning("Ignoring config file %s: top level is not a mapping", cfg_path)

    api_key = _first_env(_KEY_VARS) or cfg.get("api_key")
    base_url = _first_env(_BASE_URL_VARS) or cfg.get("api_base_url")
    timeout = os.getenv("GENOVA_TIMEOUT") or cfg.get("timeout") or DEFAULT_TIMEOUT

    if base_url:
        base_url = str(base_url).rstrip("/")
    return ProviderConfig(
        api_key=str(api_key) if api_key else None,
        base_url=base_url or None,
        timeout=_parse_timeout(timeout),
    )
