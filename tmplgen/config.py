"""Configuration loading for tmplgen (tmplgen.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "tmplgen.yml"

DEFAULT_CRATES_URL = "https://crates.io/api/v1"
DEFAULT_RUBYGEMS_URL = "https://rubygems.org/api/v1"
DEFAULT_METACPAN_URL = "https://fastapi.metacpan.org/v1"


@dataclass
class HTTPConfig:
    """Timeouts and retry budget for registry requests."""

    timeout: float = 30.0
    retries: int = 3
    backoff: float = 1.0


@dataclass
class RegistryConfig:
    """Base URLs of the package registries."""

    crates: str = DEFAULT_CRATES_URL
    rubygems: str = DEFAULT_RUBYGEMS_URL
    metacpan: str = DEFAULT_METACPAN_URL


@dataclass
class TmplgenConfig:
    """Represents the settings defined in tmplgen.yml."""

    distdir: Optional[Path] = None
    maintainer: Optional[str] = None
    templates_dir: Optional[Path] = None
    http: HTTPConfig = field(default_factory=HTTPConfig)
    registries: RegistryConfig = field(default_factory=RegistryConfig)
    source: Optional[Path] = None


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return ``$XDG_CONFIG_HOME/tmplgen/tmplgen.yml`` (``~/.config`` when unset)."""
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser() / "tmplgen" / CONFIG_FILENAME


def load_config(
    config_path: Path | None = None, *, environ: Mapping[str, str] | None = None
) -> TmplgenConfig:
    """Load configuration from disk.

    A missing file yields the defaults. ``XBPS_DISTDIR`` in the environment
    overrides the ``distdir`` key.
    """
    env = os.environ if environ is None else environ
    config_file = (config_path or default_config_path(env)).expanduser()

    config = TmplgenConfig()
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{config_file.name} must contain a mapping at the root")
        config = _parse(data, config_file.parent.resolve())
        config.source = config_file.resolve()
    elif config_path is not None:
        raise ConfigError(f"Configuration file {config_file} does not exist")

    env_distdir = env.get("XBPS_DISTDIR")
    if env_distdir:
        config.distdir = Path(env_distdir).expanduser()

    return config


def _parse(data: Dict[str, Any], root: Path) -> TmplgenConfig:
    distdir = _as_str(data.get("distdir"))
    templates_dir = _as_str(data.get("templates_dir"))

    http_data = _as_dict(data.get("http"))
    http = HTTPConfig()
    if http_data:
        timeout = _as_float(http_data.get("timeout"))
        retries = _as_int(http_data.get("retries"))
        backoff = _as_float(http_data.get("backoff"))
        if timeout is not None:
            http.timeout = timeout
        if retries is not None:
            if retries < 1:
                raise ConfigError("http.retries must be at least 1")
            http.retries = retries
        if backoff is not None:
            http.backoff = backoff

    registry_data = _as_dict(data.get("registries"))
    registries = RegistryConfig(
        crates=_as_str(registry_data.get("crates")) or DEFAULT_CRATES_URL,
        rubygems=_as_str(registry_data.get("rubygems")) or DEFAULT_RUBYGEMS_URL,
        metacpan=_as_str(registry_data.get("metacpan")) or DEFAULT_METACPAN_URL,
    )

    return TmplgenConfig(
        distdir=Path(distdir).expanduser() if distdir else None,
        maintainer=_as_str(data.get("maintainer")),
        templates_dir=(root / Path(templates_dir).expanduser()) if templates_dir else None,
        http=http,
        registries=registries,
    )


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "HTTPConfig",
    "RegistryConfig",
    "TmplgenConfig",
    "default_config_path",
    "load_config",
]
