"""Read-only lookup tables bundled with tmplgen."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping

import yaml

from .errors import ConfigError

DEFAULT_TABLES_PATH = Path(__file__).with_name("data") / "tables.yml"


@dataclass(frozen=True)
class StaticTables:
    """Built-in package lists, license corrections and crate native dependencies."""

    builtin_ruby: FrozenSet[str]
    builtin_perl: FrozenSet[str]
    licenses: Mapping[str, str]
    native_deps: Mapping[str, str]


def load_tables(path: Path | None = None) -> StaticTables:
    """Parse a tables file. Use :func:`default_tables` for the bundled copy."""
    source = path or DEFAULT_TABLES_PATH
    try:
        data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load lookup tables from {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{source.name} must contain a mapping at the root")

    builtin = _as_dict(data.get("builtin"))
    native = _as_dict(data.get("native_deps"))

    return StaticTables(
        builtin_ruby=frozenset(_as_str_list(builtin.get("ruby"))),
        builtin_perl=frozenset(_as_str_list(builtin.get("perl"))),
        licenses=MappingProxyType(_pairs(data.get("licenses"), "is", "should")),
        native_deps=MappingProxyType(_pairs(native.get("rust"), "name", "dep")),
    )


@lru_cache(maxsize=None)
def default_tables() -> StaticTables:
    return load_tables()


def _pairs(entries: Any, key_field: str, value_field: str) -> Dict[str, str]:
    result: Dict[str, str] = {}
    if not isinstance(entries, list):
        return result
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        key = entry.get(key_field)
        value = entry.get(value_field)
        if isinstance(key, str) and isinstance(value, str):
            # First entry wins, mirroring a linear table scan.
            result.setdefault(key, value)
    return result


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float))]


__all__ = ["DEFAULT_TABLES_PATH", "StaticTables", "default_tables", "load_tables"]
