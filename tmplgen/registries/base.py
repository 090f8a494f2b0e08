"""Base classes for registry clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..errors import PackageNotFoundError
from ..models import PkgInfo, PkgType


class RegistryClient(ABC):
    """Contract for clients that turn a package name into a :class:`PkgInfo`."""

    pkg_type: PkgType

    @abstractmethod
    def fetch(self, name: str) -> PkgInfo:
        """Return normalized metadata for the latest release of ``name``."""

    @abstractmethod
    def _probe(self, name: str) -> Any:
        """Issue the cheapest request that tells whether ``name`` exists."""

    def exists(self, name: str) -> bool:
        """Return True when the registry knows ``name``.

        :class:`~tmplgen.errors.RegistryUnavailableError` propagates so callers
        can tell "missing" apart from "unreachable".
        """
        try:
            self._probe(name)
        except PackageNotFoundError:
            return False
        return True

    @property
    def platform(self) -> str:
        return self.pkg_type.platform


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _non_empty(value: Any) -> str | None:
    text = _as_str(value)
    if text is None:
        return None
    text = text.strip()
    return text or None


__all__ = ["RegistryClient"]
