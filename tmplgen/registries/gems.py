"""rubygems.org client."""

from __future__ import annotations

from typing import List

from ..config import DEFAULT_RUBYGEMS_URL
from ..dependencies import GemRequirement, gem_dependencies
from ..errors import RegistryUnavailableError
from ..http import JSONClient
from ..logging import get_logger
from ..models import PkgInfo, PkgType
from ..tables import StaticTables
from .base import RegistryClient, _as_dict, _as_str, _non_empty

logger = get_logger("registries.gems")


class GemsClient(RegistryClient):
    pkg_type = PkgType.GEM

    def __init__(self, http: JSONClient | None = None, tables: StaticTables | None = None) -> None:
        self._http = http or JSONClient(DEFAULT_RUBYGEMS_URL)
        self._tables = tables

    def fetch(self, name: str) -> PkgInfo:
        name = self.pkg_type.strip_prefix(name)
        data = self._probe(name)

        version = _as_str(data.get("version"))
        sha = _as_str(data.get("sha"))
        if not version or not sha:
            raise RegistryUnavailableError(f"rubygems.org returned incomplete data for {name}")

        licenses = [item for item in (data.get("licenses") or []) if isinstance(item, str) and item]

        info = PkgInfo(
            pkg_name=f"{self.pkg_type.prefix}{name}",
            version=version,
            description=_non_empty(data.get("info")),
            homepage=_non_empty(data.get("homepage_uri")) or f"https://rubygems.org/gems/{name}",
            license=tuple(licenses) or None,
            dependencies=gem_dependencies(self._runtime_requirements(data), self._tables),
            checksum=sha,
        )
        logger.debug("All pkg related info: %s", info)
        return info

    def _probe(self, name: str) -> dict:
        name = self.pkg_type.strip_prefix(name)
        return _as_dict(self._http.get("gems", f"{name}.json", platform=self.platform, name=name))

    @staticmethod
    def _runtime_requirements(data: dict) -> List[GemRequirement]:
        runtime = _as_dict(data.get("dependencies")).get("runtime") or []
        requirements: List[GemRequirement] = []
        for entry in runtime:
            entry = _as_dict(entry)
            dep_name = _as_str(entry.get("name"))
            if dep_name:
                requirements.append(
                    GemRequirement(dep_name, _as_str(entry.get("requirements")) or "")
                )
        return requirements


__all__ = ["GemsClient"]
