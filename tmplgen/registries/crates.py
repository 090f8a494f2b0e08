"""crates.io client."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..checksum import ChecksumService
from ..config import DEFAULT_CRATES_URL
from ..dependencies import crate_native_dependencies
from ..errors import RegistryUnavailableError
from ..http import JSONClient
from ..logging import get_logger
from ..models import PkgInfo, PkgType
from ..tables import StaticTables
from .base import RegistryClient, _as_dict, _as_str, _non_empty

logger = get_logger("registries.crates")

DOWNLOAD_URL = "https://static.crates.io/crates/{name}/{name}-${{version}}.crate"

_LICENSE_SEPARATOR = re.compile(r"\s+OR\s+|/")


class CratesClient(RegistryClient):
    pkg_type = PkgType.CRATE

    def __init__(
        self,
        http: JSONClient | None = None,
        checksum: ChecksumService | None = None,
        tables: StaticTables | None = None,
    ) -> None:
        self._http = http or JSONClient(DEFAULT_CRATES_URL)
        self._checksum = checksum or ChecksumService()
        self._tables = tables

    def fetch(self, name: str) -> PkgInfo:
        data = self._probe(name)
        crate = _as_dict(data.get("crate"))
        version = _as_str(crate.get("max_version")) or _as_str(crate.get("newest_version"))
        if not version:
            raise RegistryUnavailableError(f"crates.io returned no version for {name}")

        dependency_ids = self.dependency_ids(name, version)
        native = crate_native_dependencies(name, dependency_ids, self._tables)

        download_url = DOWNLOAD_URL.format(name=name)
        info = PkgInfo(
            pkg_name=f"{self.pkg_type.prefix}{name}",
            version=version,
            description=_non_empty(crate.get("description")),
            homepage=_non_empty(crate.get("homepage")) or f"https://crates.io/crates/{name}",
            license=self._license(data, version),
            dependencies=native,
            checksum=self._checksum.compute(download_url.replace("${version}", version)),
            download_url=download_url,
        )
        logger.debug("All pkg related info: %s", info)
        return info

    def dependency_ids(self, name: str, version: str) -> List[str]:
        """Return the crate ids the given release depends on."""
        data = self._http.get(
            "crates", name, version, "dependencies", platform=self.platform, name=name
        )
        ids: List[str] = []
        for entry in data.get("dependencies") or []:
            crate_id = _as_str(_as_dict(entry).get("crate_id"))
            if crate_id:
                ids.append(crate_id)
        logger.debug("Crate dependencies of %s %s: %s", name, version, ids)
        return ids

    def _probe(self, name: str) -> dict:
        data = self._http.get("crates", name, platform=self.platform, name=name)
        return _as_dict(data)

    @staticmethod
    def _license(data: dict, version: str) -> Optional[Tuple[str, ...]]:
        expression = None
        for entry in data.get("versions") or []:
            entry = _as_dict(entry)
            if _as_str(entry.get("num")) == version:
                expression = _non_empty(entry.get("license"))
                break
        if expression is None:
            expression = _non_empty(_as_dict(data.get("crate")).get("license"))
        if expression is None:
            return None
        parts = [part.strip() for part in _LICENSE_SEPARATOR.split(expression)]
        return tuple(part for part in parts if part) or None


__all__ = ["CratesClient"]
