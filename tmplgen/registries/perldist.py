"""metacpan.org client."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..checksum import ChecksumService
from ..config import DEFAULT_METACPAN_URL
from ..dependencies import PerlRequirement, perl_dependencies
from ..errors import PackageNotFoundError, RegistryUnavailableError
from ..http import JSONClient
from ..logging import get_logger
from ..models import PkgInfo, PkgType
from ..tables import StaticTables
from .base import RegistryClient, _as_dict, _as_str, _non_empty

logger = get_logger("registries.perldist")


class PerlDistClient(RegistryClient):
    """Looks up Perl distributions, accepting module names as well."""

    pkg_type = PkgType.PERLDIST

    def __init__(
        self,
        http: JSONClient | None = None,
        checksum: ChecksumService | None = None,
        tables: StaticTables | None = None,
        *,
        max_workers: int = 8,
    ) -> None:
        self._http = http or JSONClient(DEFAULT_METACPAN_URL)
        self._checksum = checksum or ChecksumService()
        self._tables = tables
        self._max_workers = max_workers

    def fetch(self, name: str) -> PkgInfo:
        release = self._release(self.pkg_type.strip_prefix(name))
        logger.debug("metacpan.org query result: %s", release)

        dist = _as_str(release.get("distribution")) or _as_str(release.get("name"))
        version = _as_str(release.get("version"))
        raw_url = _as_str(release.get("download_url"))
        if not dist or not version or not raw_url:
            raise RegistryUnavailableError(f"metacpan.org returned incomplete data for {name}")

        checksum = _as_str(release.get("checksum_sha256")) or self._checksum.compute(raw_url)
        resources = _as_dict(release.get("resources"))

        info = PkgInfo(
            pkg_name=f"{self.pkg_type.prefix}{dist}",
            version=version,
            description=_non_empty(release.get("abstract")),
            homepage=_non_empty(resources.get("homepage")) or f"https://metacpan.org/pod/{dist}",
            license=self._license(release),
            dependencies=perl_dependencies(
                self._requirements(release),
                self.resolve_distribution,
                self._tables,
                max_workers=self._max_workers,
            ),
            checksum=checksum,
            download_url=raw_url.replace(version, "${version}"),
        )
        logger.debug("All pkg related info: %s", info)
        return info

    def resolve_distribution(self, module: str) -> str:
        """Return the name of the distribution that ships ``module``."""
        try:
            data = _as_dict(
                self._http.get("module", module, platform=self.platform, name=module)
            )
        except PackageNotFoundError:
            data = _as_dict(
                self._http.get("release", module, platform=self.platform, name=module)
            )
        dist = _as_str(data.get("distribution"))
        if not dist:
            raise PackageNotFoundError(module, self.platform)
        logger.debug("Module %s is provided by %s", module, dist)
        return dist

    def _probe(self, name: str) -> dict:
        return self._release(self.pkg_type.strip_prefix(name))

    def _release(self, name: str) -> dict:
        try:
            return _as_dict(self._http.get("release", name, platform=self.platform, name=name))
        except PackageNotFoundError:
            # Not a distribution name; maybe a module inside one.
            module = _as_dict(self._http.get("module", name, platform=self.platform, name=name))
            dist = _as_str(module.get("distribution"))
            if not dist:
                raise
            logger.debug("%s is a module of distribution %s", name, dist)
            return _as_dict(self._http.get("release", dist, platform=self.platform, name=name))

    @staticmethod
    def _requirements(release: dict) -> List[PerlRequirement]:
        requirements: List[PerlRequirement] = []
        for entry in release.get("dependency") or []:
            entry = _as_dict(entry)
            module = _as_str(entry.get("module"))
            phase = _as_str(entry.get("phase"))
            if module and phase:
                requirements.append(PerlRequirement(module, phase))
        return requirements

    @staticmethod
    def _license(release: dict) -> Optional[Tuple[str, ...]]:
        raw = release.get("license")
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            return None
        licenses = tuple(item for item in raw if isinstance(item, str) and item and item != "unknown")
        return licenses or None


__all__ = ["PerlDistClient"]
