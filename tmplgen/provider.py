"""Figures out which registry a package name belongs to."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Mapping

from .errors import AmbiguousPackageError, PackageNotFoundError, RegistryUnavailableError
from .logging import get_logger
from .models import PkgType
from .registries.base import RegistryClient

logger = get_logger("provider")

# Platforms are reported in this order no matter which probe finishes first.
_PROBE_ORDER = (PkgType.CRATE, PkgType.GEM, PkgType.PERLDIST)


def identify(name: str, clients: Mapping[PkgType, RegistryClient]) -> PkgType:
    """Return the only ecosystem that knows ``name``.

    Raises :class:`AmbiguousPackageError` when several registries answer and
    :class:`PackageNotFoundError` when none does. A registry that cannot be
    reached counts as not having the package.
    """
    ordered = [pkg_type for pkg_type in _PROBE_ORDER if pkg_type in clients]
    if not ordered:
        raise PackageNotFoundError(name)

    with ThreadPoolExecutor(max_workers=len(ordered)) as pool:
        futures = {pkg_type: pool.submit(_probe, clients[pkg_type], name) for pkg_type in ordered}
        found: Dict[PkgType, bool] = {pkg_type: future.result() for pkg_type, future in futures.items()}

    matches = [pkg_type for pkg_type in ordered if found[pkg_type]]
    if len(matches) > 1:
        raise AmbiguousPackageError(name, [pkg_type.platform for pkg_type in matches])
    if not matches:
        raise PackageNotFoundError(name)

    logger.debug("Determined the target package %s to be a %s", name, matches[0].value)
    return matches[0]


def _probe(client: RegistryClient, name: str) -> bool:
    try:
        return client.exists(name)
    except RegistryUnavailableError as exc:
        logger.debug("Could not query %s for %s: %s", client.platform, name, exc)
        return False


__all__ = ["identify"]
