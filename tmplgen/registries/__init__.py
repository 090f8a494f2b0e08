"""Registry client implementations and construction helpers."""

from __future__ import annotations

from typing import Callable, Dict

from ..checksum import ChecksumService
from ..config import TmplgenConfig
from ..http import JSONClient
from ..models import PkgType
from ..tables import StaticTables
from .base import RegistryClient
from .crates import CratesClient
from .gems import GemsClient
from .perldist import PerlDistClient

ClientFactory = Callable[[TmplgenConfig, ChecksumService, "StaticTables | None"], RegistryClient]


def _http(config: TmplgenConfig, base_url: str) -> JSONClient:
    return JSONClient(
        base_url,
        timeout=config.http.timeout,
        retries=config.http.retries,
        backoff=config.http.backoff,
    )


_BUILTIN_FACTORIES: Dict[PkgType, ClientFactory] = {
    PkgType.CRATE: lambda config, checksum, tables: CratesClient(
        _http(config, config.registries.crates), checksum, tables
    ),
    PkgType.GEM: lambda config, checksum, tables: GemsClient(
        _http(config, config.registries.rubygems), tables
    ),
    PkgType.PERLDIST: lambda config, checksum, tables: PerlDistClient(
        _http(config, config.registries.metacpan), checksum, tables
    ),
}


def build_clients(
    config: TmplgenConfig,
    checksum: ChecksumService | None = None,
    tables: StaticTables | None = None,
) -> Dict[PkgType, RegistryClient]:
    """Instantiate one client per supported registry."""
    checksum = checksum or ChecksumService(
        timeout=config.http.timeout,
        retries=config.http.retries,
        backoff=config.http.backoff,
    )
    return {pkg_type: factory(config, checksum, tables) for pkg_type, factory in _BUILTIN_FACTORIES.items()}


__all__ = [
    "CratesClient",
    "GemsClient",
    "PerlDistClient",
    "RegistryClient",
    "build_clients",
]
