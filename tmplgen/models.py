"""Core data models shared across tmplgen components."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


class PkgType(Enum):
    """Package ecosystems tmplgen can write templates for."""

    CRATE = "crate"
    GEM = "gem"
    PERLDIST = "perldist"

    @classmethod
    def parse(cls, value: str) -> "PkgType":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown package type '{value}' (expected one of {choices})") from exc

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @property
    def build_style(self) -> str:
        return _BUILD_STYLES[self]

    @property
    def platform(self) -> str:
        return _PLATFORMS[self]

    @property
    def runtime(self) -> Optional[str]:
        """Name of the language package every dependency list implies, if any."""
        return _RUNTIMES[self]

    def strip_prefix(self, name: str) -> str:
        if name.startswith(self.prefix):
            return name[len(self.prefix):]
        return name


_PREFIXES = {PkgType.CRATE: "rust-", PkgType.GEM: "ruby-", PkgType.PERLDIST: "perl-"}
_BUILD_STYLES = {PkgType.CRATE: "cargo", PkgType.GEM: "gem", PkgType.PERLDIST: "perl-module"}
_PLATFORMS = {
    PkgType.CRATE: "crates.io",
    PkgType.GEM: "rubygems.org",
    PkgType.PERLDIST: "metacpan.org",
}
_RUNTIMES = {PkgType.CRATE: None, PkgType.GEM: "ruby", PkgType.PERLDIST: "perl"}


@dataclass(frozen=True)
class Dependencies:
    """Dependency specifiers grouped by the template field they end up in."""

    host: Optional[Tuple[str, ...]] = None
    make: Optional[Tuple[str, ...]] = None
    run: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class PkgInfo:
    """Normalized package metadata returned by a registry client."""

    pkg_name: str
    version: str
    homepage: str
    checksum: str
    description: Optional[str] = None
    license: Optional[Tuple[str, ...]] = None
    dependencies: Optional[Dependencies] = None
    download_url: Optional[str] = None

    def without_prefix(self, pkg_type: PkgType) -> "PkgInfo":
        """Return a copy whose name does not carry the ecosystem prefix."""
        return replace(self, pkg_name=pkg_type.strip_prefix(self.pkg_name))


@dataclass(frozen=True)
class Template:
    """A rendered xbps-src template."""

    content: str
    name: str


__all__ = ["Dependencies", "PkgInfo", "PkgType", "Template"]
