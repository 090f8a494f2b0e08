"""Per-ecosystem dependency normalization and dependency-string rendering."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .builtin_filter import is_built_in
from .logging import get_logger
from .models import Dependencies, PkgType
from .tables import StaticTables, default_tables

logger = get_logger("dependencies")

# Wrap threshold for the last line of a depends field. Together with the
# `makedepends="` prefix this keeps template lines below 80 columns.
WRAP_COLUMN = 65

_SPECIFIER_SUFFIX = re.compile(r"(>=|<=|>|<).*$")


@dataclass(frozen=True)
class GemRequirement:
    """A runtime dependency as listed by rubygems.org."""

    name: str
    requirements: str


@dataclass(frozen=True)
class PerlRequirement:
    """A module requirement as listed by metacpan.org."""

    module: str
    phase: str


def gem_dependency_specifier(name: str, requirements: str) -> str:
    """Translate a rubygems requirement into an xbps dependency specifier.

    Only the first comparator/version pair is honoured. ``~>`` is treated as
    ``>=``; its upper bound is dropped.
    """
    parts = requirements.split()
    pkg = f"{PkgType.GEM.prefix}{name}"
    if len(parts) < 2:
        return pkg
    comparator = parts[0]
    version = parts[1].replace(",", "")

    if comparator in (">", "<", "<="):
        return f"{pkg}{comparator}{version}"
    if comparator == ">=":
        return pkg if version == "0" else f"{pkg}>={version}"
    if comparator == "~>":
        return f"{pkg}>={version}"
    return pkg


def gem_dependencies(
    runtime: Iterable[GemRequirement], tables: StaticTables | None = None
) -> Dependencies:
    """Build the dependency set of a gem from its runtime requirements."""
    run: List[str] = []
    for requirement in runtime:
        if is_built_in(requirement.name, PkgType.GEM, tables):
            logger.debug("Skipping built-in gem dependency %s", requirement.name)
            continue
        _append_unique(run, gem_dependency_specifier(requirement.name, requirement.requirements))
    # Every gem needs ruby itself, whether or not the registry says so.
    _append_unique(run, "ruby")
    logger.debug("Gem run dependencies: %s", run)
    return Dependencies(run=tuple(run))


def perl_dependencies(
    requirements: Sequence[PerlRequirement],
    resolve_dist: Callable[[str], str],
    tables: StaticTables | None = None,
    *,
    max_workers: int = 8,
) -> Dependencies:
    """Map module requirements onto the distributions that provide them.

    ``resolve_dist`` turns a module name into its distribution name; it is only
    called for modules that are not part of perl.
    """
    wanted = [
        req
        for req in requirements
        if req.phase in ("configure", "runtime")
        and not is_built_in(req.module, PkgType.PERLDIST, tables)
    ]

    if wanted:
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(wanted)))) as pool:
            dists = list(pool.map(resolve_dist, [req.module for req in wanted]))
    else:
        dists = []

    make: List[str] = []
    run: List[str] = []
    for req, dist in zip(wanted, dists):
        target = make if req.phase == "configure" else run
        _append_unique(target, dist)

    _append_unique(make, "perl")

    return Dependencies(host=("perl",), make=tuple(make), run=tuple(run))


def crate_native_dependencies(
    crate_name: str,
    dependency_ids: Iterable[str],
    tables: StaticTables | None = None,
) -> Optional[Dependencies]:
    """Return the system libraries a crate links against, if any."""
    native = (tables or default_tables()).native_deps
    make: List[str] = []
    for crate_id in (crate_name, *dependency_ids):
        dep = native.get(crate_id)
        if dep is not None:
            _append_unique(make, dep)
    if not make:
        return None
    return Dependencies(host=("pkg-config",), make=tuple(make))


def join_dependencies(specifiers: Sequence[str], pkg_type: PkgType) -> str:
    """Join specifiers into the value of a ``*depends=`` field, wrapping long lines."""
    out = ""
    for spec in specifiers:
        probe = out + spec
        last_line = probe.split("\n")[-1]
        if len(last_line) >= WRAP_COLUMN:
            out += "\n "
        elif len(last_line) > len(spec):
            out += " "
        out += _render_specifier(spec, pkg_type)
    return out


def bare_name(specifier: str, pkg_type: PkgType) -> str:
    """Strip version constraints and the ecosystem prefix from a specifier."""
    name = _SPECIFIER_SUFFIX.sub("", specifier)
    return pkg_type.strip_prefix(name)


def _render_specifier(spec: str, pkg_type: PkgType) -> str:
    if pkg_type is PkgType.PERLDIST and spec != "perl":
        return PkgType.PERLDIST.prefix + spec.replace("::", "-")
    return spec


def _append_unique(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)


__all__ = [
    "GemRequirement",
    "PerlRequirement",
    "WRAP_COLUMN",
    "bare_name",
    "crate_native_dependencies",
    "gem_dependencies",
    "gem_dependency_specifier",
    "join_dependencies",
    "perl_dependencies",
]
