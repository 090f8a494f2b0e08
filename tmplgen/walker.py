"""Writes templates for the missing dependencies of a gem or Perl distribution."""

from __future__ import annotations

from typing import Callable, List, Set

from .builtin_filter import is_built_in
from .dependencies import bare_name
from .destination import DistDir
from .errors import TmplgenError
from .logging import get_logger
from .models import PkgInfo, PkgType, Template
from .tables import StaticTables, default_tables

logger = get_logger("walker")

FetchFn = Callable[[str, PkgType], PkgInfo]
RenderFn = Callable[[PkgInfo, PkgType], Template]


class DependencyWalker:
    """Depth-first walk over ``makedepends`` and ``depends`` of a record.

    Dependencies that are built into the runtime, that already have a template
    in the destination, or that were handled earlier in the same walk are
    skipped. A failure to fetch or render one dependency is logged and does not
    stop the walk.
    """

    def __init__(
        self,
        fetch: FetchFn,
        render: RenderFn,
        destination: DistDir,
        tables: StaticTables | None = None,
    ) -> None:
        self._fetch = fetch
        self._render = render
        self._destination = destination
        self._tables = tables or default_tables()

    def walk(self, info: PkgInfo, pkg_type: PkgType) -> List[str]:
        """Return the names of the templates written, in write order."""
        if pkg_type is PkgType.CRATE:
            logger.debug("Not walking dependencies of crate %s", info.pkg_name)
            return []

        written: List[str] = []
        root = pkg_type.strip_prefix(info.pkg_name)
        self._walk(info, pkg_type, visited={root}, path=[root], written=written)
        return written

    def _walk(
        self,
        info: PkgInfo,
        pkg_type: PkgType,
        *,
        visited: Set[str],
        path: List[str],
        written: List[str],
    ) -> None:
        deps = info.dependencies
        if deps is None:
            return

        for specifier in (*(deps.make or ()), *(deps.run or ())):
            name = bare_name(specifier, pkg_type)
            if name == pkg_type.runtime or is_built_in(name, pkg_type, self._tables):
                logger.debug("Skipping built-in dependency %s", name)
                continue
            if name in visited:
                if name in path:
                    logger.warning(
                        "Dependency cycle detected: %s -> %s, not descending again",
                        " -> ".join(path),
                        name,
                    )
                else:
                    logger.debug("Dependency %s was already handled", name)
                continue
            visited.add(name)

            if self._destination.exists(pkg_type, name):
                logger.debug("Template for %s already exists, skipping", name)
                continue

            try:
                dep_info = self._fetch(name, pkg_type)
                template = self._render(dep_info, pkg_type)
                self._destination.write(template)
            except TmplgenError as exc:
                logger.warning("Failed to write template for dependency %s: %s", name, exc)
                continue

            written.append(template.name)
            logger.info("Wrote template for dependency %s", template.name)

            path.append(name)
            try:
                self._walk(dep_info, pkg_type, visited=visited, path=path, written=written)
            finally:
                path.pop()


__all__ = ["DependencyWalker"]
