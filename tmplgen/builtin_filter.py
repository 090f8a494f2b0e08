"""Detection of packages that ship with the ruby and perl packages."""

from __future__ import annotations

from .logging import get_logger
from .models import PkgType
from .tables import StaticTables, default_tables

logger = get_logger("builtin")


def is_built_in(name: str, pkg_type: PkgType, tables: StaticTables | None = None) -> bool:
    """Return True when ``name`` is part of the language runtime and needs no template."""
    if pkg_type is PkgType.CRATE:
        return False

    table = tables or default_tables()
    bare = pkg_type.strip_prefix(name)

    if pkg_type is PkgType.GEM:
        if bare in table.builtin_ruby:
            logger.debug("Gem %s is part of ruby", bare)
            return True
        return False

    dist_name = bare.replace("::", "-")
    if dist_name in table.builtin_perl:
        logger.debug("Perl distribution %s is part of perl", dist_name)
        return True
    return False


__all__ = ["is_built_in"]
