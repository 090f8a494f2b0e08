"""Conversion of registry license names to SPDX identifiers."""

from __future__ import annotations

from typing import Iterable

from .tables import StaticTables, default_tables


def correct_license(identifier: str, tables: StaticTables | None = None) -> str:
    """Return the SPDX form of ``identifier``, or the identifier itself if unknown."""
    table = (tables or default_tables()).licenses
    return table.get(identifier, identifier)


def render_licenses(licenses: Iterable[str], tables: StaticTables | None = None) -> str:
    """Correct every license and join them the way xbps-src expects."""
    corrected = [correct_license(item, tables) for item in licenses if item]
    return ", ".join(corrected)


__all__ = ["correct_license", "render_licenses"]
