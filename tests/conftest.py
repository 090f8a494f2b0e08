from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.fakes import FakeChecksum, fake_identity
from tmplgen.destination import DistDir
from tmplgen.git.identity import GitIdentity
from tmplgen.tables import StaticTables, default_tables


@pytest.fixture(autouse=True)
def _reset_tmplgen_logger() -> Iterator[None]:
    """Undo configure_logging so caplog sees records in every test."""
    yield
    logger = logging.getLogger("tmplgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def tables() -> StaticTables:
    return default_tables()


@pytest.fixture
def identity() -> GitIdentity:
    """Maintainer resolved from a fixed environment instead of the user's git config."""
    return fake_identity()


@pytest.fixture
def checksum() -> FakeChecksum:
    return FakeChecksum()


@pytest.fixture
def distdir(tmp_path: Path) -> DistDir:
    root = tmp_path / "void-packages"
    (root / "srcpkgs").mkdir(parents=True)
    return DistDir(root)
