"""Tests for reading and writing templates in the distdir."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from tmplgen.destination import DistDir
from tmplgen.errors import DistDirError, TemplateDoesNotExistError
from tmplgen.models import PkgType, Template


def test_from_env_prefers_configured_path(tmp_path: Path) -> None:
    dist = DistDir.from_env(tmp_path / "configured", environ={"XBPS_DISTDIR": str(tmp_path / "env")})

    assert dist.root == tmp_path / "configured"


def test_from_env_reads_xbps_distdir(tmp_path: Path) -> None:
    dist = DistDir.from_env(environ={"XBPS_DISTDIR": str(tmp_path)})

    assert dist.root == tmp_path


def test_from_env_without_distdir_fails() -> None:
    with pytest.raises(DistDirError, match="XBPS_DISTDIR"):
        DistDir.from_env(environ={})


def test_template_path(tmp_path: Path) -> None:
    dist = DistDir(tmp_path)

    assert dist.template_path("rust-tmplgen") == tmp_path / "srcpkgs" / "rust-tmplgen" / "template"


def test_write_creates_package_directory(distdir: DistDir) -> None:
    path = distdir.write(Template(content="pkgname=rust-tmplgen\n", name="rust-tmplgen"))

    assert path == distdir.template_path("rust-tmplgen")
    assert path.read_text(encoding="utf-8") == "pkgname=rust-tmplgen\n"
    assert stat.S_IMODE(path.stat().st_mode) == 0o644
    assert [p.name for p in path.parent.iterdir()] == ["template"]


def test_write_replaces_existing_template(distdir: DistDir) -> None:
    distdir.write(Template(content="old\n", name="ruby-ffi"))
    distdir.write(Template(content="new\n", name="ruby-ffi"))

    assert distdir.read("ruby-ffi") == Template(content="new\n", name="ruby-ffi")


def test_read_missing_template(distdir: DistDir) -> None:
    with pytest.raises(TemplateDoesNotExistError, match="non-existing template perl-Moose"):
        distdir.read("perl-Moose")


def test_exists_maps_dependency_names(distdir: DistDir) -> None:
    distdir.write(Template(content="x\n", name="perl-Try-Tiny"))
    distdir.write(Template(content="x\n", name="ruby-rspec-core"))

    assert distdir.exists(PkgType.PERLDIST, "Try::Tiny")
    assert distdir.exists(PkgType.PERLDIST, "Try-Tiny")
    assert distdir.exists(PkgType.GEM, "rspec-core")
    assert distdir.exists(PkgType.GEM, "ruby-rspec-core")
    assert not distdir.exists(PkgType.GEM, "rspec-mocks")
