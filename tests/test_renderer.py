"""Tests for template generation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.fakes import FakeClient
from tests._fixtures.records import (
    CRATE_TEMPLATE,
    GEM_TEMPLATE,
    PERL_TEMPLATE,
    crate_record,
    gem_record,
    perl_record,
)
from tmplgen.dependencies import PerlRequirement, perl_dependencies
from tmplgen.errors import MissingPrerequisiteError
from tmplgen.git.identity import GitIdentity
from tmplgen.models import Dependencies, PkgInfo, PkgType
from tmplgen.renderer import TemplateBuilder
from tmplgen.tables import StaticTables


def _builder(info: PkgInfo, pkg_type: PkgType, identity: GitIdentity, **kwargs: object) -> TemplateBuilder:
    return TemplateBuilder.from_pkg_info(info, identity=identity, **kwargs).set_type(pkg_type)


def test_generate_crate(identity: GitIdentity) -> None:
    template = _builder(crate_record(), PkgType.CRATE, identity).generate(True)

    assert template.content == CRATE_TEMPLATE
    assert template.name == "rust-tmplgen"


def test_generate_crate_without_prefix(identity: GitIdentity) -> None:
    info = crate_record().without_prefix(PkgType.CRATE)

    template = _builder(info, PkgType.CRATE, identity).generate(False)

    assert template.content == CRATE_TEMPLATE.replace("rust-tmplgen", "tmplgen")
    assert template.name == "tmplgen"


def test_generate_crate_never_emits_run_depends(identity: GitIdentity) -> None:
    info = crate_record(
        dependencies=Dependencies(host=("pkg-config",), make=("libressl-devel",), run=("bogus",))
    )

    content = _builder(info, PkgType.CRATE, identity).generate().content

    assert 'hostmakedepends="pkg-config"\nmakedepends="libressl-devel"\nshort_desc=' in content
    assert "\ndepends=" not in content
    assert "wrksrc" not in content
    assert "noarch" not in content


def test_generate_perl(identity: GitIdentity) -> None:
    template = _builder(perl_record(), PkgType.PERLDIST, identity).generate(True)

    assert template.content == PERL_TEMPLATE


def test_generate_perl_without_prefix_drops_wrksrc(identity: GitIdentity) -> None:
    info = perl_record().without_prefix(PkgType.PERLDIST)

    content = _builder(info, PkgType.PERLDIST, identity).generate(False).content

    assert "wrksrc" not in content
    assert content.startswith("# Template file for 'Moose'\npkgname=Moose\n")
    assert "noarch=yes\n" in content


def test_generate_perl_without_runtime_dependencies(identity: GitIdentity, tables: StaticTables) -> None:
    deps = perl_dependencies(
        [PerlRequirement("ExtUtils::MakeMaker", "configure")],
        lambda module: module.replace("::", "-"),
        tables,
    )
    info = perl_record(dependencies=deps)

    content = _builder(info, PkgType.PERLDIST, identity).generate(True).content

    assert 'hostmakedepends="perl"\n' in content
    assert '\nmakedepends="perl"\n' in content
    assert "\ndepends=" not in content


def test_generate_gem_appends_vlicense(identity: GitIdentity) -> None:
    template = _builder(gem_record(), PkgType.GEM, identity).generate()

    assert template.content == GEM_TEMPLATE


def test_generate_is_idempotent(identity: GitIdentity) -> None:
    builder = _builder(perl_record(), PkgType.PERLDIST, identity)

    assert builder.generate() == builder.generate()


def test_generate_wraps_long_dependency_lists(identity: GitIdentity) -> None:
    info = gem_record(
        dependencies=Dependencies(
            run=("ruby-rspec-core>=3.8.0", "ruby-rspec-expectations>=3.8.0", "ruby-rspec-mocks>=3.8.0")
        )
    )

    content = _builder(info, PkgType.GEM, identity).generate().content

    assert (
        'depends="ruby-rspec-core>=3.8.0 ruby-rspec-expectations>=3.8.0\n ruby-rspec-mocks>=3.8.0"\n'
        in content
    )


def test_generate_tolerates_missing_metadata(identity: GitIdentity, caplog: pytest.LogCaptureFixture) -> None:
    info = crate_record(description=None, license=None, download_url=None)

    with caplog.at_level(logging.WARNING, logger="tmplgen"):
        content = _builder(info, PkgType.CRATE, identity).generate().content

    assert 'short_desc=""\n' in content
    assert "license=" not in content
    assert "distfiles=" not in content
    assert "description" in caplog.text
    assert "license" in caplog.text


def test_generate_drops_empty_license(identity: GitIdentity) -> None:
    content = _builder(crate_record(license=("",)), PkgType.CRATE, identity).generate().content

    assert "license=" not in content


def test_generate_warns_on_long_description(identity: GitIdentity, caplog: pytest.LogCaptureFixture) -> None:
    info = crate_record(description="x" * 85 + ".")

    with caplog.at_level(logging.WARNING, logger="tmplgen"):
        content = _builder(info, PkgType.CRATE, identity).generate().content

    assert f'short_desc="{"x" * 85}"\n' in content
    assert "longer than 80" in caplog.text


@pytest.mark.parametrize(
    ("licenses", "expected"),
    [(("MIT", "Apache-2.0"), True), (("ISC",), True), (("BSD-2-Clause",), True), (("GPL-3.0-or-later",), False)],
)
def test_vlicense_markers(identity: GitIdentity, licenses: tuple, expected: bool) -> None:
    content = _builder(crate_record(license=licenses), PkgType.CRATE, identity).generate().content

    assert ("vlicense LICENSE" in content) is expected
    assert content.endswith("\n") and not content.endswith("\n\n")


def test_generate_requires_info_and_type(identity: GitIdentity) -> None:
    with pytest.raises(MissingPrerequisiteError):
        TemplateBuilder("tmplgen", identity=identity).generate(True)

    with pytest.raises(MissingPrerequisiteError):
        TemplateBuilder.from_pkg_info(crate_record(), identity=identity).generate(True)


def test_is_built_in_requires_type(identity: GitIdentity) -> None:
    with pytest.raises(MissingPrerequisiteError):
        TemplateBuilder("tmplgen", identity=identity).is_built_in()


def test_is_built_in(identity: GitIdentity) -> None:
    assert TemplateBuilder("File::Basename", identity=identity).set_type(PkgType.PERLDIST).is_built_in()
    assert TemplateBuilder("json", identity=identity).set_type(PkgType.GEM).is_built_in()
    assert not TemplateBuilder("tmplgen", identity=identity).set_type(PkgType.CRATE).is_built_in()


def test_get_info_requires_type(identity: GitIdentity) -> None:
    with pytest.raises(MissingPrerequisiteError):
        TemplateBuilder("tmplgen", identity=identity, clients={}).get_info()


def test_get_type_and_info_use_clients(identity: GitIdentity) -> None:
    clients = {
        PkgType.CRATE: FakeClient(PkgType.CRATE, {"tmplgen": crate_record()}),
        PkgType.GEM: FakeClient(PkgType.GEM),
        PkgType.PERLDIST: FakeClient(PkgType.PERLDIST),
    }
    builder = TemplateBuilder("tmplgen", identity=identity, clients=clients)  # type: ignore[arg-type]

    builder.get_type().get_info()

    assert builder.pkg_type is PkgType.CRATE
    assert builder.pkg_info == crate_record()
    assert builder.generate().content == CRATE_TEMPLATE


def test_custom_skeleton_directory(identity: GitIdentity, tmp_path: Path) -> None:
    (tmp_path / "template.in").write_text("pkgname=@pkgname@\nversion=@version@\n", encoding="utf-8")

    template = _builder(crate_record(), PkgType.CRATE, identity, templates_dir=tmp_path).generate()

    assert template.content == "pkgname=rust-tmplgen\nversion=0.3.1\n"
