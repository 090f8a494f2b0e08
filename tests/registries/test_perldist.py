"""Tests for the metacpan.org client."""

from __future__ import annotations

import pytest

from tests._fixtures.fakes import FakeChecksum, FakeOpener
from tmplgen.errors import PackageNotFoundError
from tmplgen.http import JSONClient
from tmplgen.registries.perldist import PerlDistClient
from tmplgen.tables import StaticTables

API = "https://fastapi.metacpan.org/v1"

MOOSE_RELEASE = {
    "distribution": "Moose",
    "name": "Moose-2.2011",
    "version": "2.2011",
    "abstract": "A postmodern object system for Perl 5",
    "license": ["perl_5"],
    "resources": {"homepage": "http://moose.perl.org/"},
    "download_url": "https://cpan.metacpan.org/authors/id/E/ET/ETHER/Moose-2.2011.tar.gz",
    "checksum_sha256": "moose_sha",
    "dependency": [
        {"module": "ExtUtils::MakeMaker", "phase": "configure", "relationship": "requires"},
        {"module": "Dist::CheckConflicts", "phase": "configure", "relationship": "requires"},
        {"module": "Try::Tiny", "phase": "runtime", "relationship": "requires"},
        {"module": "Scalar::Util", "phase": "runtime", "relationship": "requires"},
        {"module": "Test::Fatal", "phase": "test", "relationship": "requires"},
    ],
}


def _routes(**extra):  # type: ignore[no-untyped-def]
    routes = {
        f"{API}/release/Moose": MOOSE_RELEASE,
        f"{API}/module/Dist%3A%3ACheckConflicts": {"distribution": "Dist-CheckConflicts"},
        f"{API}/module/Try%3A%3ATiny": {"distribution": "Try-Tiny"},
    }
    routes.update(extra)
    return routes


def _client(routes, checksum: FakeChecksum, tables: StaticTables) -> PerlDistClient:  # type: ignore[no-untyped-def]
    opener = FakeOpener(routes)
    http = JSONClient(API, retries=1, opener=opener, sleep=lambda _: None)
    client = PerlDistClient(http, checksum, tables)
    client.opener = opener  # type: ignore[attr-defined]
    return client


def test_fetch_builds_record(checksum: FakeChecksum, tables: StaticTables) -> None:
    client = _client(_routes(), checksum, tables)

    info = client.fetch("Moose")

    assert info.pkg_name == "perl-Moose"
    assert info.version == "2.2011"
    assert info.description == "A postmodern object system for Perl 5"
    assert info.homepage == "http://moose.perl.org/"
    assert info.license == ("perl_5",)
    assert info.checksum == "moose_sha"
    assert checksum.urls == []
    assert info.download_url == "https://cpan.metacpan.org/authors/id/E/ET/ETHER/Moose-${version}.tar.gz"
    assert info.dependencies is not None
    assert info.dependencies.host == ("perl",)
    assert info.dependencies.make == ("Dist-CheckConflicts", "perl")
    assert info.dependencies.run == ("Try-Tiny",)
    requested = client.opener.requests  # type: ignore[attr-defined]
    assert f"{API}/module/ExtUtils%3A%3AMakeMaker" not in requested
    assert f"{API}/module/Scalar%3A%3AUtil" not in requested


def test_fetch_resolves_module_names(checksum: FakeChecksum, tables: StaticTables) -> None:
    routes = _routes(**{f"{API}/module/Moose%3A%3ARole": {"distribution": "Moose"}})

    info = _client(routes, checksum, tables).fetch("Moose::Role")

    assert info.pkg_name == "perl-Moose"


def test_fetch_accepts_prefixed_name(checksum: FakeChecksum, tables: StaticTables) -> None:
    assert _client(_routes(), checksum, tables).fetch("perl-Moose").version == "2.2011"


def test_fetch_computes_checksum_when_missing(checksum: FakeChecksum, tables: StaticTables) -> None:
    release = dict(MOOSE_RELEASE, checksum_sha256=None, dependency=[], resources={})
    client = _client(_routes(**{f"{API}/release/Moose": release}), checksum, tables)

    info = client.fetch("Moose")

    assert info.checksum == "computed_sha"
    assert checksum.urls == ["https://cpan.metacpan.org/authors/id/E/ET/ETHER/Moose-2.2011.tar.gz"]
    assert info.homepage == "https://metacpan.org/pod/Moose"


def test_resolve_distribution_falls_back_to_release(checksum: FakeChecksum, tables: StaticTables) -> None:
    client = _client(_routes(), checksum, tables)

    assert client.resolve_distribution("Moose") == "Moose"


def test_missing_distribution(checksum: FakeChecksum, tables: StaticTables) -> None:
    client = _client({}, checksum, tables)

    assert not client.exists("hdusapiduwipa")
    with pytest.raises(PackageNotFoundError):
        client.fetch("hdusapiduwipa")
