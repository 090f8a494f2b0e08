"""Tests for tmplgen.checksum."""

from __future__ import annotations

import hashlib
from urllib.error import URLError

import pytest

from tests._fixtures.fakes import FakeOpener
from tmplgen.checksum import ChecksumService
from tmplgen.errors import ChecksumError

URL = "https://static.crates.io/crates/tmplgen/tmplgen-0.3.1.crate"


def test_compute_hashes_downloaded_bytes() -> None:
    payload = b"x" * 200_000
    service = ChecksumService(opener=FakeOpener({URL: payload}), sleep=lambda _: None)

    assert service.compute(URL) == hashlib.sha256(payload).hexdigest()


def test_compute_refuses_unresolved_urls() -> None:
    opener = FakeOpener()
    service = ChecksumService(opener=opener, sleep=lambda _: None)

    with pytest.raises(ChecksumError):
        service.compute("https://static.crates.io/crates/tmplgen/tmplgen-${version}.crate")
    assert opener.requests == []


def test_compute_rejects_urls_with_unexpanded_variables() -> None:
    opener = FakeOpener()
    service = ChecksumService(opener=opener, sleep=lambda _: None)

    with pytest.raises(ChecksumError, match=r"Couldn't download URL \$\{CPAN_SITE\}"):
        service.compute("${CPAN_SITE}/Foo/Foo-1.1.tar.gz")
    assert opener.requests == []


def test_compute_reports_missing_distfile_without_retrying() -> None:
    opener = FakeOpener({URL: 404})
    service = ChecksumService(retries=3, opener=opener, sleep=lambda _: None)

    with pytest.raises(ChecksumError):
        service.compute(URL)
    assert len(opener.requests) == 1


def test_compute_retries_transient_failures() -> None:
    delays = []
    opener = FakeOpener({URL: [URLError("reset"), 502, b"data"]})
    service = ChecksumService(retries=3, backoff=10.0, opener=opener, sleep=delays.append)

    assert service.compute(URL) == hashlib.sha256(b"data").hexdigest()
    assert delays == [10.0, 20.0]


def test_compute_wraps_exhausted_retries() -> None:
    opener = FakeOpener({URL: URLError("unreachable")})
    service = ChecksumService(retries=2, opener=opener, sleep=lambda _: None)

    with pytest.raises(ChecksumError) as excinfo:
        service.compute(URL)

    assert URL in str(excinfo.value)
    assert len(opener.requests) == 2
