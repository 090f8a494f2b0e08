"""Distfile download and sha256 computation."""

from __future__ import annotations

import hashlib
import time
from typing import Any, Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import ChecksumError, RegistryUnavailableError
from .http import DEFAULT_TIMEOUT, USER_AGENT, retry
from .logging import get_logger

logger = get_logger("checksum")

_CHUNK_SIZE = 64 * 1024


class ChecksumService:
    """Downloads a distfile and returns its sha256 hex digest."""

    def __init__(
        self,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        retries: int = 3,
        backoff: float = 10.0,
        opener: Callable[..., Any] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout or DEFAULT_TIMEOUT
        self.retries = retries
        self.backoff = backoff
        self._opener = opener or urlopen
        self._download = retry(retries, backoff, sleep=sleep)(self._download_once)

    def compute(self, url: str) -> str:
        """Return the sha256 of the file behind ``url``.

        Transient failures are retried; once the budget is exhausted the
        failure surfaces as :class:`ChecksumError`.
        """
        if "${version}" in url:
            raise ChecksumError(f"Refusing to download unresolved URL {url}")
        logger.info("Downloading distfile %s to generate checksum...", url)
        try:
            digest = self._download(url)
        except RegistryUnavailableError as exc:
            raise ChecksumError(f"Couldn't download URL {url}: {exc}") from exc
        logger.debug("Hash: %s", digest)
        return digest

    def _download_once(self, url: str) -> str:
        hasher = hashlib.sha256()
        try:
            request = Request(url, headers={"User-Agent": USER_AGENT}, method="GET")
            with self._opener(request, timeout=self.timeout) as response:
                while True:
                    chunk = response.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    hasher.update(chunk)
        except HTTPError as exc:
            if exc.code == 404:
                raise ChecksumError(f"Distfile {url} does not exist") from exc
            raise RegistryUnavailableError(f"status {exc.code}: {exc.reason}") from exc
        except ValueError as exc:
            raise ChecksumError(f"Couldn't download URL {url}: {exc}") from exc
        except (URLError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            raise RegistryUnavailableError(str(reason)) from exc
        return hasher.hexdigest()


__all__ = ["ChecksumService"]
