"""HTTP helpers shared by the registry clients and the checksum service."""

from __future__ import annotations

import functools
import json
import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from . import __version__
from .errors import PackageNotFoundError, RegistryUnavailableError
from .logging import get_logger

logger = get_logger("http")

USER_AGENT = f"tmplgen/{__version__} (+https://github.com/Cogitri/tmplgen)"
DEFAULT_TIMEOUT = 30.0

F = TypeVar("F", bound=Callable[..., Any])


def retry(
    attempts: int = 3,
    base_delay: float = 1.0,
    *,
    exceptions: Tuple[Type[BaseException], ...] = (RegistryUnavailableError,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[F], F]:
    """Retry the wrapped call with exponentially growing delays.

    The delay before retry ``n`` (1-based) is ``base_delay * 2 ** (n - 1)``.
    The last exception is re-raised once ``attempts`` calls have failed.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    if attempt == attempts:
                        raise
                    delay = base_delay * 2 ** (attempt - 1)
                    logger.debug(
                        "%s failed (%s); retrying in %.1fs (%d/%d)",
                        func.__name__,
                        exc,
                        delay,
                        attempt,
                        attempts,
                    )
                    sleep(delay)
            raise AssertionError("unreachable")  # pragma: no cover

        return wrapper  # type: ignore[return-value]

    return decorator


class JSONClient:
    """Minimal JSON-over-HTTP client with retry on transient failures."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        retries: int = 3,
        backoff: float = 1.0,
        opener: Callable[..., Any] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._opener = opener or urlopen
        self._fetch = retry(retries, backoff, sleep=sleep)(self._fetch_once)

    def get(self, *segments: str, platform: str = "", name: str | None = None) -> Any:
        """GET ``base_url/<segments>`` and decode the JSON body.

        A 404 raises :class:`PackageNotFoundError`; other failures raise
        :class:`RegistryUnavailableError` after the retry budget is spent.
        """
        path = "/".join(quote(segment, safe="") for segment in segments)
        url = f"{self.base_url}/{path}"
        logger.debug("GET %s", url)
        return self._fetch(url, platform, name or segments[-1])

    def _fetch_once(self, url: str, platform: str, name: str) -> Any:
        request = Request(
            url,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            method="GET",
        )
        try:
            with self._opener(request, timeout=self.timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            if exc.code == 404:
                raise PackageNotFoundError(name, platform or None) from exc
            raise RegistryUnavailableError(
                f"{platform or url} answered with status {exc.code}: {exc.reason}"
            ) from exc
        except URLError as exc:
            raise RegistryUnavailableError(f"Failed to reach {platform or url}: {exc.reason}") from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RegistryUnavailableError(f"{platform or url} returned invalid JSON") from exc


__all__ = ["DEFAULT_TIMEOUT", "JSONClient", "USER_AGENT", "retry"]
