"""Maintainer lookup from the environment or git configuration."""

from __future__ import annotations

import os
import subprocess
from typing import Callable, Iterable, Mapping, Optional

from ..errors import EncodingError, MaintainerResolutionError


class GitIdentity:
    """Resolves the ``maintainer=`` value for new templates."""

    def __init__(
        self,
        runner: Callable[[Iterable[str]], bytes] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        override: Optional[str] = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self._environ = environ if environ is not None else os.environ
        self._override = override

    def resolve_maintainer(self) -> str:
        """Return ``"Name <email>"``.

        A configured override wins, then ``GIT_AUTHOR_NAME``/``GIT_AUTHOR_EMAIL``
        (both must be set), then ``git config user.name``/``user.email``.
        """
        if self._override:
            return self._override.replace("\n", "")

        name = self._environ.get("GIT_AUTHOR_NAME")
        email = self._environ.get("GIT_AUTHOR_EMAIL")
        if not (name and email):
            name = self._git_config("user.name")
            email = self._git_config("user.email")

        return f"{name} <{email}>".replace("\n", "")

    def _git_config(self, key: str) -> str:
        try:
            raw = self._runner(["git", "config", "--get", key])
        except FileNotFoundError as exc:
            raise MaintainerResolutionError(
                "Failed to determine git username/email: git is not installed and "
                "GIT_AUTHOR_NAME/GIT_AUTHOR_EMAIL are not set"
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise MaintainerResolutionError(
                f"Failed to determine git username/email from environment or git config: {key} is not set"
            ) from exc
        try:
            value = raw.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise EncodingError(f"git config {key} returned output that is not valid UTF-8") from exc
        if not value:
            raise MaintainerResolutionError(
                f"Failed to determine git username/email from environment or git config: {key} is empty"
            )
        return value

    @staticmethod
    def _default_runner(args: Iterable[str]) -> bytes:
        completed = subprocess.run(
            list(args),
            check=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["GitIdentity"]
