"""Exception types raised by tmplgen."""

from __future__ import annotations

from typing import Sequence


class TmplgenError(RuntimeError):
    """Base class for every error tmplgen reports to the user."""


class ConfigError(TmplgenError):
    """Raised when the configuration file cannot be parsed."""


class RegistryUnavailableError(TmplgenError):
    """Raised when a package registry cannot be reached or answers garbage."""


class PackageNotFoundError(TmplgenError):
    def __init__(self, name: str, platform: str | None = None) -> None:
        self.name = name
        self.platform = platform
        if platform:
            message = f"Package {name} was not found on {platform}"
        else:
            message = (
                f"Unable to determine what type of package {name} is! "
                "Make sure you've spelled the package name correctly!"
            )
        super().__init__(message)


class AmbiguousPackageError(TmplgenError):
    def __init__(self, name: str, platforms: Sequence[str]) -> None:
        self.name = name
        self.platforms = tuple(platforms)
        super().__init__(
            f"Found a package matching {name} on multiple platforms ({', '.join(self.platforms)})! "
            "Please explicitly choose one via the `-t` parameter!"
        )


class BuiltInPackageError(TmplgenError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Won't write package for built-in template {name}")


class MissingPrerequisiteError(TmplgenError):
    """Raised when a TemplateBuilder step runs before the state it needs was set."""


class TemplateAlreadyExistsError(TmplgenError):
    pass


class TemplateDoesNotExistError(TmplgenError):
    pass


class ChecksumError(TmplgenError):
    pass


class MaintainerResolutionError(TmplgenError):
    pass


class EncodingError(TmplgenError):
    """Raised when an external process returns output that is not valid UTF-8."""


class DistDirError(TmplgenError):
    pass


__all__ = [
    "AmbiguousPackageError",
    "BuiltInPackageError",
    "ChecksumError",
    "ConfigError",
    "DistDirError",
    "EncodingError",
    "MaintainerResolutionError",
    "MissingPrerequisiteError",
    "PackageNotFoundError",
    "RegistryUnavailableError",
    "TemplateAlreadyExistsError",
    "TemplateDoesNotExistError",
    "TmplgenError",
]
