"""Generate xbps-src templates from crates.io, rubygems.org and metacpan.org."""

__version__ = "0.1.0"

from .errors import (
    AmbiguousPackageError,
    BuiltInPackageError,
    MissingPrerequisiteError,
    PackageNotFoundError,
    TmplgenError,
)
from .models import Dependencies, PkgInfo, PkgType, Template
from .renderer import TemplateBuilder

__all__ = [
    "AmbiguousPackageError",
    "BuiltInPackageError",
    "Dependencies",
    "MissingPrerequisiteError",
    "PackageNotFoundError",
    "PkgInfo",
    "PkgType",
    "Template",
    "TemplateBuilder",
    "TmplgenError",
    "__version__",
]
