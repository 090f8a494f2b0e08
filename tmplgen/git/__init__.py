"""Git helpers."""

from .identity import GitIdentity

__all__ = ["GitIdentity"]
