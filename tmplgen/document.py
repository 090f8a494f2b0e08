"""Line-preserving view of an existing xbps-src template."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_ASSIGNMENT = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$", re.DOTALL)
_UNESCAPED_QUOTE = re.compile(r'(?<!\\)"')


@dataclass
class _Entry:
    key: Optional[str]
    raw: str


class TemplateDocument:
    """Ordered sequence of template lines addressable by variable name.

    Only top-level ``name=value`` assignments are addressable. Everything else
    (comments, functions, blank lines) is carried through untouched, so
    :meth:`serialize` on an unmodified document returns the input verbatim.
    A double-quoted value that spans several lines is kept as one entry.
    """

    def __init__(self, entries: List[_Entry]) -> None:
        self._entries = entries

    @classmethod
    def parse(cls, text: str) -> "TemplateDocument":
        entries: List[_Entry] = []
        lines = text.split("\n")
        index = 0
        while index < len(lines):
            line = lines[index]
            index += 1
            match = _ASSIGNMENT.match(line)
            if match is None:
                entries.append(_Entry(None, line))
                continue
            raw = line
            value = match.group(2)
            if value.startswith('"') and len(_UNESCAPED_QUOTE.findall(value)) % 2 == 1:
                while index < len(lines):
                    raw += "\n" + lines[index]
                    index += 1
                    if _UNESCAPED_QUOTE.search(raw.rsplit("\n", 1)[-1]):
                        break
            entries.append(_Entry(match.group(1), raw))
        return cls(entries)

    def __contains__(self, key: object) -> bool:
        return self._find(key) is not None

    def raw_value(self, key: str) -> Optional[str]:
        """Return the text right of ``=`` exactly as written."""
        entry = self._find(key)
        if entry is None:
            return None
        return entry.raw.split("=", 1)[1]

    def get(self, key: str) -> Optional[str]:
        """Return the value of ``key`` with one level of surrounding quotes removed."""
        raw = self.raw_value(key)
        if raw is None:
            return None
        return _unquote(raw)

    def set(self, key: str, value: str) -> bool:
        """Replace the value of an existing assignment.

        The quoting style of the old value is kept; values containing
        whitespace are double-quoted. Returns False when ``key`` is absent,
        in which case nothing is added.
        """
        entry = self._find(key)
        if entry is None:
            return False
        old = entry.raw.split("=", 1)[1]
        if old[:1] in ('"', "'"):
            quote = old[0]
        elif not value or any(char.isspace() for char in value):
            quote = '"'
        else:
            quote = ""
        entry.raw = f"{key}={quote}{value}{quote}"
        return True

    def serialize(self) -> str:
        return "\n".join(entry.raw for entry in self._entries)

    def _find(self, key: object) -> Optional[_Entry]:
        for entry in self._entries:
            if entry.key == key:
                return entry
        return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


__all__ = ["TemplateDocument"]
