"""Known CSS at-rule names that the parser treats specially."""

from __future__ import annotations

from enum import Enum


class Hash(Enum):
    """At-rule names recognised by the CSS parser."""

    DOCUMENT = "document"
    FONT_FACE = "font-face"
    KEYFRAMES = "keyframes"
    MEDIA = "media"
    PAGE = "page"
    SUPPORTS = "supports"

    def __str__(self) -> str:
        return self.value


_BY_NAME = {member.value.encode("ascii"): member for member in Hash}


def to_hash(name: bytes | str) -> Hash | None:
    """Return the Hash whose name is ``name`` (case sensitive), or None."""
    if isinstance(name, str):
        name = name.encode("utf-8")
    return _BY_NAME.get(bytes(name))