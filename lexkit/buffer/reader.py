"""Readable stream over an in-memory byte string."""

from __future__ import annotations

import io


class Reader:
    """File-like reader over a byte string that can be rewound to the start."""

    def __init__(self, data: bytes) -> None:
        self._source = io.BytesIO(bytes(data))
        self._size = len(data)

    def read(self, size: int | None = -1) -> bytes:
        """Read up to ``size`` bytes (all remaining when negative); ``b""`` at the end."""
        return self._source.read(size)

    def getvalue(self) -> bytes:
        """Return the bytes this reader reads from."""
        return self._source.getvalue()

    def reset(self) -> None:
        """Move the read position back to the beginning."""
        self._source.seek(0)

    def __len__(self) -> int:
        return self._size