"""Growable or fixed-size in-memory byte writer."""

from __future__ import annotations

import io


class Writer:
    """Write bytes into an in-memory buffer.

    With ``limit`` set the buffer never grows past that many bytes and a write
    that does not fit raises ``EOFError``.
    """

    def __init__(self, data: bytes = b"", *, limit: int | None = None) -> None:
        self._sink = io.BytesIO()
        self._sink.write(data)
        self._limit = limit
        self._err: EOFError | None = None

    def write(self, data: bytes) -> int:
        """Append ``data`` and return the number of bytes written."""
        if self._limit is not None and self._sink.tell() + len(data) > self._limit:
            self._err = EOFError("writer buffer is full")
            raise self._err
        return self._sink.write(data)

    def getvalue(self) -> bytes:
        """Return everything written since the last reset."""
        return self._sink.getvalue()

    def reset(self) -> None:
        """Empty the buffer so that it can be reused."""
        self._sink.seek(0)
        self._sink.truncate()

    def close(self) -> None:
        """Raise the last write error, if any."""
        if self._err is not None:
            raise self._err

    def __len__(self) -> int:
        return self._sink.tell()