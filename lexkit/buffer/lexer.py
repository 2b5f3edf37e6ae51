"""In-memory lexer buffer with peeking, rewinding and shifting of selections."""

from __future__ import annotations

from typing import BinaryIO

EOF = EOFError("EOF")
"""Sentinel returned by ``err`` methods when the end of the input is reached."""


class Lexer:
    """Buffered byte reader that tracks a selection between a start and an end position.

    The whole input is held in memory with a NUL byte appended as terminator,
    so peeking one past the end yields ``0``.
    """

    def __init__(self, data: bytes = b"", *, error: BaseException | None = None) -> None:
        self._buf = bytes(data) + b"\x00"
        self._pos = 0
        self._start = 0
        self._err = error

    @classmethod
    def from_reader(cls, reader: BinaryIO | None) -> "Lexer":
        """Create a lexer from a binary stream, reading it entirely.

        Streams offering ``getvalue`` are used directly instead of being read.
        A failing read yields an empty lexer whose ``err`` reports the failure.
        """
        if reader is None:
            return cls()
        getvalue = getattr(reader, "getvalue", None)
        if callable(getvalue):
            return cls(getvalue())
        try:
            data = reader.read()
        except OSError as exc:
            return cls(error=exc)
        return cls(data or b"")

    def err(self) -> BaseException | None:
        """Return the read error, ``EOF`` at the end of the input, or None."""
        return self.peek_err(0)

    def peek_err(self, pos: int) -> BaseException | None:
        """Return the error at ``pos`` bytes past the current position."""
        if self._err is not None:
            return self._err
        if self._pos + pos >= len(self._buf) - 1:
            return EOF
        return None

    def peek(self, pos: int) -> int:
        """Return the byte ``pos`` positions past the current position, or 0 outside the buffer."""
        index = self._pos + pos
        if 0 <= index < len(self._buf):
            return self._buf[index]
        return 0

    def peek_rune(self, pos: int) -> tuple[int, int]:
        """Decode the UTF-8 code point at ``pos``; return it with its byte length."""
        c = self.peek(pos)
        if c < 0xC0 or self.peek(pos + 1) == 0:
            return c, 1
        if c < 0xE0 or self.peek(pos + 2) == 0:
            return (c & 0x1F) << 6 | (self.peek(pos + 1) & 0x3F), 2
        if c < 0xF0 or self.peek(pos + 3) == 0:
            return (
                (c & 0x0F) << 12
                | (self.peek(pos + 1) & 0x3F) << 6
                | (self.peek(pos + 2) & 0x3F)
            ), 3
        return (
            (c & 0x07) << 18
            | (self.peek(pos + 1) & 0x3F) << 12
            | (self.peek(pos + 2) & 0x3F) << 6
            | (self.peek(pos + 3) & 0x3F)
        ), 4

    def move(self, n: int) -> None:
        """Advance the position by ``n`` bytes (negative moves back)."""
        self._pos += n

    def pos(self) -> int:
        """Return the position relative to the selection start, usable with ``rewind``."""
        return self._pos - self._start

    def rewind(self, pos: int) -> None:
        """Set the position to ``pos`` bytes after the selection start."""
        self._pos = self._start + pos

    def lexeme(self) -> bytes:
        """Return the bytes of the current selection."""
        return self._buf[self._start:self._pos]

    def skip(self) -> None:
        """Collapse the selection start onto the current position."""
        self._start = self._pos

    def shift(self) -> bytes:
        """Return the current selection and collapse it."""
        selection = self._buf[self._start:self._pos]
        self._start = self._pos
        return selection

    def offset(self) -> int:
        """Return the absolute position in the buffer."""
        return self._pos

    def getvalue(self) -> bytes:
        """Return the underlying input without the terminating NUL."""
        return self._buf[:-1]

    def reset(self) -> None:
        """Move both the selection start and the position back to the beginning."""
        self._start = 0
        self._pos = 0