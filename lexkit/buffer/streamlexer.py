"""Lexer buffer that reads from a stream incrementally."""

from __future__ import annotations

from typing import BinaryIO

from lexkit.buffer.lexer import EOF

DEFAULT_BUF_SIZE = 4096
"""Default estimate of the buffer size needed for a token."""


class StreamLexer:
    """Buffered stream reader that allows peeking forward and shifting selections.

    Data is read from the stream on demand. Bytes of shifted selections are
    kept until released with ``free``.
    """

    def __init__(self, reader: BinaryIO, size: int = DEFAULT_BUF_SIZE) -> None:
        getvalue = getattr(reader, "getvalue", None)
        if callable(getvalue):
            self._reader = None
            self._err: BaseException | None = EOF
            self._buf = bytearray(getvalue())
        else:
            self._reader = reader
            self._err = None
            self._buf = bytearray()
        self._size = size
        self._offset = 0  # absolute stream offset of self._buf[0]
        self._start = 0
        self._pos = 0
        self._prev_start = 0  # absolute
        self._pending_free = 0

    def _read(self, pos: int) -> int:
        if self._err is not None:
            return 0

        drop = min(self._pending_free, self._start)
        if drop:
            del self._buf[:drop]
            self._pending_free -= drop
            self._offset += drop
            self._start -= drop
            self._pos -= drop
            pos -= drop

        capacity = self._size
        needed = pos - self._start + 1
        if 2 * needed > capacity:
            capacity = 2 * capacity + needed
            self._size = capacity

        buffered = len(self._buf) - self._start
        while pos - self._start >= buffered and self._err is None:
            try:
                chunk = self._reader.read(max(capacity - buffered, 1))
            except OSError as exc:
                self._err = exc
                break
            if not chunk:
                self._err = EOF
                break
            self._buf += chunk
            buffered += len(chunk)

        if 0 <= pos < len(self._buf):
            return self._buf[pos]
        return 0

    def err(self) -> BaseException | None:
        """Return the stream error, ``EOF`` once past all data, or None."""
        if self._err is EOF and self._pos < len(self._buf):
            return None
        return self._err

    def free(self, n: int) -> None:
        """Release ``n`` bytes of previously shifted data, typically a ``shift_len`` result."""
        self._pending_free += n

    def peek(self, pos: int) -> int:
        """Return the byte ``pos`` positions past the current position, reading as needed; 0 on error."""
        index = self._pos + pos
        if 0 <= index < len(self._buf):
            return self._buf[index]
        if index < 0:
            return 0
        return self._read(index)

    def peek_rune(self, pos: int) -> tuple[int, int]:
        """Decode the UTF-8 code point at ``pos``; return it with its byte length."""
        c = self.peek(pos)
        if c < 0xC0:
            return c, 1
        if c < 0xE0:
            return (c & 0x1F) << 6 | (self.peek(pos + 1) & 0x3F), 2
        if c < 0xF0:
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
        return bytes(self._buf[self._start:self._pos])

    def skip(self) -> None:
        """Collapse the selection start onto the current position."""
        self._start = self._pos

    def shift(self) -> bytes:
        """Return the current selection and collapse it, reading data not yet peeked."""
        if self._pos > len(self._buf):
            self._read(self._pos - 1)
        selection = bytes(self._buf[self._start:self._pos])
        self._start = self._pos
        return selection

    def shift_len(self) -> int:
        """Return the number of bytes shifted or skipped since the previous call."""
        start = self._offset + self._start
        n = start - self._prev_start
        self._prev_start = start
        return n