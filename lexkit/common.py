"""Helpers for scanning numbers, media types, data URIs, entities and URL encoding."""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence

_WHITESPACE = b" \t\n\r\f"
_NEWLINES = b"\n\r"
_DIGITS = frozenset(b"0123456789")
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_LETTERS = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_ALNUM = _DIGITS | _LETTERS
_MAX_ENTITY_LENGTH = 31  # longest HTML entity name: CounterClockwiseContourIntegral

_SEMICOLON = ord(";")
_SPACE = ord(" ")
_EQUALS = ord("=")
_AMPERSAND = ord("&")
_PERCENT = ord("%")
_PLUS = ord("+")
_HASH = ord("#")
_DOT = ord(".")


class BadDataURIError(ValueError):
    """Raised when a byte string is not a data URI."""

    def __init__(self, message: str = "not a data URI") -> None:
        super().__init__(message)


def _escape_table(escaped: bytes) -> tuple[bool, ...]:
    specials = frozenset(escaped)
    return tuple(c < 0x20 or c >= 0x7F or c in specials for c in range(256))


URL_ENCODING_TABLE = _escape_table(b' "#$%&+,/:;<=>?@[\\]^`{|}')
"""For each byte value, whether it must be escaped in URL encoding."""

DATA_URI_ENCODING_TABLE = _escape_table(b' "#%&<>[\\]^`{|}')
"""For each byte value, whether it must be escaped in a data URI."""


def _scan(b: bytes | bytearray, i: int, chars: frozenset[int] | bytes) -> int:
    while i < len(b) and b[i] in chars:
        i += 1
    return i


def _text(b: bytes) -> str:
    return b.decode("utf-8", "surrogateescape")


def number(b: bytes) -> int:
    """Return the length of the number at the start of ``b``, or 0 if there is none.

    The accepted format is ``[+-]?([0-9]+(\\.[0-9]+)?|\\.[0-9]+)([eE][+-]?[0-9]+)?``.
    """
    n = len(b)
    if n == 0:
        return 0
    i = 0
    if b[0] in b"+-":
        i = 1
        if i >= n:
            return 0
    first_digit = b[i] in _DIGITS
    if first_digit:
        i = _scan(b, i + 1, _DIGITS)
    if i < n and b[i] == _DOT:
        i += 1
        if i < n and b[i] in _DIGITS:
            i = _scan(b, i + 1, _DIGITS)
        elif first_digit:
            return i - 1  # the dot may belong to the next token
        else:
            return 0
    elif not first_digit:
        return 0
    mantissa_end = i
    if i < n and b[i] in b"eE":
        i += 1
        if i < n and b[i] in b"+-":
            i += 1
        if i >= n or b[i] not in _DIGITS:
            return mantissa_end  # the e may belong to the next token
        i = _scan(b, i + 1, _DIGITS)
    return i


def dimension(b: bytes) -> tuple[int, int]:
    """Return the lengths of the leading number and of the unit that follows it."""
    num = number(b)
    if num == 0 or num == len(b):
        return num, 0
    c = b[num]
    if c == _PERCENT:
        return num, 1
    if c in _LETTERS:
        return num, _scan(b, num + 1, _LETTERS) - num
    return num, 0


def _skip_spaces(b: bytes, i: int) -> int:
    return _scan(b, i, b" ")


def mediatype(b: bytes) -> tuple[bytes, dict[str, str] | None]:
    """Split a media type into its mimetype and its parameters.

    Parameters are None when the media type has none.
    """
    b = bytes(b).lstrip(b" ")
    n = len(b)
    for i in range(3, n):  # a mimetype is at least three characters long
        if b[i] not in (_SEMICOLON, _SPACE):
            continue
        mimetype = b[:i]
        if b[i] == _SPACE:
            i = _skip_spaces(b, i + 1)
            if i >= n or b[i] != _SEMICOLON:
                return mimetype, None
        params: dict[str, str] = {}
        while True:
            i = _skip_spaces(b, i + 1)
            start = i
            while i < n and b[i] not in b"=; ":
                i += 1
            key = b[start:i]
            i = _skip_spaces(b, i)
            if i < n and b[i] == _EQUALS:
                i = _skip_spaces(b, i + 1)
                start = i
                while i < n and b[i] not in b"; ":
                    i += 1
            else:
                start = i
            params[_text(key)] = _text(b[start:i])
            i = _skip_spaces(b, i)
            if i >= n or b[i] != _SEMICOLON:
                return mimetype, params
    return b, None


def data_uri(uri: bytes) -> tuple[bytes, bytes]:
    """Parse a data URI and return its media type and decoded data.

    Raises BadDataURIError when ``uri`` is not a data URI and
    ``binascii.Error`` when its base64 payload is corrupt.
    """
    uri = bytes(uri)
    if len(uri) <= 5 or not uri.startswith(b"data:"):
        raise BadDataURIError()
    uri = uri[5:]
    in_base64 = False
    media = bytearray()
    i = 0
    for j, c in enumerate(uri):
        if c not in b"=;,":
            continue
        segment = uri[i:j].strip(_WHITESPACE)
        if c != _EQUALS and segment == b"base64":
            if media:
                del media[-1]
            in_base64 = True
            i = j
        elif c != ord(","):
            media += segment
            media.append(c)
            i = j + 1
        else:
            media += segment
        if c == ord(","):
            if not media or media[0] == _SEMICOLON:
                media = bytearray(b"text/plain")
            data = uri[j + 1:]
            if in_base64:
                cleaned = data.replace(b"\r", b"").replace(b"\n", b"")
                data = base64.b64decode(cleaned, validate=True)
            else:
                data = decode_url(data)
            return bytes(media), data
    raise BadDataURIError()


def quote_entity(b: bytes) -> tuple[bytes, int]:
    """Match a quote entity at the start of ``b``.

    Returns the quote it stands for (``b'"'`` or ``b"'"``) and the entity
    length, or ``(b"", 0)`` when there is no quote entity.
    """
    if len(b) < 5 or b[0] != _AMPERSAND:
        return b"", 0
    if b[1] == _HASH:
        if b[2] == ord("x"):
            i = _scan(b, 3, b"0")
            if i + 2 < len(b) and b[i] == ord("2") and b[i + 2] == _SEMICOLON:
                if b[i + 1] == ord("2"):
                    return b'"', i + 3
                if b[i + 1] == ord("7"):
                    return b"'", i + 3
        else:
            i = _scan(b, 2, b"0")
            if i + 2 < len(b) and b[i] == ord("3") and b[i + 2] == _SEMICOLON:
                if b[i + 1] == ord("4"):
                    return b'"', i + 3
                if b[i + 1] == ord("9"):
                    return b"'", i + 3
    elif len(b) >= 6 and b[5] == _SEMICOLON:
        if b[1:5] == b"quot":
            return b'"', 6
        if b[1:5] == b"apos":
            return b"'", 6
    return b"", 0


def replace_multiple_whitespace(b: bytes) -> bytes:
    """Collapse each run of whitespace into one space, or one newline if it held a newline."""
    out = bytearray()
    i, n = 0, len(b)
    while i < n:
        end = _scan(b, i, _WHITESPACE)
        if end == i:
            out.append(b[i])
            i += 1
            continue
        run = b[i:end]
        out += b"\n" if any(c in _NEWLINES for c in run) else b" "
        i = end
    return bytes(out)


def _replace_entity(
    b: bytearray,
    i: int,
    entities: Mapping[str, bytes],
    rev_entities: Mapping[int, bytes],
) -> int:
    """Replace the entity starting at ``b[i]`` in place; return the index of its last byte."""
    j = i + 1
    if b[j] == _HASH:
        j += 1
        if b[j] == ord("x"):
            j += 1
            c = 0
            while j < len(b) and b[j] in _HEX_DIGITS:
                c = c * 16 + int(chr(b[j]), 16)
                j += 1
            if j <= i + 3 or c >= 10000:
                return j - 1
            replacement = bytes([c]) if c < 128 else b"&#%d;" % c
        else:
            c = 0
            while j < len(b) and c < 128 and b[j] in _DIGITS:
                c = c * 10 + b[j] - ord("0")
                j += 1
            if j <= i + 2 or c >= 128:
                return j - 1
            replacement = bytes([c])
    else:
        while j < len(b) and j - i - 1 <= _MAX_ENTITY_LENGTH and b[j] != _SEMICOLON:
            if b[j] not in _ALNUM:
                break
            j += 1
        if j >= len(b) or j == i + 1 or b[j] != _SEMICOLON:
            return i
        found = entities.get(b[i + 1:j].decode("ascii"))
        if found is None:
            return j
        replacement = bytes(found)

    length = j + 1 - i
    if j < len(b) and b[j] == _SEMICOLON and length > 2:
        if len(replacement) == 1:
            quoted = rev_entities.get(replacement[0])
            if quoted is not None:
                if quoted == b[i:j + 1]:
                    return j
                replacement = bytes(quoted)
            elif replacement[0] == _AMPERSAND:
                # e.g. &amp; followed by something that could start an entity
                k = j + 1
                if k < len(b) and (b[k] in _ALNUM or b[k] == _HASH):
                    return k
        b[i:j + 1] = replacement
        return i + len(replacement) - 1
    return i


def replace_entities(
    b: bytes,
    entities: Mapping[str, bytes],
    rev_entities: Mapping[int, bytes] | None = None,
) -> bytes:
    """Replace character references and named entities by the bytes they stand for.

    ``entities`` maps entity names to their replacement; ``rev_entities`` maps
    single bytes to the entity that should be kept or used for them instead.
    """
    rev = rev_entities or {}
    buf = bytearray(b)
    i = 0
    while i < len(buf):
        if buf[i] == _AMPERSAND and i + 3 < len(buf):
            i = _replace_entity(buf, i, entities, rev)
        i += 1
    return bytes(buf)


def replace_multiple_whitespace_and_entities(
    b: bytes,
    entities: Mapping[str, bytes],
    rev_entities: Mapping[int, bytes] | None = None,
) -> bytes:
    """Collapse whitespace runs and replace entities in one call."""
    return replace_entities(replace_multiple_whitespace(b), entities, rev_entities)


def encode_url(b: bytes, table: Sequence[bool] = URL_ENCODING_TABLE) -> bytes:
    """Percent-encode every byte that ``table`` marks for escaping."""
    return b"".join(b"%%%02X" % c if table[c] else bytes((c,)) for c in b)


def decode_url(b: bytes) -> bytes:
    """Decode percent-escapes and turn ``+`` into a space; malformed escapes are kept."""
    buf = bytearray(b)
    i = 0
    while i < len(buf):
        if buf[i] == _PERCENT and i + 2 < len(buf):
            digits = buf[i + 1:i + 3]
            if all(c in _HEX_DIGITS for c in digits):
                buf[i:i + 3] = bytes((int(digits.decode("ascii"), 16),))
        elif buf[i] == _PLUS:
            buf[i] = _SPACE
        i += 1
    return bytes(buf)