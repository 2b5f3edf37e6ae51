"""CSS3 tokenizer following the CSS syntax specification."""

from __future__ import annotations

from collections.abc import Iterator
from enum import IntEnum

from lexkit.buffer.lexer import EOF
from lexkit.buffer.lexer import Lexer as Input


class TokenType(IntEnum):
    """Type of a CSS token."""

    ERROR = 0
    IDENT = 1
    FUNCTION = 2
    AT_KEYWORD = 3
    HASH = 4
    STRING = 5
    BAD_STRING = 6
    URL = 7
    BAD_URL = 8
    DELIM = 9
    NUMBER = 10
    PERCENTAGE = 11
    DIMENSION = 12
    UNICODE_RANGE = 13
    INCLUDE_MATCH = 14
    DASH_MATCH = 15
    PREFIX_MATCH = 16
    SUFFIX_MATCH = 17
    SUBSTRING_MATCH = 18
    COLUMN = 19
    WHITESPACE = 20
    CDO = 21
    CDC = 22
    COLON = 23
    SEMICOLON = 24
    COMMA = 25
    LEFT_BRACKET = 26
    RIGHT_BRACKET = 27
    LEFT_PARENTHESIS = 28
    RIGHT_PARENTHESIS = 29
    LEFT_BRACE = 30
    RIGHT_BRACE = 31
    COMMENT = 32
    EMPTY = 33
    CUSTOM_PROPERTY_NAME = 34
    CUSTOM_PROPERTY_VALUE = 35

    def __str__(self) -> str:
        special = _SPECIAL_NAMES.get(self)
        if special is not None:
            return special
        return "".join(part.capitalize() for part in self.name.split("_"))


_SPECIAL_NAMES = {
    TokenType.URL: "URL",
    TokenType.BAD_URL: "BadURL",
    TokenType.CDO: "CDO",
    TokenType.CDC: "CDC",
}

_WHITESPACE = b" \t\n\r\f"
_HEX = frozenset(b"0123456789abcdefABCDEF")
_DIGITS = frozenset(b"0123456789")
_LETTERS = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_BACKSLASH = ord("\\")
_SINGLES = {
    ord(":"): TokenType.COLON,
    ord(";"): TokenType.SEMICOLON,
    ord(","): TokenType.COMMA,
}
_BRACKETS = {
    ord("("): TokenType.LEFT_PARENTHESIS,
    ord(")"): TokenType.RIGHT_PARENTHESIS,
    ord("["): TokenType.LEFT_BRACKET,
    ord("]"): TokenType.RIGHT_BRACKET,
    ord("{"): TokenType.LEFT_BRACE,
    ord("}"): TokenType.RIGHT_BRACE,
}
_MATCHES = {
    ord("~"): TokenType.INCLUDE_MATCH,
    ord("|"): TokenType.DASH_MATCH,
    ord("^"): TokenType.PREFIX_MATCH,
    ord("$"): TokenType.SUFFIX_MATCH,
    ord("*"): TokenType.SUBSTRING_MATCH,
}


def _is_name_start(c: int) -> bool:
    return c in _LETTERS or c == ord("_") or c >= 0x80


def _is_name_char(c: int) -> bool:
    return _is_name_start(c) or c in _DIGITS or c == ord("-")


class Lexer:
    """Tokenizer over CSS input.

    ``source`` is bytes, a string or a ``lexkit.buffer.lexer.Lexer`` input,
    which is available afterwards as ``input``.
    """

    def __init__(self, source: Input | bytes | str) -> None:
        if isinstance(source, str):
            source = source.encode("utf-8")
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = Input(bytes(source))
        self.input = source

    def err(self) -> BaseException | None:
        """Return the input error, ``EOF`` at the end of the input, or None."""
        return self.input.err()

    def next(self) -> tuple[TokenType, bytes]:
        """Return the next token and its bytes; ``TokenType.ERROR`` once the input is exhausted."""
        r = self.input
        c = r.peek(0)
        if c in _WHITESPACE:
            r.move(1)
            while self._consume_whitespace():
                pass
            return TokenType.WHITESPACE, r.shift()
        if c == 0 and r.err() is not None:
            return TokenType.ERROR, b""
        tt = self._consume_token(c)
        if tt is None:
            r.move(1)
            tt = TokenType.DELIM
        return tt, r.shift()

    def __iter__(self) -> Iterator[tuple[TokenType, bytes]]:
        while True:
            tt, data = self.next()
            if tt is TokenType.ERROR:
                return
            yield tt, data

    def _consume_token(self, c: int) -> TokenType | None:
        r = self.input
        if c == 0:
            return None
        if c in _SINGLES:
            r.move(1)
            return _SINGLES[c]
        if c in _BRACKETS:
            return self._consume_bracket()
        if c == ord("#"):
            return TokenType.HASH if self._consume_hash_token() else None
        if c in b"\"'":
            return self._consume_string()
        if c in b".+":
            return self._consume_numeric()
        if c == ord("-"):
            return (
                self._consume_numeric()
                or self._consume_identlike()
                or (TokenType.CDC if self._consume_cdc_token() else None)
                or (TokenType.CUSTOM_PROPERTY_NAME if self._consume_custom_variable_token() else None)
            )
        if c == ord("@"):
            return TokenType.AT_KEYWORD if self._consume_at_keyword_token() else None
        if c in b"$*^~":
            return self._consume_match()
        if c == ord("/"):
            return TokenType.COMMENT if self._consume_comment() else None
        if c == ord("<"):
            return TokenType.CDO if self._consume_cdo_token() else None
        if c == _BACKSLASH:
            return self._consume_identlike()
        if c in b"uU":
            if self._consume_unicode_range_token():
                return TokenType.UNICODE_RANGE
            return self._consume_identlike()
        if c == ord("|"):
            if (tt := self._consume_match()) is not None:
                return tt
            return TokenType.COLUMN if self._consume_column_token() else None
        return self._consume_numeric() or self._consume_identlike()

    def _consume_byte(self, c: int | str) -> bool:
        if isinstance(c, str):
            c = ord(c)
        if self.input.peek(0) == c:
            self.input.move(1)
            return True
        return False

    def _consume_comment(self) -> bool:
        r = self.input
        if r.peek(0) != ord("/") or r.peek(1) != ord("*"):
            return False
        r.move(2)
        while True:
            c = r.peek(0)
            if c == 0 and r.err() is not None:
                return True
            if c == ord("*") and r.peek(1) == ord("/"):
                r.move(2)
                return True
            r.move(1)

    def _consume_newline(self) -> bool:
        r = self.input
        c = r.peek(0)
        if c in b"\n\f":
            r.move(1)
            return True
        if c == ord("\r"):
            r.move(2 if r.peek(1) == ord("\n") else 1)
            return True
        return False

    def _consume_whitespace(self) -> bool:
        if self.input.peek(0) in _WHITESPACE:
            self.input.move(1)
            return True
        return False

    def _consume_digit(self) -> bool:
        if self.input.peek(0) in _DIGITS:
            self.input.move(1)
            return True
        return False

    def _consume_digits(self) -> bool:
        if not self._consume_digit():
            return False
        while self._consume_digit():
            pass
        return True

    def _consume_hex_digit(self) -> bool:
        if self.input.peek(0) in _HEX:
            self.input.move(1)
            return True
        return False

    def _consume_escape(self) -> bool:
        r = self.input
        if r.peek(0) != _BACKSLASH:
            return False
        mark = r.pos()
        r.move(1)
        if self._consume_newline():
            r.rewind(mark)
            return False
        if self._consume_hex_digit():
            for _ in range(5):
                if not self._consume_hex_digit():
                    break
            self._consume_whitespace()
            return True
        c = r.peek(0)
        if c >= 0xC0:
            _, n = r.peek_rune(0)
            r.move(n)
            return True
        if c == 0 and r.err() is not None:
            r.rewind(mark)
            return False
        r.move(1)
        return True

    def _consume_name_chars(self) -> None:
        r = self.input
        while True:
            c = r.peek(0)
            if _is_name_char(c):
                r.move(1)
            elif c != _BACKSLASH or not self._consume_escape():
                return

    def _consume_ident_token(self) -> bool:
        r = self.input
        mark = r.pos()
        if r.peek(0) == ord("-"):
            r.move(1)
        c = r.peek(0)
        if _is_name_start(c):
            r.move(1)
        elif c != _BACKSLASH or not self._consume_escape():
            r.rewind(mark)
            return False
        self._consume_name_chars()
        return True

    def _consume_custom_variable_token(self) -> bool:
        r = self.input
        r.move(1)
        if r.peek(0) != ord("-") or not self._consume_ident_token():
            r.move(-1)
            return False
        return True

    def _consume_at_keyword_token(self) -> bool:
        r = self.input
        r.move(1)
        if not self._consume_ident_token():
            r.move(-1)
            return False
        return True

    def _consume_hash_token(self) -> bool:
        r = self.input
        mark = r.pos()
        r.move(1)
        c = r.peek(0)
        if _is_name_char(c):
            r.move(1)
        elif c != _BACKSLASH or not self._consume_escape():
            r.rewind(mark)
            return False
        self._consume_name_chars()
        return True

    def _consume_number_token(self) -> bool:
        r = self.input
        mark = r.pos()
        if r.peek(0) in b"+-":
            r.move(1)
        first_digit = self._consume_digits()
        if r.peek(0) == ord("."):
            r.move(1)
            if not self._consume_digits():
                if first_digit:
                    r.move(-1)  # the dot may belong to the next token
                    return True
                r.rewind(mark)
                return False
        elif not first_digit:
            r.rewind(mark)
            return False
        mark = r.pos()
        if r.peek(0) in b"eE":
            r.move(1)
            if r.peek(0) in b"+-":
                r.move(1)
            if not self._consume_digits():
                r.rewind(mark)  # the e may belong to the next token
        return True

    def _consume_unicode_range_token(self) -> bool:
        r = self.input
        if r.peek(0) not in b"uU" or r.peek(1) != ord("+"):
            return False
        mark = r.pos()
        r.move(2)
        k = 0
        while self._consume_hex_digit():
            k += 1
        if self._consume_byte("-"):
            if k == 0 or k > 6 or not self._consume_hex_digit():
                r.rewind(mark)
                return False
            k = 1
            while self._consume_hex_digit():
                k += 1
        elif self._consume_byte("?"):
            k += 1
            while self._consume_byte("?"):
                k += 1
        if k == 0 or k > 6:
            r.rewind(mark)
            return False
        return True

    def _consume_column_token(self) -> bool:
        r = self.input
        if r.peek(0) == ord("|") and r.peek(1) == ord("|"):
            r.move(2)
            return True
        return False

    def _consume_cdo_token(self) -> bool:
        r = self.input
        if bytes(r.peek(i) for i in range(4)) == b"<!--":
            r.move(4)
            return True
        return False

    def _consume_cdc_token(self) -> bool:
        r = self.input
        if bytes(r.peek(i) for i in range(3)) == b"-->":
            r.move(3)
            return True
        return False

    def _consume_match(self) -> TokenType | None:
        r = self.input
        if r.peek(1) == ord("="):
            tt = _MATCHES.get(r.peek(0))
            if tt is not None:
                r.move(2)
                return tt
        return None

    def _consume_bracket(self) -> TokenType | None:
        tt = _BRACKETS.get(self.input.peek(0))
        if tt is not None:
            self.input.move(1)
        return tt

    def _consume_numeric(self) -> TokenType | None:
        if not self._consume_number_token():
            return None
        if self._consume_byte("%"):
            return TokenType.PERCENTAGE
        if self._consume_ident_token():
            return TokenType.DIMENSION
        return TokenType.NUMBER

    def _consume_string(self) -> TokenType:
        r = self.input
        delim = r.peek(0)
        r.move(1)
        while True:
            c = r.peek(0)
            if c == 0 and r.err() is not None:
                break
            if c in b"\n\r\f":
                r.move(1)
                return TokenType.BAD_STRING
            if c == delim:
                r.move(1)
                break
            if c == _BACKSLASH:
                if not self._consume_escape():
                    # either a newline or the end of the input follows the backslash
                    r.move(1)
                    self._consume_newline()
            else:
                r.move(1)
        return TokenType.STRING

    def _consume_unquoted_url(self) -> bool:
        r = self.input
        while True:
            c = r.peek(0)
            if (c == 0 and r.err() is not None) or c == ord(")"):
                return True
            if c in b"\"'(\\ " or c <= 0x1F or c == 0x7F:
                if c != _BACKSLASH or not self._consume_escape():
                    return False
            else:
                r.move(1)

    def _consume_remnants_bad_url(self) -> None:
        r = self.input
        while not (self._consume_byte(")") or r.err() is not None):
            if not self._consume_escape():
                r.move(1)

    def _consume_identlike(self) -> TokenType | None:
        r = self.input
        if not self._consume_ident_token():
            return None
        if r.peek(0) != ord("("):
            return TokenType.IDENT
        if r.lexeme().replace(b"\\", b"").lower() != b"url":
            r.move(1)
            return TokenType.FUNCTION
        r.move(1)

        while self._consume_whitespace():
            pass
        if r.peek(0) in b"\"'":
            if self._consume_string() is TokenType.BAD_STRING:
                self._consume_remnants_bad_url()
                return TokenType.BAD_URL
        elif not self._consume_unquoted_url() and not self._consume_whitespace():
            self._consume_remnants_bad_url()
            return TokenType.BAD_URL
        while self._consume_whitespace():
            pass
        if not self._consume_byte(")") and r.err() is not EOF:
            self._consume_remnants_bad_url()
            return TokenType.BAD_URL
        return TokenType.URL