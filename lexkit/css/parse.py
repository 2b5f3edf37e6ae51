"""CSS3 grammar parser built on top of the CSS tokenizer."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from lexkit.buffer.lexer import Lexer as Input
from lexkit.css.hash import Hash, to_hash
from lexkit.css.lex import Lexer, TokenType


class GrammarType(IntEnum):
    """Type of a grammar unit returned by the parser."""

    ERROR = 0
    COMMENT = 1
    AT_RULE = 2
    BEGIN_AT_RULE = 3
    END_AT_RULE = 4
    QUALIFIED_RULE = 5
    BEGIN_RULESET = 6
    END_RULESET = 7
    DECLARATION = 8
    TOKEN = 9
    CUSTOM_PROPERTY = 10

    def __str__(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


@dataclass(frozen=True)
class Token:
    """A token type together with its bytes."""

    token_type: TokenType
    data: bytes

    def __str__(self) -> str:
        return f"{self.token_type}('{self.data.decode('utf-8', 'replace')}')"


class CSSParseError(Exception):
    """A parse error with the line, column and context where it occurred."""

    def __init__(self, message: str, line: int, column: int, context: str) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.context = context

    def __str__(self) -> str:
        return f"{self.message} on line {self.line} and column {self.column}\n{self.context}"


_NEWLINE = re.compile(rb"\r\n|\r|\n")


def _make_error(data: bytes, offset: int, message: str) -> CSSParseError:
    offset = max(0, min(offset, len(data)))
    line = 1
    line_start = 0
    line_end = len(data)
    for match in _NEWLINE.finditer(data):
        if match.end() <= offset:
            line += 1
            line_start = match.end()
        else:
            line_end = match.start()
            break
    text = data[line_start:line_end].decode("utf-8", "replace")
    column = len(data[line_start:offset].decode("utf-8", "replace")) + 1
    context = f"{line:5d}: {text}\n" + " " * (6 + column) + "^"
    return CSSParseError(message, line, column, context)


_WS_BYTES = b" "
_END_BYTES = b"}"

_OPENERS = frozenset(
    {
        TokenType.LEFT_PARENTHESIS,
        TokenType.LEFT_BRACE,
        TokenType.LEFT_BRACKET,
        TokenType.FUNCTION,
    }
)
_CLOSERS = frozenset(
    {
        TokenType.RIGHT_PARENTHESIS,
        TokenType.RIGHT_BRACE,
        TokenType.RIGHT_BRACKET,
    }
)
_ENDINGS = frozenset({TokenType.SEMICOLON, TokenType.RIGHT_BRACE})


class Parser:
    """Streaming CSS parser that yields one grammar unit per ``next`` call.

    ``inline`` selects parsing of a style attribute's declaration list
    instead of a full stylesheet.
    """

    def __init__(self, source: Input | bytes | str, inline: bool = False) -> None:
        self._lexer = Lexer(source)
        self._input = self._lexer.input
        initial = self._parse_declaration_list if inline else self._parse_stylesheet
        self._state: list[Callable[[], GrammarType]] = [initial]
        self._error: str | None = None
        self._error_pos = 0
        self._buf: list[Token] = []
        self._level = 0
        self._data = b""
        self._tt = TokenType.ERROR
        self._keep_ws = False
        self._prev_ws = False
        self._prev_end = False
        self._prev_comment = False

    def has_parse_error(self) -> bool:
        """Return whether the last grammar unit had a parse error (not a read error)."""
        return self._error is not None

    def err(self) -> BaseException | None:
        """Return the parse error, else the input error or ``EOF``, else None."""
        if self._error is not None:
            return _make_error(self._input.getvalue(), self._error_pos, self._error)
        return self._lexer.err()

    def next(self) -> tuple[GrammarType, TokenType, bytes]:
        """Return the next grammar unit with its token type and bytes."""
        self._error = None
        if self._prev_end:
            self._tt, self._data = TokenType.RIGHT_BRACE, _END_BYTES
            self._prev_end = False
        else:
            self._tt, self._data = self._pop_token(True)
        grammar = self._state[-1]()
        return grammar, self._tt, self._data

    def offset(self) -> int:
        """Return the input offset after the current grammar unit."""
        return self._input.offset()

    def values(self) -> list[Token]:
        """Return the tokens of the last at-rule, selector, declaration or error."""
        return list(self._buf)

    def _pop_token(self, allow_comment: bool) -> tuple[TokenType, bytes]:
        self._prev_ws = False
        self._prev_comment = False
        tt, data = self._lexer.next()
        while (not self._keep_ws and tt is TokenType.WHITESPACE) or tt is TokenType.COMMENT:
            if tt is TokenType.WHITESPACE:
                self._prev_ws = True
            else:
                self._prev_comment = True
                if allow_comment and len(self._state) == 1:
                    break
            tt, data = self._lexer.next()
        return tt, data

    def _push(self, tt: TokenType, data: bytes) -> None:
        self._buf.append(Token(tt, data))

    def _fail(self, message: str, back: int = 0) -> None:
        self._input.move(-back)
        self._error, self._error_pos = message, self._input.offset()
        self._input.move(back)

    def _parse_stylesheet(self) -> GrammarType:
        tt = self._tt
        if tt in (TokenType.CDO, TokenType.CDC):
            return GrammarType.TOKEN
        if tt is TokenType.AT_KEYWORD:
            return self._parse_at_rule()
        if tt is TokenType.COMMENT:
            return GrammarType.COMMENT
        if tt is TokenType.ERROR:
            return GrammarType.ERROR
        return self._parse_qualified_rule()

    def _parse_declaration_list(self) -> GrammarType:
        if self._tt is TokenType.COMMENT:
            self._tt, self._data = self._pop_token(False)
        while self._tt is TokenType.SEMICOLON:
            self._tt, self._data = self._pop_token(False)

        # IE hack: *color:red;
        if self._tt is TokenType.DELIM and self._data[:1] == b"*":
            tt, data = self._pop_token(False)
            self._tt = tt
            self._data = self._data + data

        tt = self._tt
        if tt is TokenType.ERROR:
            return GrammarType.ERROR
        if tt is TokenType.AT_KEYWORD:
            return self._parse_at_rule()
        if tt in (TokenType.IDENT, TokenType.DELIM):
            return self._parse_declaration()
        if tt is TokenType.CUSTOM_PROPERTY_NAME:
            return self._parse_custom_property()

        self._buf = []
        text = self._data.decode("utf-8", "replace")
        self._fail(f"unexpected token '{text}' in declaration", len(self._data))
        if tt is TokenType.RIGHT_BRACE:
            # a declaration error that ended in a right brace leaves it for us
            self._push(tt, self._data)
            return GrammarType.ERROR
        return self._parse_declaration_error(tt, self._data)

    def _parse_at_rule(self) -> GrammarType:
        self._buf = []
        self._data = self._data.lower()
        name = self._data
        if len(name) > 1 and name[1] == ord("-"):
            i = name.find(b"-", 2)
            if i != -1:
                name = name[i:]  # skip vendor-specific prefix
        at_rule = to_hash(name[1:])

        first = True
        skip_ws = False
        while True:
            tt, data = self._pop_token(False)
            if tt is TokenType.LEFT_BRACE and self._level == 0:
                if at_rule in (Hash.FONT_FACE, Hash.PAGE):
                    self._state.append(self._parse_at_rule_declaration_list)
                elif at_rule in (Hash.DOCUMENT, Hash.KEYFRAMES, Hash.MEDIA, Hash.SUPPORTS):
                    self._state.append(self._parse_at_rule_rule_list)
                else:
                    self._state.append(self._parse_at_rule_unknown)
                return GrammarType.BEGIN_AT_RULE
            if (tt in _ENDINGS and self._level == 0) or tt is TokenType.ERROR:
                self._prev_end = tt is TokenType.RIGHT_BRACE
                return GrammarType.AT_RULE
            if tt in _OPENERS:
                self._level += 1
            elif tt in _CLOSERS:
                if self._level == 0:
                    self._push(tt, data)
                    if len(self._state) > 1:
                        self._state.pop()
                    self._fail("unexpected ending in at rule")
                    return GrammarType.ERROR
                self._level -= 1
            if first:
                if tt in (TokenType.LEFT_PARENTHESIS, TokenType.LEFT_BRACKET):
                    self._prev_ws = False
                first = False
            if data in (b",", b":"):
                skip_ws = True
            elif self._prev_ws and not skip_ws and tt is not TokenType.RIGHT_PARENTHESIS:
                self._push(TokenType.WHITESPACE, _WS_BYTES)
            else:
                skip_ws = False
            if tt is TokenType.LEFT_PARENTHESIS:
                skip_ws = True
            self._push(tt, data)

    def _parse_at_rule_rule_list(self) -> GrammarType:
        if self._tt in (TokenType.RIGHT_BRACE, TokenType.ERROR):
            self._state.pop()
            return GrammarType.END_AT_RULE
        if self._tt is TokenType.AT_KEYWORD:
            return self._parse_at_rule()
        return self._parse_qualified_rule()

    def _parse_at_rule_declaration_list(self) -> GrammarType:
        while self._tt is TokenType.SEMICOLON:
            self._tt, self._data = self._pop_token(False)
        if self._tt in (TokenType.RIGHT_BRACE, TokenType.ERROR):
            self._state.pop()
            return GrammarType.END_AT_RULE
        return self._parse_declaration_list()

    def _parse_at_rule_unknown(self) -> GrammarType:
        self._keep_ws = True
        tt = self._tt
        if (tt is TokenType.RIGHT_BRACE and self._level == 0) or tt is TokenType.ERROR:
            self._state.pop()
            self._keep_ws = False
            return GrammarType.END_AT_RULE
        if tt in _OPENERS:
            self._level += 1
        elif tt in _CLOSERS:
            self._level -= 1
        return GrammarType.TOKEN

    def _parse_qualified_rule(self) -> GrammarType:
        self._buf = []
        first = True
        in_attr_sel = False
        skip_ws = True
        while True:
            if first:
                tt, data = self._tt, self._data
                self._tt = TokenType.WHITESPACE
                self._data = b""
                first = False
            else:
                tt, data = self._pop_token(False)
            if tt is TokenType.LEFT_BRACE and self._level == 0:
                self._state.append(self._parse_qualified_rule_declaration_list)
                return GrammarType.BEGIN_RULESET
            if tt is TokenType.ERROR:
                self._fail("unexpected ending in qualified rule")
                return GrammarType.ERROR
            if tt in _OPENERS:
                self._level += 1
            elif tt in _CLOSERS:
                if self._level == 0:
                    self._push(tt, data)
                    if len(self._state) > 1:
                        self._state.pop()
                    self._fail("unexpected ending in qualified rule")
                    return GrammarType.ERROR
                self._level -= 1
            if data in (b",", b">", b"+", b"~"):
                if data == b",":
                    return GrammarType.QUALIFIED_RULE
                skip_ws = True
            elif self._prev_ws and not skip_ws and not in_attr_sel:
                self._push(TokenType.WHITESPACE, _WS_BYTES)
            else:
                skip_ws = False
            if tt is TokenType.LEFT_BRACKET:
                in_attr_sel = True
            elif tt is TokenType.RIGHT_BRACKET:
                in_attr_sel = False
            self._push(tt, data)

    def _parse_qualified_rule_declaration_list(self) -> GrammarType:
        while self._tt is TokenType.SEMICOLON:
            self._tt, self._data = self._pop_token(False)
        if self._tt in (TokenType.RIGHT_BRACE, TokenType.ERROR):
            self._state.pop()
            return GrammarType.END_RULESET
        return self._parse_declaration_list()

    def _parse_declaration(self) -> GrammarType:
        self._buf = []
        self._data = self._data.lower()
        tt_name, data_name = self._tt, self._data
        tt, data = self._pop_token(False)
        if tt is not TokenType.COLON:
            self._fail("expected colon in declaration", len(data))
            self._push(tt_name, data_name)
            return self._parse_declaration_error(tt, data)

        skip_ws = True
        while True:
            tt, data = self._pop_token(False)
            if (tt in _ENDINGS and self._level == 0) or tt is TokenType.ERROR:
                self._prev_end = tt is TokenType.RIGHT_BRACE
                return GrammarType.DECLARATION
            if tt in _OPENERS:
                self._level += 1
            elif tt in _CLOSERS:
                if self._level == 0:
                    self._fail("unexpected ending in declaration")
                    self._push(tt_name, data_name)
                    self._push(TokenType.COLON, b":")
                    return self._parse_declaration_error(tt, data)
                self._level -= 1
            if data in (b",", b"/", b":", b"!", b"="):
                skip_ws = True
            elif (self._prev_ws or self._prev_comment) and not skip_ws:
                self._push(TokenType.WHITESPACE, _WS_BYTES)
            else:
                skip_ws = False
            self._push(tt, data)

    def _parse_declaration_error(self, tt: TokenType, data: bytes) -> GrammarType:
        # on the offending token: keep popping until ;, } or the end
        self._tt, self._data = tt, data
        while True:
            if (tt in _ENDINGS and self._level == 0) or tt is TokenType.ERROR:
                self._prev_end = tt is TokenType.RIGHT_BRACE
                if tt is TokenType.SEMICOLON:
                    self._push(tt, data)
                return GrammarType.ERROR
            if tt in _OPENERS:
                self._level += 1
            elif tt in _CLOSERS:
                self._level -= 1
            if self._prev_ws:
                self._push(TokenType.WHITESPACE, _WS_BYTES)
            self._push(tt, data)
            tt, data = self._pop_token(False)

    def _parse_custom_property(self) -> GrammarType:
        self._buf = []
        tt, data = self._pop_token(False)
        if tt is not TokenType.COLON:
            self._fail("expected colon in custom property", len(data))
            return GrammarType.ERROR
        value = bytearray()
        while True:
            tt, data = self._lexer.next()
            if (tt in _ENDINGS and self._level == 0) or tt is TokenType.ERROR:
                self._prev_end = tt is TokenType.RIGHT_BRACE
                self._push(TokenType.CUSTOM_PROPERTY_VALUE, bytes(value))
                return GrammarType.CUSTOM_PROPERTY
            if tt in _OPENERS:
                self._level += 1
            elif tt in _CLOSERS:
                if self._level == 0:
                    self._push(tt, data)
                    self._fail("unexpected ending in custom property")
                    return GrammarType.ERROR
                self._level -= 1
            value += data