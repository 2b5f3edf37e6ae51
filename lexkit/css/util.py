"""CSS helpers: identifier and URL validation and colour conversion."""

from __future__ import annotations

from lexkit.css.lex import Lexer


def is_ident(b: bytes) -> bool:
    """Return whether ``b`` is exactly one valid CSS identifier."""
    lexer = Lexer(bytes(b))
    lexer._consume_ident_token()
    return lexer.input.pos() == len(b)


def is_url_unquoted(b: bytes) -> bool:
    """Return whether ``b`` is a valid unquoted URL."""
    lexer = Lexer(bytes(b))
    lexer._consume_unquoted_url()
    return lexer.input.pos() == len(b)


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[float, float, float]:
    """Convert hue, saturation and lightness to red, green and blue, all in [0, 1]."""
    m2 = l + s - l * s if l > 0.5 else l * (s + 1)
    m1 = l * 2 - m2
    return (
        _hue_to_rgb(m1, m2, h + 1.0 / 3.0),
        _hue_to_rgb(m1, m2, h),
        _hue_to_rgb(m1, m2, h - 1.0 / 3.0),
    )


def _hue_to_rgb(m1: float, m2: float, h: float) -> float:
    if h < 0.0:
        h += 1.0
    if h > 1.0:
        h -= 1.0
    if h * 6.0 < 1.0:
        return m1 + (m2 - m1) * h * 6.0
    if h * 2.0 < 1.0:
        return m2
    if h * 3.0 < 2.0:
        return m1 + (m2 - m1) * (2.0 / 3.0 - h) * 6.0
    return m1