"""Lexing buffers, CSS3 tokenizing and parsing, and data URI, entity and URL helpers."""

__version__ = "0.1.0"