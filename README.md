# lexkit

Building blocks for writing lexers and parsers over bytes, a CSS3 tokenizer
and parser, and helpers for numbers, media types, data URIs, HTML entities and
URL encoding.

## Installation

```
pip install lexkit
```

## What is inside

- `lexkit.buffer.lexer.Lexer` holds the whole input in memory and tracks a
  selection: `peek`, `peek_rune`, `move`, `pos`, `rewind`, `lexeme`, `skip`,
  `shift`, `offset`, `reset` and `getvalue`. `err()` returns `EOF` once the
  position is at the end of the input. `Lexer.from_reader` reads a binary
  stream.
- `lexkit.buffer.streamlexer.StreamLexer` offers the same selection methods
  but reads a stream in chunks; release shifted data with `free(shift_len())`.
- `lexkit.buffer.reader.Reader` reads from a byte string and can be `reset`.
- `lexkit.buffer.writer.Writer` collects written bytes; with `limit=` set, a
  write that does not fit raises `EOFError`.
- `lexkit.common`: `number`, `dimension`, `mediatype`, `data_uri` (raises
  `BadDataURIError` for input that is not a data URI), `quote_entity`,
  `replace_multiple_whitespace`, `replace_entities`,
  `replace_multiple_whitespace_and_entities`, `encode_url` (with
  `URL_ENCODING_TABLE` or `DATA_URI_ENCODING_TABLE`) and `decode_url`.
- `lexkit.css.lex`: a CSS3 `Lexer` producing `TokenType` values with their
  bytes; iterating over it yields tokens until the input is exhausted.
- `lexkit.css.parse`: a `Parser` producing `GrammarType` values; `values()`
  returns the `Token` list of the last at-rule, selector, declaration or
  error, and `err()` returns a `CSSParseError` with line, column and context.
- `lexkit.css.hash`: `Hash` and `to_hash` for the at-rule names the parser
  treats specially.
- `lexkit.css.util`: `is_ident`, `is_url_unquoted` and `hsl_to_rgb`.

## Example: tokenizing CSS

```python
from lexkit.css.lex import Lexer, TokenType

for token_type, data in Lexer(b"color: red;"):
    if token_type is not TokenType.WHITESPACE:
        print(token_type.name, data)
```

## Example: parsing CSS

```python
from lexkit.css.parse import GrammarType, Parser

parser = Parser(b"a { color: red; }")
while True:
    grammar, token_type, data = parser.next()
    if grammar is GrammarType.ERROR:
        break
    print(grammar.name, data, [t.data for t in parser.values()])
```

Pass `inline=True` to parse the contents of a style attribute.

## Example: data URIs

```python
from lexkit.common import data_uri

mimetype, payload = data_uri(b"data:;base64,dGV4dA==")
assert mimetype == b"text/plain" and payload == b"text"
```

## What it does not do

The package has no readers or writers for binary file formats and no
command-line tool; it is a library to be called from Python code.

## Running the tests

```
pip install lexkit[test]
pytest
```