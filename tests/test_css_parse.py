import pytest

from lexkit.buffer.lexer import EOF
from lexkit.buffer.lexer import Lexer as Input
from lexkit.css.lex import TokenType
from lexkit.css.parse import CSSParseError, GrammarType, Parser, Token

_WITH_VALUES = (
    GrammarType.AT_RULE,
    GrammarType.BEGIN_AT_RULE,
    GrammarType.QUALIFIED_RULE,
    GrammarType.BEGIN_RULESET,
    GrammarType.DECLARATION,
    GrammarType.CUSTOM_PROPERTY,
)


def render(css, inline):
    parser = Parser(css, inline)
    out = bytearray()
    for _ in range(10000):
        grammar, _, data = parser.next()
        if grammar is GrammarType.ERROR:
            if parser.err() is EOF:
                return out.decode("utf-8")
            data = b"ERROR(" + b"".join(v.data for v in parser.values()) + b")"
        elif grammar in _WITH_VALUES:
            if grammar in (GrammarType.DECLARATION, GrammarType.CUSTOM_PROPERTY):
                data += b":"
            data += b"".join(v.data for v in parser.values())
            if grammar in (GrammarType.BEGIN_AT_RULE, GrammarType.BEGIN_RULESET):
                data += b"{"
            elif grammar in (GrammarType.AT_RULE, GrammarType.DECLARATION, GrammarType.CUSTOM_PROPERTY):
                data += b";"
            elif grammar is GrammarType.QUALIFIED_RULE:
                data += b","
        out += data
    raise AssertionError("parser did not reach the end")


PARSE_CASES = [
    (True, " x : y ; ", "x:y;"),
    (True, "color: red;", "color:red;"),
    (True, "color : red;", "color:red;"),
    (True, "color: red; border: 0;", "color:red;border:0;"),
    (True, "color: red !important;", "color:red!important;"),
    (True, "color: red ! important;", "color:red!important;"),
    (True, "white-space: -moz-pre-wrap;", "white-space:-moz-pre-wrap;"),
    (True, "display: -moz-inline-stack;", "display:-moz-inline-stack;"),
    (True, "x: 10px / 1em;", "x:10px/1em;"),
    (True, 'x: 1em/1.5em "Times New Roman", Times, serif;', 'x:1em/1.5em "Times New Roman",Times,serif;'),
    (True, "x: hsla(100,50%, 75%, 0.5);", "x:hsla(100,50%,75%,0.5);"),
    (True, "x: hsl(100,50%, 75%);", "x:hsl(100,50%,75%);"),
    (True, "x: rgba(255, 238 , 221, 0.3);", "x:rgba(255,238,221,0.3);"),
    (True, "x: 50vmax;", "x:50vmax;"),
    (True, "color: linear-gradient(to right, black, white);", "color:linear-gradient(to right,black,white);"),
    (True, "color: calc(100%/2 - 1em);", "color:calc(100%/2 - 1em);"),
    (True, "color: calc(100%/2--1em);", "color:calc(100%/2--1em);"),
    (False, "<!-- @charset; -->", "<!--@charset;-->"),
    (False, "@media print, screen { }", "@media print,screen{}"),
    (False, "@media { @viewport ; }", "@media{@viewport;}"),
    (
        False,
        "@keyframes 'diagonal-slide' {  from { left: 0; top: 0; } to { left: 100px; top: 100px; } }",
        "@keyframes 'diagonal-slide'{from{left:0;top:0;}to{left:100px;top:100px;}}",
    ),
    (
        False,
        "@keyframes movingbox{0%{left:90%;}50%{left:10%;}100%{left:90%;}}",
        "@keyframes movingbox{0%{left:90%;}50%{left:10%;}100%{left:90%;}}",
    ),
    (False, ".foo { color: #fff;}", ".foo{color:#fff;}"),
    (False, ".foo { ; _color: #fff;}", ".foo{_color:#fff;}"),
    (False, "a { color: red; border: 0; }", "a{color:red;border:0;}"),
    (False, "a { color: red; border: 0; } b { padding: 0; }", "a{color:red;border:0;}b{padding:0;}"),
    (False, "/* comment */", "/* comment */"),
    # extraordinary
    (True, "color: red;;", "color:red;"),
    (True, "margin: 10px/*comment*/50px;", "margin:10px 50px;"),
    (True, "color:#c0c0c0", "color:#c0c0c0;"),
    (True, "background:URL(x.png);", "background:URL(x.png);"),
    (
        True,
        "filter: progid : DXImageTransform.Microsoft.BasicImage(rotation=1);",
        "filter:progid:DXImageTransform.Microsoft.BasicImage(rotation=1);",
    ),
    (True, "/*a*/\n/*c*/\nkey: value;", "key:value;"),
    (True, "@-moz-charset;", "@-moz-charset;"),
    (True, "--custom-variable:  (0;)  ;", "--custom-variable:  (0;)  ;"),
    (False, "@import;@import;", "@import;@import;"),
    (False, ".a .b#c, .d<.e { x:y; }", ".a .b#c,.d<.e{x:y;}"),
    (False, ".a[b~=c]d { x:y; }", ".a[b~=c]d{x:y;}"),
    (False, "a{}", "a{}"),
    (False, "a,.b/*comment*/ {x:y;}", "a,.b{x:y;}"),
    (False, "a,.b/*comment*/.c {x:y;}", "a,.b.c{x:y;}"),
    (False, "a{x:; z:q;}", "a{x:;z:q;}"),
    (False, "@font-face { x:y; }", "@font-face{x:y;}"),
    (False, "a:not([controls]){x:y;}", "a:not([controls]){x:y;}"),
    (False, "@document regexp('https:.*') { p { color: red; } }", "@document regexp('https:.*'){p{color:red;}}"),
    (False, "@media all and ( max-width:400px ) { }", "@media all and (max-width:400px){}"),
    (False, "@media (max-width:400px) { }", "@media(max-width:400px){}"),
    (False, "@media (max-width:400px)", "@media(max-width:400px);"),
    (False, "@font-face { ; font:x; }", "@font-face{font:x;}"),
    (False, "@-moz-font-face { ; font:x; }", "@-moz-font-face{font:x;}"),
    (False, "@unknown abc { {} lala }", "@unknown abc{{} lala }"),
    (False, "a[x={}]{x:y;}", "a[x={}]{x:y;}"),
    (False, "a[x=,]{x:y;}", "a[x=,]{x:y;}"),
    (False, "a[x=+]{x:y;}", "a[x=+]{x:y;}"),
    (False, ".cla .ss > #id { x:y; }", ".cla .ss>#id{x:y;}"),
    (False, ".cla /*a*/ /*b*/ .ss{}", ".cla .ss{}"),
    (False, "a{x:f(a(),b);}", "a{x:f(a(),b);}"),
    (False, "a{x:y!z;}", "a{x:y!z;}"),
    (
        False,
        '[class*="column"]+[class*="column"]:last-child{a:b;}',
        '[class*="column"]+[class*="column"]:last-child{a:b;}',
    ),
    (False, "@media { @viewport }", "@media{@viewport;}"),
    (False, "table { @unknown }", "table{@unknown;}"),
    (False, "a{@media{width:70%;} b{width:60%;}}", "a{@media{ERROR(width:70%;})ERROR(b{width:60%;})}"),
    # early endings
    (False, "selector{", "selector{"),
    (False, "@media{selector{", "@media{selector{"),
    # bad grammar
    (False, "}", "ERROR(})"),
    (True, "}", "ERROR(})"),
    (True, "~color:red", "ERROR(~color:red)"),
    (True, "(color;red)", "ERROR((color;red))"),
    (True, "color(;red)", "ERROR(color(;red))"),
    (False, ".foo { *color: #fff;}", ".foo{*color:#fff;}"),
    (True, "*color: red; font-size: 12pt;", "*color:red;font-size:12pt;"),
    (True, "*--custom: red;", "*--custom: red;"),
    (True, "_color: red; font-size: 12pt;", "_color:red;font-size:12pt;"),
    (False, ".foo { baddecl } .bar { color:red; }", ".foo{ERROR(baddecl)}.bar{color:red;}"),
    (
        False,
        ".foo { baddecl baddecl baddecl; height:100px } .bar { color:red; }",
        ".foo{ERROR(baddecl baddecl baddecl;)height:100px;}.bar{color:red;}",
    ),
    (
        False,
        ".foo { visibility: hidden;\u201d } .bar { color:red; }",
        ".foo{visibility:hidden;ERROR(\u201d)}.bar{color:red;}",
    ),
    (False, ".foo { baddecl (; color:red; }", ".foo{ERROR(baddecl (; color:red; })"),
    # issues
    (False, "@media print {.class{width:5px;}}", "@media print{.class{width:5px;}}"),
    (False, ".class{width:calc((50% + 2em)/2 + 14px);}", ".class{width:calc((50% + 2em)/2 + 14px);}"),
    (False, ".class [c=y]{}", ".class [c=y]{}"),
    (False, "table{font-family:Verdana}", "table{font-family:Verdana;}"),
    # fuzzing
    (False, "@-webkit-", "@-webkit-;"),
]


@pytest.mark.parametrize("inline,css,expected", PARSE_CASES)
def test_parse(inline, css, expected):
    assert render(css, inline) == expected


@pytest.mark.parametrize(
    "inline,css,column",
    [
        (False, "}", 2),
        (True, "}", 1),
        (False, "selector", 9),
        (True, "color 0", 7),
        (True, "--color 0", 9),
    ],
)
def test_parse_error_column(inline, css, column):
    parser = Parser(css, inline)
    for _ in range(100):
        grammar, _, _ = parser.next()
        if grammar is GrammarType.ERROR:
            break
    else:
        raise AssertionError("no error grammar")
    assert parser.has_parse_error()
    err = parser.err()
    assert isinstance(err, CSSParseError)
    assert err.column == column
    assert err.line == 1


def test_custom_property_reaches_eof_without_parse_error():
    parser = Parser("--custom-variable:0", True)
    assert parser.next()[0] is GrammarType.CUSTOM_PROPERTY
    assert parser.next()[0] is GrammarType.ERROR
    assert not parser.has_parse_error()
    assert parser.err() is EOF


def test_parse_error_message():
    parser = Parser("}", True)
    grammar, _, _ = parser.next()
    assert grammar is GrammarType.ERROR
    err = parser.err()
    assert err.message == "unexpected token '}' in declaration"
    assert str(err).startswith("unexpected token '}' in declaration on line 1 and column 1\n")


def test_parse_error_on_second_line():
    parser = Parser("a{x:y;}\n}", False)
    grammars = [parser.next()[0] for _ in range(4)]
    assert grammars[-1] is GrammarType.ERROR
    err = parser.err()
    assert err.line == 2
    assert err.column == 2


def test_parse_offset():
    z = Input(b"div{background:url(link);}")
    parser = Parser(z, False)
    assert z.offset() == 0
    parser.next()
    assert z.offset() == 4
    parser.next()
    assert z.offset() == 25
    parser.next()
    assert z.offset() == 26
    assert parser.offset() == 26


def test_declaration_values():
    parser = Parser("color: red;", True)
    grammar, tt, data = parser.next()
    assert grammar is GrammarType.DECLARATION
    assert tt is TokenType.IDENT
    assert data == b"color"
    assert parser.values() == [Token(TokenType.IDENT, b"red")]


def test_example_inline():
    parser = Parser("color: red;", True)
    out = ""
    while True:
        gt, _, data = parser.next()
        if gt is GrammarType.ERROR:
            break
        out += data.decode()
        if gt is GrammarType.DECLARATION:
            out += ":" + "".join(v.data.decode() for v in parser.values()) + ";"
    assert out == "color:red;"


def test_token_str():
    assert str(Token(TokenType.IDENT, b"data")) == "Ident('data')"


@pytest.mark.parametrize(
    "grammar,name",
    [
        (GrammarType.ERROR, "Error"),
        (GrammarType.BEGIN_AT_RULE, "BeginAtRule"),
        (GrammarType.END_RULESET, "EndRuleset"),
        (GrammarType.CUSTOM_PROPERTY, "CustomProperty"),
    ],
)
def test_grammar_type_str(grammar, name):
    assert str(grammar) == name