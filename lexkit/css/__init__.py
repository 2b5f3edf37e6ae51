"""CSS3 lexer, parser, at-rule names and utilities."""