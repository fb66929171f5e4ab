"""DOT lexer, grammar parser and AST → model converter."""

from dotgraph.parser.api import (
    DotParser,
    ParserConfig,
    parse,
    parse_dot_file,
    parse_dot_string,
)
from dotgraph.parser.converter import convert
from dotgraph.parser.grammar import parse_ast
from dotgraph.parser.lexer import TT, Token, tokenize

__all__ = [
    "DotParser",
    "ParserConfig",
    "TT",
    "Token",
    "convert",
    "parse",
    "parse_ast",
    "parse_dot_file",
    "parse_dot_string",
    "tokenize",
]
