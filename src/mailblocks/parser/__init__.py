"""Markup parser: email markup back to document trees."""
from __future__ import annotations

from mailblocks.parser.lexer import MarkupLexer, Token, TokenType, tokenize
from mailblocks.parser.parser import Element, MarkupParser, build_element_tree, flatten_text, parse

__all__ = [
    "Element",
    "MarkupLexer",
    "MarkupParser",
    "Token",
    "TokenType",
    "build_element_tree",
    "flatten_text",
    "parse",
    "tokenize",
]
