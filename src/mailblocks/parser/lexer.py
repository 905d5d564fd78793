"""Markup lexer: converts email markup into a flat list of tokens.

Tokenization is delegated to the standard library ``html.parser``; the
lexer records each start tag, end tag and text run with its 1-based line
and column so that the parser can report precise errors.  Comments,
doctype declarations and processing instructions are dropped.  Character
references are decoded in text and attribute values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from html.parser import HTMLParser


class TokenType(Enum):
    """Kinds of markup token."""

    START_TAG = auto()
    END_TAG = auto()
    TEXT = auto()


@dataclass(frozen=True)
class Token:
    """A single markup token.

    Parameters
    ----------
    type:
        The token kind.
    tag:
        Lower-cased tag name; empty for text.
    text:
        The raw tag text for tags, the decoded text for text runs.
    line:
        1-based line of the token's first character.
    col:
        1-based column of the token's first character.
    attrs:
        Attribute pairs in document order.  Valueless attributes map to
        an empty string.
    self_closing:
        True for ``<tag ... />`` syntax.
    """

    type: TokenType
    tag: str
    text: str
    line: int
    col: int
    attrs: tuple[tuple[str, str], ...] = field(default=())
    self_closing: bool = False


class MarkupLexer(HTMLParser):
    """Collects ``Token`` objects from ``html.parser`` callbacks."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._tokens: list[Token] = []

    def tokenize(self, markup: str) -> list[Token]:
        """Return the tokens of ``markup``."""
        self.reset()
        self._tokens = []
        self.feed(markup)
        self.close()
        return self._tokens

    def _position(self) -> tuple[int, int]:
        line, offset = self.getpos()
        return line, offset + 1

    def _start(self, tag: str, attrs: list[tuple[str, str | None]], self_closing: bool) -> None:
        line, col = self._position()
        self._tokens.append(Token(
            type=TokenType.START_TAG,
            tag=tag.lower(),
            text=self.get_starttag_text() or f"<{tag}>",
            line=line,
            col=col,
            attrs=tuple((name.lower(), value if value is not None else "") for name, value in attrs),
            self_closing=self_closing,
        ))

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._start(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._start(tag, attrs, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        line, col = self._position()
        self._tokens.append(Token(TokenType.END_TAG, tag.lower(), f"</{tag}>", line, col))

    def handle_data(self, data: str) -> None:
        if not data:
            return
        line, col = self._position()
        self._tokens.append(Token(TokenType.TEXT, "", data, line, col))


def tokenize(markup: str) -> list[Token]:
    """Convenience function: tokenize ``markup`` with a fresh lexer."""
    return MarkupLexer().tokenize(markup)
