"""Split a command line into words, pipes and redirection operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

_WHITESPACE = frozenset(" \t\n")
_METACHARS = frozenset("|<>")
_QUOTES = frozenset("'\"")


class TokenType(Enum):
    WORD = "word"
    PIPE = "pipe"
    REDIRECT_IN = "redirect_in"
    REDIRECT_OUT = "redirect_out"
    HEREDOC = "heredoc"
    APPEND = "append"
    EOF = "eof"


class QuoteType(IntEnum):
    """How a word was quoted: not at all, single, double, or both kinds."""

    NONE = 0
    SINGLE = 1
    DOUBLE = 2
    MIXED = 3


@dataclass
class Token:
    value: str
    type: TokenType
    quote_type: QuoteType = QuoteType.NONE


class LexError(ValueError):
    """Raised when a line cannot be split, such as on an unclosed quote."""


_OPERATORS = {
    "<<": TokenType.HEREDOC,
    ">>": TokenType.APPEND,
    "<": TokenType.REDIRECT_IN,
    ">": TokenType.REDIRECT_OUT,
    "|": TokenType.PIPE,
}


def _read_word(line: str, pos: int) -> tuple[str, QuoteType, int]:
    """Read a word starting at *pos*; return its text, quoting and end."""
    parts: list[str] = []
    quote_type = QuoteType.NONE
    length = len(line)
    while pos < length and line[pos] not in _WHITESPACE and line[pos] not in _METACHARS:
        char = line[pos]
        if char in _QUOTES:
            kind = QuoteType.SINGLE if char == "'" else QuoteType.DOUBLE
            if quote_type is QuoteType.NONE:
                quote_type = kind
            elif quote_type != kind:
                quote_type = QuoteType.MIXED
            end = line.find(char, pos + 1)
            if end == -1:
                raise LexError(f"unclosed quote {char!r} at position {pos}")
            parts.append(line[pos + 1 : end])
            pos = end + 1
        else:
            start = pos
            while (
                pos < length
                and line[pos] not in _QUOTES
                and line[pos] not in _WHITESPACE
                and line[pos] not in _METACHARS
            ):
                pos += 1
            parts.append(line[start:pos])
    return "".join(parts), quote_type, pos


def lex(line: str) -> list[Token]:
    """Split *line* into tokens.

    Quotes are removed from words and recorded in ``quote_type``.
    Raises LexError on an unclosed quote.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(line)
    while pos < length:
        if line[pos] in _WHITESPACE:
            pos += 1
            continue
        if line[pos] in _METACHARS:
            op = line[pos : pos + 2]
            if op not in _OPERATORS:
                op = line[pos]
            tokens.append(Token(op, _OPERATORS[op]))
            pos += len(op)
            continue
        word, quote_type, pos = _read_word(line, pos)
        tokens.append(Token(word, TokenType.WORD, quote_type))
    return tokens