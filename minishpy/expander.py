"""Variable expansion for lexed words."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Optional, Protocol

from minishpy.lexer import QuoteType, Token, TokenType

# After '$': '?', a name, any other single character, or end of text.
_DOLLAR = re.compile(r"\$(\?|[A-Za-z_][A-Za-z0-9_]*|.|$)", re.DOTALL)


class _Lookup(Protocol):
    def get(self, key: str) -> Optional[str]: ...


def _expand(text: str, env: _Lookup, exit_status: int) -> str:
    def substitute(match: re.Match[str]) -> str:
        what = match.group(1)
        if what == "?":
            return str(exit_status)
        if what and (what[0].isascii() and (what[0].isalpha() or what[0] == "_")):
            return env.get(what) or ""
        return "$" + what

    return _DOLLAR.sub(substitute, text)


def expand_string(
    text: Optional[str], env: _Lookup, exit_status: int, quote_type: QuoteType | int
) -> Optional[str]:
    """Expand ``$NAME`` and ``$?`` in *text* unless it was single-quoted.

    Unset variables expand to nothing; a ``$`` not followed by a name or
    ``?`` is kept as written.
    """
    if text is None:
        return None
    if quote_type == QuoteType.SINGLE:
        return text
    return _expand(text, env, exit_status)


def expand_tokens(tokens: list[Token], env: _Lookup, exit_status: int) -> list[Token]:
    """Return the tokens with every word expanded; operators are unchanged."""
    return [
        replace(token, value=expand_string(token.value, env, exit_status, token.quote_type))
        if token.type is TokenType.WORD
        else token
        for token in tokens
    ]


def compact_empty_tokens(tokens: list[Token]) -> list[Token]:
    """Return the tokens without words that expanded to the empty string."""
    return [t for t in tokens if not (t.type is TokenType.WORD and t.value == "")]