"""Build command trees from lexed tokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from minishpy.lexer import Token, TokenType


class RedirType(Enum):
    IN = "in"
    OUT = "out"
    HEREDOC = "heredoc"
    APPEND = "append"


_REDIRECTS = {
    TokenType.REDIRECT_IN: RedirType.IN,
    TokenType.REDIRECT_OUT: RedirType.OUT,
    TokenType.HEREDOC: RedirType.HEREDOC,
    TokenType.APPEND: RedirType.APPEND,
}


@dataclass
class Redirection:
    """A redirection; for a heredoc, *file* holds the delimiter."""

    type: RedirType
    file: str


@dataclass
class SimpleCommand:
    args: list[str] = field(default_factory=list)
    redirs: list[Redirection] = field(default_factory=list)


@dataclass
class PipeCommand:
    left: "Command"
    right: "Command"


Command = Union[SimpleCommand, PipeCommand]


def _parse_simple(tokens: Sequence[Token], pos: int) -> tuple[SimpleCommand, int]:
    """Collect words and redirections up to the next pipe."""
    cmd = SimpleCommand()
    while pos < len(tokens) and tokens[pos].type is not TokenType.PIPE:
        token = tokens[pos]
        if token.type is TokenType.WORD:
            cmd.args.append(token.value)
            pos += 1
        elif token.type in _REDIRECTS:
            pos += 1
            # An operator without a following word is dropped.
            if pos < len(tokens) and tokens[pos].type is TokenType.WORD:
                cmd.redirs.append(Redirection(_REDIRECTS[token.type], tokens[pos].value))
                pos += 1
        else:
            break
    return cmd, pos


def _parse_from(tokens: Sequence[Token], pos: int) -> Optional[Command]:
    if pos >= len(tokens):
        return None
    simple, pos = _parse_simple(tokens, pos)
    if pos < len(tokens) and tokens[pos].type is TokenType.PIPE:
        right = _parse_from(tokens, pos + 1)
        if right is None:
            return None
        return PipeCommand(simple, right)
    return simple


def parse(tokens: Sequence[Token]) -> Optional[Command]:
    """Parse *tokens* into a command tree.

    Pipelines nest to the right. Returns None for no tokens or for a
    pipe with nothing after it.
    """
    return _parse_from(tokens, 0)