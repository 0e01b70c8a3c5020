"""The interactive shell: read a line, expand, parse and run it."""

from __future__ import annotations

import os
import signal
import sys
from typing import Callable, List, Optional, Sequence

from minishpy.builtins import ShellExit
from minishpy.environment import Environment, init_env
from minishpy.executor import execute_command
from minishpy.expander import compact_empty_tokens, expand_tokens
from minishpy.lexer import LexError, lex
from minishpy.parser import parse

try:
    import readline
except ImportError:  # pragma: no cover - platform without readline
    readline = None  # type: ignore[assignment]

PROMPT = "minishell$ "


def setup_signals() -> None:
    """Let Ctrl-C interrupt the current line and ignore Ctrl-\\."""
    signal.signal(signal.SIGINT, signal.default_int_handler)
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)


class Shell:
    """A shell session holding its environment, last status and history."""

    def __init__(
        self,
        env: Optional[Environment] = None,
        reader: Optional[Callable[[str], str]] = None,
    ) -> None:
        self.env = env if env is not None else init_env(os.environ)
        self.reader = reader or input
        self.exit_status = 0
        self.history: List[str] = []

    def _remember(self, line: str) -> None:
        self.history.append(line)
        if readline is not None and self.reader is input:
            readline.add_history(line)

    def run_line(self, line: str) -> int:
        """Run one command line and return the resulting exit status.

        A line that cannot be split or that expands to nothing leaves the
        status unchanged. ``exit`` raises ShellExit.
        """
        try:
            tokens = lex(line)
        except LexError:
            return self.exit_status
        tokens = compact_empty_tokens(expand_tokens(tokens, self.env, self.exit_status))
        if not tokens:
            return self.exit_status
        if line:
            self._remember(line)
        cmd = parse(tokens)
        if cmd is not None:
            self.exit_status = execute_command(cmd, self.env)
        return self.exit_status

    def loop(self) -> int:
        """Read and run lines until end of input or ``exit``; return the status."""
        while True:
            try:
                line = self.reader(PROMPT)
            except EOFError:
                print("exit")
                return 0
            except KeyboardInterrupt:
                print()
                continue
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.status
            except KeyboardInterrupt:
                print()
                self.exit_status = 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start an interactive shell with the process environment."""
    shell = Shell(init_env(os.environ))
    setup_signals()
    return shell.loop()


if __name__ == "__main__":
    sys.exit(main())