"""Commands the shell runs itself, without starting a program."""

from __future__ import annotations

import contextlib
import os
import re
import sys
from typing import Optional, Sequence, TextIO

from minishpy.environment import Environment
from minishpy.parser import RedirType, SimpleCommand

BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "a": "\a",
    "v": "\v",
    "f": "\f",
    "\\": "\\",
}
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_NUMBER = re.compile(r"[+-]?[0-9]+\Z")


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with *status*."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: Optional[str]) -> bool:
    """Return True when *name* is a built-in command."""
    return name in BUILTINS


def _interpret_escapes(text: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), "\\" + m.group(1)), text)


def builtin_echo(args: Sequence[str], stdout: Optional[TextIO] = None) -> int:
    """Print the arguments; ``-n`` drops the newline, ``-e`` reads escapes."""
    stdout = stdout or sys.stdout
    newline = True
    escapes = False
    rest = list(args[1:])
    while rest and rest[0].startswith("-"):
        if rest[0] == "-n":
            newline = False
        elif rest[0] == "-e":
            escapes = True
        else:
            break
        rest.pop(0)
    words = (_interpret_escapes(w) if escapes else w for w in rest)
    stdout.write(" ".join(words))
    if newline:
        stdout.write("\n")
    return 0


def builtin_cd(
    args: Sequence[str],
    env: Environment,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """Change directory, updating OLDPWD and PWD."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    if len(args) > 2:
        stderr.write("minishell: cd: too many arguments\n")
        return 1
    try:
        current: Optional[str] = os.getcwd()
    except OSError:
        current = None
    if len(args) < 2:
        path = env.get("HOME")
        if path is None:
            stderr.write("minishell: cd: HOME not set\n")
            return 1
    elif args[1] == "-":
        path = env.get("OLDPWD")
        if path is None:
            stderr.write("minishell: cd: OLDPWD not set\n")
            return 1
        stdout.write(f"{path}\n")
    else:
        path = args[1]
    try:
        os.chdir(path)
    except OSError as exc:
        stderr.write(f"cd: {exc.strerror}\n")
        return 1
    if current is not None:
        env.set("OLDPWD", current)
    with contextlib.suppress(OSError):
        env.set("PWD", os.getcwd())
    return 0


def builtin_pwd(stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> int:
    """Print the working directory."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    try:
        cwd = os.getcwd()
    except OSError as exc:
        stderr.write(f"pwd: {exc.strerror}\n")
        return 1
    stdout.write(f"{cwd}\n")
    return 0


def builtin_export(
    args: Sequence[str],
    env: Environment,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """Set variables from ``NAME=VALUE`` or ``NAME``; list them with no arguments."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    if len(args) < 2:
        for key, value in env.items():
            stdout.write(f'declare -x {key}="{value}"\n')
        return 0
    status = 0
    for arg in args[1:]:
        key, _, value = arg.partition("=")
        if not _IDENTIFIER.match(key):
            stderr.write(f"minishell: export: `{arg}': not a valid identifier\n")
            status = 1
        else:
            env.set(key, value)
    return status


def builtin_unset(args: Sequence[str], env: Environment) -> int:
    """Remove each named variable."""
    for name in args[1:]:
        env.remove(name)
    return 0


def builtin_env(env: Environment, stdout: Optional[TextIO] = None) -> int:
    """Print every variable as ``KEY=VALUE``."""
    stdout = stdout or sys.stdout
    for key, value in env.items():
        stdout.write(f"{key}={value}\n")
    return 0


def builtin_exit(
    args: Sequence[str],
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """Raise ShellExit, or return 1 when given too many arguments."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    stdout.write("exit\n")
    if len(args) < 2:
        raise ShellExit(0)
    if len(args) > 2:
        stderr.write("minishell: exit: too many arguments\n")
        return 1
    if not _NUMBER.match(args[1]):
        stderr.write(f"minishell: exit: {args[1]}: numeric argument required\n")
        raise ShellExit(2)
    raise ShellExit(int(args[1]) & 0xFF)


def execute_builtin(
    cmd: SimpleCommand,
    env: Environment,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """Run a built-in command with its redirections applied."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    if not cmd.args:
        return 0
    with contextlib.ExitStack() as stack:
        out = stdout
        for redir in cmd.redirs:
            try:
                if redir.type is RedirType.OUT:
                    out = stack.enter_context(open(redir.file, "w"))
                elif redir.type is RedirType.APPEND:
                    out = stack.enter_context(open(redir.file, "a"))
                elif redir.type is RedirType.IN:
                    stack.enter_context(open(redir.file, "r"))
            except OSError as exc:
                stderr.write(f"{redir.file}: {exc.strerror}\n")
                return 1
        name, args = cmd.args[0], cmd.args
        if name == "echo":
            return builtin_echo(args, out)
        if name == "cd":
            return builtin_cd(args, env, out, stderr)
        if name == "pwd":
            return builtin_pwd(out, stderr)
        if name == "export":
            return builtin_export(args, env, out, stderr)
        if name == "unset":
            return builtin_unset(args, env)
        if name == "env":
            return builtin_env(env, out)
        if name == "exit":
            return builtin_exit(args, out, stderr)
    return 0