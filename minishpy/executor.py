"""Run parsed commands: built-ins inside the shell, the rest as child processes."""

from __future__ import annotations

import contextlib
import errno
import os
import stat
import subprocess
import sys
import tempfile
import threading
from typing import IO, Callable, List, Optional, Tuple, Union

from minishpy.builtins import ShellExit, execute_builtin, is_builtin
from minishpy.environment import Environment
from minishpy.parser import Command, PipeCommand, Redirection, RedirType, SimpleCommand

Reader = Callable[[], Optional[str]]
_Waiter = Callable[[], int]
_Stream = Union[None, int, IO[bytes]]


def _report(name: str, message: str) -> None:
    sys.stderr.write(f"minishell: {name}: {message}\n")


def _terminal_reader() -> Optional[str]:
    try:
        return input("> ")
    except EOFError:
        return None


def find_in_path(name: str, env: Environment) -> str:
    """Return the first executable ``DIR/name`` for DIR in the PATH variable.

    Raises FileNotFoundError when nothing is found (or PATH is unset or
    empty) and PermissionError when a match exists but is not executable.
    """
    search = env.get("PATH")
    if not search:
        raise FileNotFoundError(errno.ENOENT, "command not found", name)
    denied = False
    for directory in filter(None, search.split(":")):
        candidate = f"{directory}/{name}"
        try:
            info = os.stat(candidate)
        except OSError:
            continue
        if stat.S_ISDIR(info.st_mode):
            continue
        if os.access(candidate, os.X_OK):
            return candidate
        denied = True
    if denied:
        raise PermissionError(errno.EACCES, "Permission denied", name)
    raise FileNotFoundError(errno.ENOENT, "command not found", name)


def _check_path(path: str) -> str:
    """Validate a command given as a path before trying to run it."""
    try:
        info = os.stat(path)
    except FileNotFoundError:
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", path) from None
    except OSError:
        return path
    if stat.S_ISDIR(info.st_mode):
        raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
    if not os.access(path, os.X_OK):
        raise PermissionError(errno.EACCES, "Permission denied", path)
    return path


def _resolve(name: str, env: Environment) -> str:
    if "/" in name:
        return _check_path(name)
    return find_in_path(name, env)


def _lookup_status(exc: OSError) -> int:
    return 127 if isinstance(exc, FileNotFoundError) else 126


def _exec_failure(name: str, code: Optional[int]) -> Tuple[int, str]:
    """Map an error from starting a program to an exit status and message."""
    if code == errno.EACCES:
        return 126, "Permission denied"
    if code == errno.EISDIR:
        return 126, "Is a directory"
    if code == errno.ENOENT:
        return 127, "No such file or directory" if "/" in name else "command not found"
    return 126, os.strerror(code) if code is not None else "cannot execute"


def read_heredoc(delimiter: str, reader: Reader) -> str:
    """Collect lines from *reader* until *delimiter* or end of input.

    *reader* returns one line without its newline, or None at end of input.
    Each collected line is followed by a newline.
    """
    lines: List[str] = []
    while True:
        line = reader()
        if line is None or line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)


def _heredoc_file(delimiter: str) -> IO[bytes]:
    body = tempfile.TemporaryFile("w+b")
    body.write(read_heredoc(delimiter, _terminal_reader).encode())
    body.seek(0)
    return body


def _open_for_write(path: str, extra_flag: int) -> IO[bytes]:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | extra_flag, 0o644)
    return os.fdopen(fd, "wb")


def _open_redirections(
    redirs: List[Redirection],
    stack: contextlib.ExitStack,
    stdin: _Stream,
    stdout: _Stream,
) -> Tuple[_Stream, _Stream]:
    """Open every redirection in order; the last one for each stream wins."""
    for redir in redirs:
        try:
            if redir.type is RedirType.IN:
                stdin = stack.enter_context(open(redir.file, "rb"))
            elif redir.type is RedirType.OUT:
                stdout = stack.enter_context(_open_for_write(redir.file, os.O_TRUNC))
            elif redir.type is RedirType.APPEND:
                stdout = stack.enter_context(_open_for_write(redir.file, os.O_APPEND))
            elif redir.type is RedirType.HEREDOC:
                stdin = stack.enter_context(_heredoc_file(redir.file))
        except OSError as exc:
            sys.stderr.write(f"{redir.file}: {exc.strerror}\n")
            raise
    return stdin, stdout


def _exit_status(returncode: int) -> int:
    # A child killed by a signal did not exit normally.
    return returncode if returncode >= 0 else 1


def _launch_external(
    cmd: SimpleCommand, env: Environment, stdin: _Stream, stdout: _Stream
) -> _Waiter:
    name = cmd.args[0]
    try:
        executable = _resolve(name, env)
    except OSError as exc:
        _report(name, exc.strerror or "command not found")
        status = _lookup_status(exc)
        return lambda: status
    with contextlib.ExitStack() as stack:
        try:
            stdin, stdout = _open_redirections(cmd.redirs, stack, stdin, stdout)
        except OSError:
            return lambda: 1
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            process = subprocess.Popen(
                cmd.args,
                executable=executable,
                env=dict(env.items()),
                stdin=stdin,
                stdout=stdout,
            )
        except OSError as exc:
            status, message = _exec_failure(name, exc.errno)
            _report(name, message)
            return lambda: status
    return lambda: _exit_status(process.wait())


def _launch_builtin_stage(
    cmd: SimpleCommand, env: Environment, stdout_fd: Optional[int]
) -> _Waiter:
    """Run a built-in as one stage of a pipeline, on a private copy of *env*."""
    private_env = Environment(dict(env.items()))
    out = os.fdopen(os.dup(stdout_fd), "w") if stdout_fd is not None else None
    result: dict = {}

    def run() -> None:
        try:
            result["status"] = execute_builtin(cmd, private_env, out, None)
        except ShellExit as exc:
            result["status"] = exc.status
        except BrokenPipeError:
            result["status"] = 1
        finally:
            if out is not None:
                with contextlib.suppress(OSError):
                    out.close()

    worker = threading.Thread(target=run, daemon=True)
    worker.start()

    def wait() -> int:
        worker.join()
        return result.get("status", 1)

    return wait


def _start_stage(
    cmd: SimpleCommand,
    env: Environment,
    stdin_fd: Optional[int],
    stdout_fd: Optional[int],
) -> _Waiter:
    if not cmd.args or not cmd.args[0]:
        return lambda: 0
    if is_builtin(cmd.args[0]):
        return _launch_builtin_stage(cmd, env, stdout_fd)
    return _launch_external(cmd, env, stdin_fd, stdout_fd)


def _flatten(cmd: Command) -> List[SimpleCommand]:
    if isinstance(cmd, PipeCommand):
        return _flatten(cmd.left) + _flatten(cmd.right)
    return [cmd]


def _run_pipeline(stages: List[SimpleCommand], env: Environment) -> int:
    pipes = [os.pipe() for _ in stages[1:]]
    waiters: List[_Waiter] = []
    try:
        for index, stage in enumerate(stages):
            stdin_fd = pipes[index - 1][0] if index > 0 else None
            stdout_fd = pipes[index][1] if index < len(pipes) else None
            waiters.append(_start_stage(stage, env, stdin_fd, stdout_fd))
    finally:
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)
    statuses = [wait() for wait in waiters]
    return statuses[-1]


def execute_command(cmd: Optional[Command], env: Environment) -> int:
    """Run *cmd* and return its exit status.

    A built-in outside a pipeline runs in the shell itself and may change
    *env* or raise ShellExit. In a pipeline every stage runs separately and
    the status is that of the last stage.
    """
    if cmd is None:
        return 0
    if isinstance(cmd, PipeCommand):
        return _run_pipeline(_flatten(cmd), env)
    if not cmd.args or not cmd.args[0]:
        return 0
    if is_builtin(cmd.args[0]):
        return execute_builtin(cmd, env)
    return _launch_external(cmd, env, None, None)()