"""Run one command with its standard output sent to a file."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Optional, Sequence

_MAX_ARGS = 19
DEFAULT_COMMAND = "ls -l"
DEFAULT_OUTFILE = "output.txt"


def execute_with_redirection(command: str, outfile: str) -> int:
    """Run *command*, split on spaces, with stdout written to *outfile*.

    The file is created or truncated with mode 0644. Returns the exit
    status of the command, or 1 when the file cannot be opened or the
    program cannot be started.
    """
    try:
        fd = os.open(outfile, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    except OSError as exc:
        sys.stderr.write(f"open: {exc.strerror}\n")
        return 1
    args = [word for word in command.split(" ") if word][:_MAX_ARGS]
    with os.fdopen(fd, "wb") as out:
        if not args:
            sys.stderr.write("execvp: Bad address\n")
            return 1
        sys.stdout.flush()
        try:
            completed = subprocess.run(args, stdout=out)
        except OSError as exc:
            sys.stderr.write(f"execvp: {exc.strerror}\n")
            return 1
    return completed.returncode if completed.returncode >= 0 else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a command into a file: ``[command [outfile]]``, defaulting to ``ls -l``."""
    args = list(sys.argv[1:] if argv is None else argv)
    command = args[0] if args else DEFAULT_COMMAND
    outfile = args[1] if len(args) > 1 else DEFAULT_OUTFILE
    print(f"Executing: {command} > {outfile}")
    execute_with_redirection(command, outfile)
    print(f"Output saved to {outfile}")
    return 0


if __name__ == "__main__":
    sys.exit(main())