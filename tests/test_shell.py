import os
import sys

import pytest

from minishpy.builtins import ShellExit
from minishpy.environment import init_env
from minishpy.shell import Shell


@pytest.fixture
def shell():
    return Shell(init_env(os.environ), reader=lambda prompt: "")


def _scripted(lines):
    items = iter(lines)

    def reader(prompt):
        try:
            return next(items)
        except StopIteration:
            raise EOFError from None

    return reader


def test_export_changes_environment(shell):
    assert shell.run_line("export FOO=bar") == 0
    assert shell.env.get("FOO") == "bar"


def test_empty_line_keeps_status(shell):
    shell.exit_status = 5
    assert shell.run_line("") == 5
    assert shell.history == []


def test_line_expanding_to_nothing_is_ignored(shell):
    shell.env.remove("SURELY_UNSET")
    shell.exit_status = 2
    assert shell.run_line("$SURELY_UNSET") == 2
    assert shell.history == []


def test_unclosed_quote_keeps_status(shell):
    shell.exit_status = 7
    assert shell.run_line("echo 'oops") == 7


def test_history_records_lines(shell):
    shell.run_line("export A=1")
    shell.run_line("export B=2")
    assert shell.history == ["export A=1", "export B=2"]


def test_status_is_expanded(shell, tmp_path):
    out = tmp_path / "status.txt"
    status = shell.run_line(f"'{sys.executable}' -c \"import sys; sys.exit(3)\"")
    assert status == 3
    shell.run_line(f"echo $? > '{out}'")
    assert out.read_text() == "3\n"


def test_variable_expansion_in_echo(shell, capsys):
    shell.run_line("export GREETING=hello")
    shell.run_line("echo $GREETING world")
    assert capsys.readouterr().out == "hello world\n"


def test_single_quotes_prevent_expansion(shell, capsys):
    shell.run_line("export GREETING=hello")
    shell.run_line("echo '$GREETING'")
    assert capsys.readouterr().out == "$GREETING\n"


def test_exit_raises(shell):
    with pytest.raises(ShellExit) as info:
        shell.run_line("exit 5")
    assert info.value.status == 5


def test_loop_returns_exit_status():
    shell = Shell(init_env(os.environ), reader=_scripted(["export A=1", "exit 7"]))
    assert shell.loop() == 7
    assert shell.env.get("A") == "1"


def test_loop_ends_on_eof(capsys):
    shell = Shell(init_env(os.environ), reader=_scripted([]))
    assert shell.loop() == 0
    assert capsys.readouterr().out == "exit\n"


def test_loop_passes_prompt():
    prompts = []

    def reader(prompt):
        prompts.append(prompt)
        raise EOFError

    status = Shell(init_env(os.environ), reader=reader).loop()
    assert status == 0
    assert prompts == ["minishell$ "]