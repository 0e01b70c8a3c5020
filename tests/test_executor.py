import os
import sys
from unittest import mock

import pytest

from minishpy.builtins import ShellExit
from minishpy.environment import Environment, init_env
from minishpy.executor import execute_command, find_in_path, read_heredoc
from minishpy.parser import PipeCommand, Redirection, RedirType, SimpleCommand

PY = sys.executable


@pytest.fixture
def env():
    return init_env(os.environ)


def _py(code, redirs=None):
    return SimpleCommand([PY, "-c", code], list(redirs or []))


def _reader(lines):
    items = iter(lines)
    return lambda: next(items, None)


def test_find_in_path_returns_executable(tmp_path):
    tool = tmp_path / "tool"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    env = Environment({"PATH": f"::{tmp_path}"})
    assert find_in_path("tool", env) == f"{tmp_path}/tool"


def test_find_in_path_not_executable(tmp_path):
    tool = tmp_path / "tool"
    tool.write_text("data")
    tool.chmod(0o644)
    with pytest.raises(PermissionError):
        find_in_path("tool", Environment({"PATH": str(tmp_path)}))


def test_find_in_path_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_in_path("nothing-here", Environment({"PATH": str(tmp_path)}))


def test_find_in_path_without_path_variable():
    with pytest.raises(FileNotFoundError):
        find_in_path("ls", Environment())


def test_find_in_path_skips_directories(tmp_path):
    (tmp_path / "sub").mkdir()
    with pytest.raises(FileNotFoundError):
        find_in_path("sub", Environment({"PATH": str(tmp_path)}))


def test_read_heredoc_stops_at_delimiter():
    assert read_heredoc("EOF", _reader(["a", "b", "EOF", "c"])) == "a\nb\n"


def test_read_heredoc_stops_at_end_of_input():
    assert read_heredoc("EOF", _reader(["only"])) == "only\n"


def test_read_heredoc_empty():
    assert read_heredoc("EOF", _reader(["EOF"])) == ""


def test_exit_status_of_child(env):
    assert execute_command(_py("import sys; sys.exit(3)"), env) == 3


def test_none_command_is_success(env):
    assert execute_command(None, env) == 0


def test_empty_args_is_success(env):
    assert execute_command(SimpleCommand([""]), env) == 0


def test_missing_path(env, tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert execute_command(SimpleCommand([missing]), env) == 127
    assert capsys.readouterr().err == f"minishell: {missing}: No such file or directory\n"


def test_directory_path(env, tmp_path, capsys):
    assert execute_command(SimpleCommand([str(tmp_path)]), env) == 126
    assert "Is a directory" in capsys.readouterr().err


def test_non_executable_path(env, tmp_path, capsys):
    script = tmp_path / "script"
    script.write_text("echo hi\n")
    script.chmod(0o644)
    assert execute_command(SimpleCommand([str(script)]), env) == 126
    assert "Permission denied" in capsys.readouterr().err


def test_command_not_found(tmp_path, capsys):
    env = Environment({"PATH": str(tmp_path)})
    assert execute_command(SimpleCommand(["no-such-tool"]), env) == 127
    assert capsys.readouterr().err == "minishell: no-such-tool: command not found\n"


def test_output_redirection(env, tmp_path):
    out = tmp_path / "out.txt"
    cmd = _py("print('hello')", [Redirection(RedirType.OUT, str(out))])
    assert execute_command(cmd, env) == 0
    assert out.read_text() == "hello\n"


def test_append_redirection(env, tmp_path):
    out = tmp_path / "out.txt"
    cmd = _py("print('x')", [Redirection(RedirType.APPEND, str(out))])
    execute_command(cmd, env)
    execute_command(cmd, env)
    assert out.read_text() == "x\nx\n"


def test_input_redirection(env, tmp_path):
    src = tmp_path / "in.txt"
    src.write_text("abc")
    out = tmp_path / "out.txt"
    cmd = _py(
        "import sys; sys.stdout.write(sys.stdin.read().upper())",
        [Redirection(RedirType.IN, str(src)), Redirection(RedirType.OUT, str(out))],
    )
    assert execute_command(cmd, env) == 0
    assert out.read_text() == "ABC"


def test_missing_input_file(env, tmp_path, capsys):
    missing = str(tmp_path / "missing.txt")
    cmd = _py("pass", [Redirection(RedirType.IN, missing)])
    assert execute_command(cmd, env) == 1
    assert missing in capsys.readouterr().err


def test_heredoc_feeds_stdin(env, tmp_path):
    out = tmp_path / "out.txt"
    cmd = _py(
        "import sys; sys.stdout.write(sys.stdin.read())",
        [Redirection(RedirType.HEREDOC, "EOF"), Redirection(RedirType.OUT, str(out))],
    )
    with mock.patch("builtins.input", side_effect=["hello", "EOF"]):
        assert execute_command(cmd, env) == 0
    assert out.read_text() == "hello\n"


def test_pipeline_passes_data(env, tmp_path):
    out = tmp_path / "out.txt"
    cmd = PipeCommand(
        _py("print('hi')"),
        _py(
            "import sys; sys.stdout.write(sys.stdin.read().upper())",
            [Redirection(RedirType.OUT, str(out))],
        ),
    )
    assert execute_command(cmd, env) == 0
    assert out.read_text() == "HI\n"


def test_pipeline_status_is_last(env):
    failing = _py("import sys; sys.exit(4)")
    ok = _py("pass")
    assert execute_command(PipeCommand(ok, failing), env) == 4
    assert execute_command(PipeCommand(failing, ok), env) == 0


def test_builtin_in_pipeline(env, tmp_path):
    out = tmp_path / "out.txt"
    cmd = PipeCommand(
        SimpleCommand(["echo", "hello"]),
        _py(
            "import sys; sys.stdout.write(sys.stdin.read().upper())",
            [Redirection(RedirType.OUT, str(out))],
        ),
    )
    assert execute_command(cmd, env) == 0
    assert out.read_text() == "HELLO\n"


def test_builtin_in_pipeline_does_not_change_env(env):
    cmd = PipeCommand(SimpleCommand(["export", "PIPED_VAR=1"]), _py("pass"))
    assert execute_command(cmd, env) == 0
    assert env.get("PIPED_VAR") is None


def test_builtin_alone_changes_env(env):
    assert execute_command(SimpleCommand(["export", "SOLO_VAR=yes"]), env) == 0
    assert env.get("SOLO_VAR") == "yes"


def test_exit_alone_raises(env):
    with pytest.raises(ShellExit) as info:
        execute_command(SimpleCommand(["exit", "3"]), env)
    assert info.value.status == 3


def test_exit_in_pipeline_gives_status(env):
    cmd = PipeCommand(_py("pass"), SimpleCommand(["exit", "3"]))
    assert execute_command(cmd, env) == 3


def test_child_sees_environment(tmp_path):
    out = tmp_path / "out.txt"
    env = init_env(os.environ)
    env.set("CHILD_SEES", "value")
    cmd = _py(
        "import os; print(os.environ.get('CHILD_SEES'))",
        [Redirection(RedirType.OUT, str(out))],
    )
    execute_command(cmd, env)
    assert out.read_text() == "value\n"