# minishpy

A small interactive shell. It reads command lines, splits them into words
and operators, expands variables, and runs the result. It supports pipelines
and redirections, and it has a handful of commands built in.

## Installation

    pip install .

Install the test dependencies with:

    pip install ".[test]"

## Usage

Start the interactive shell:

    minishpy

The prompt is `minishell$ `. End input with Ctrl-D; the shell prints `exit`
and stops. Ctrl-C abandons the current line and shows a fresh prompt, and
Ctrl-\ is ignored. Lines that produce a command are kept in the session
history (and in readline's history when reading from the terminal).

### What the shell understands

- Words, and quoting with `'...'` and `"..."`. Quotes can be mixed inside
  one word and are removed from it. A line with a quote that is never
  closed is ignored.
- Variable expansion with `$NAME` and `$?`. `$?` is the exit status of the
  last command. Unset variables expand to nothing, and a `$` not followed
  by a name or `?` is kept as written. Nothing is expanded inside a word
  quoted only with single quotes.
- Words that expand to an empty string are dropped. There is no word
  splitting. A line that is empty after expansion does nothing and keeps
  the previous status.
- Pipelines: `cmd1 | cmd2 | cmd3`. The status of a pipeline is the status
  of its last command. A pipe with nothing after it makes the line do
  nothing.
- Redirections: `< file`, `> file`, `>> file`, and heredocs `<< DELIM`.
  When several redirect the same stream, the last one wins. A heredoc
  reads lines at the `> ` prompt until a line equal to the delimiter or
  end of input. A redirection operator without a following word is dropped.
- Built-in commands:
  - `echo` — prints its arguments; `-n` drops the trailing newline, `-e`
    interprets `\n`, `\t`, `\r`, `\b`, `\a`, `\v`, `\f` and `\\`.
  - `cd` — with no argument goes to `HOME`; `cd -` goes to `OLDPWD` and
    prints it. Updates `OLDPWD` and `PWD`.
  - `pwd` — prints the working directory.
  - `export` — `NAME=VALUE` or `NAME` (set to empty); with no arguments
    lists variables as `declare -x NAME="VALUE"`. Invalid names are
    reported and give status 1.
  - `unset` — removes the named variables.
  - `env` — prints every variable as `NAME=VALUE`.
  - `exit` — prints `exit` and ends the shell, with status 0, or the given
    number modulo 256; a non-numeric argument ends it with status 2, and
    more than one argument is an error with status 1.

A built-in run on its own runs inside the shell, so `cd`, `export` and
`unset` change the session. Inside a pipeline each built-in works on a
private copy of the environment, so its changes do not last.

External commands are looked up in the directories of `PATH` (empty
entries are skipped); a name containing `/` is used as a path. A command
that cannot be found exits with status 127. One that is found but cannot
be run, such as a directory or a file without execute permission, exits
with status 126. A redirection whose file cannot be opened gives status 1.

### Running a command with its output sent to a file

    minishpy-redirect [COMMAND [OUTFILE]]

With no arguments this runs `ls -l` and sends its output to `output.txt`.
The command is split on spaces (at most 19 words) and the file is created
or truncated with mode 0644. It prints what it is running and where the
output was saved.

## Library use

The modules can also be used on their own:

```python
from minishpy.environment import init_env
from minishpy.lexer import lex
from minishpy.expander import expand_tokens, compact_empty_tokens
from minishpy.parser import parse
from minishpy.executor import execute_command

env = init_env(["HOME=/tmp", "PATH=/usr/bin:/bin"])
tokens = compact_empty_tokens(expand_tokens(lex("echo $HOME | cat"), env, 0))
status = execute_command(parse(tokens), env)
```

- `minishpy.environment` — `Environment` (`get`, `set`, `remove`, `items`,
  `to_list`) and `init_env`, which takes `KEY=VALUE` strings or a mapping.
- `minishpy.lexer` — `lex`, returning `Token` objects with a `TokenType`
  and `QuoteType`; raises `LexError` on an unclosed quote.
- `minishpy.expander` — `expand_string`, `expand_tokens`,
  `compact_empty_tokens`.
- `minishpy.parser` — `parse`, building `SimpleCommand` and `PipeCommand`
  trees with `Redirection` entries of `RedirType`.
- `minishpy.builtins` — `is_builtin`, `execute_builtin` and one
  `builtin_*` function per command; these take optional output streams.
  `exit` raises `ShellExit` with the status.
- `minishpy.executor` — `execute_command`, `find_in_path` and
  `read_heredoc`, which collects lines from any reader function.
- `minishpy.shell` — `Shell`, with `run_line` to run one line and `loop`
  to start the interactive loop; `setup_signals`; `main`.
- `minishpy.redirect` — `execute_with_redirection(command, outfile)`.

## What it does not do

This is a small shell. It has no `;`, `&&` or `||`, no background jobs,
no globbing, no variable assignment other than `export`, and no script
files: it only reads lines interactively.