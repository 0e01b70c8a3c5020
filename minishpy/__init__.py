"""A small interactive shell with pipelines, redirections, heredocs and built-in commands."""

__version__ = "0.1.0"
__all__ = [
    "builtins",
    "environment",
    "executor",
    "expander",
    "lexer",
    "parser",
    "redirect",
    "shell",
]