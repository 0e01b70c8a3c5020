"""Shell environment: an ordered set of variables with string values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Environment:
    """Ordered mapping of variable names to values, as the shell sees them."""

    def __init__(self, variables: Mapping[str, str] | None = None) -> None:
        self._vars: dict[str, str] = dict(variables or {})

    def get(self, key: str) -> str | None:
        """Return the value of *key*, or None when it is not set."""
        return self._vars.get(key)

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value*; a new key goes to the end of the order."""
        self._vars[key] = value

    def remove(self, key: str) -> None:
        """Remove *key* if present; removing an unset key does nothing."""
        self._vars.pop(key, None)

    def items(self) -> list[tuple[str, str]]:
        """Return the (key, value) pairs in their order."""
        return list(self._vars.items())

    def to_list(self) -> list[str]:
        """Return the variables as ``KEY=VALUE`` strings for a child process."""
        return [f"{key}={value}" for key, value in self._vars.items()]

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"Environment({self._vars!r})"


def init_env(envp: Iterable[str] | Mapping[str, str]) -> Environment:
    """Build an environment from ``KEY=VALUE`` strings or a mapping.

    Strings without ``=`` are skipped; the value starts after the first
    ``=``. When a key appears twice, the first occurrence wins.
    """
    env = Environment()
    if isinstance(envp, Mapping):
        pairs: Iterable[tuple[str, str]] = envp.items()
    else:
        pairs = (
            tuple(entry.split("=", 1)) for entry in envp if "=" in entry
        )  # type: ignore[misc]
    for key, value in pairs:
        if key not in env:
            env.set(key, value)
    return env