"""Command-line argument list builder for invoked tools."""

import os
from pathlib import Path
from typing import Any, Iterable, Sequence


class Args(list):
    """
    Fluent builder for tool argument lists.

    Every element is stored as a string. Path sequences are joined with the
    platform's path separator.

    Example usage:
        args = (
            Args()
            .with_pair("-d", Path("out"))
            .with_if(verbose, "--verbose")
            .with_paths("--module-path", [Path("lib"), Path("mods")])
        )
    """

    def with_(self, argument: Any) -> "Args":
        """Add a single argument."""
        self.append(str(argument))
        return self

    def with_if(self, condition: bool, argument: Any) -> "Args":
        """Add a single argument only if condition holds."""
        return self.with_(argument) if condition else self

    def with_pair(self, key: Any, value: Any) -> "Args":
        """Add a key and its value as two arguments."""
        return self.with_(key).with_(value)

    def with_paths(self, key: Any, paths: Sequence[Path]) -> "Args":
        """Add a key and the given paths joined by the path separator."""
        return self.with_pair(key, os.pathsep.join(str(path) for path in paths))

    def with_each(self, arguments: Iterable[Any]) -> "Args":
        """Add every element as a separate argument."""
        for argument in arguments:
            self.with_(argument)
        return self
