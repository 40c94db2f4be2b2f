"""Sources of environment variables.

A source maps a variable name to its string value. Loading only ever asks a
source for single keys, so any key/value store can be adapted by providing
a ``lookup`` method.

Example Usage:
    from envbind.sources import OS, Map, MultiSource

    source = MultiSource(OS, Map({"PORT": "8080"}))
    source.lookup("PORT")  # "8080", even if PORT is set in os.environ
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, Union, runtime_checkable

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


@runtime_checkable
class Source(Protocol):
    """Anything able to look up environment variables."""

    def lookup(self, key: str) -> Optional[str]:
        """Get the value of the variable named by key, or None if unset."""
        ...


class OSSource:
    """Source backed by the process environment."""

    def lookup(self, key: str) -> Optional[str]:
        return os.environ.get(key)

    def __repr__(self) -> str:
        return "OS"


OS = OSSource()


class Map(Dict[str, str]):
    """In-memory source, mostly useful in tests."""

    def lookup(self, key: str) -> Optional[str]:
        return self.get(key)


class FuncSource:
    """Adapter allowing a plain function to be used as a source."""

    def __init__(self, func: Callable[[str], Optional[str]]):
        self.func = func

    def lookup(self, key: str) -> Optional[str]:
        return self.func(key)


class MultiSource:
    """Union of several sources.

    When the same key is defined by more than one source, the value from the
    source registered last wins.
    """

    def __init__(self, *sources: Source):
        """Initialize multi source.

        Args:
            sources: Sources in increasing order of precedence.
        """
        self.sources = tuple(sources)

    def lookup(self, key: str) -> Optional[str]:
        for source in reversed(self.sources):
            value = source.lookup(key)
            if value is not None:
                return value
        return None

    def __repr__(self) -> str:
        return f"MultiSource({', '.join(repr(s) for s in self.sources)})"


class DotEnvSource:
    """Source reading a .env file without touching os.environ.

    The file is parsed once, on construction. Keys declared without a value
    are treated as unset.
    """

    def __init__(
        self,
        path: Union[str, Path] = ".env",
        interpolate: bool = True,
        encoding: Optional[str] = "utf-8",
    ):
        """Initialize dotenv source.

        Args:
            path: Path to the .env file.
            interpolate: Whether python-dotenv expands ${VAR} references in the file.
            encoding: File encoding.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Dotenv file not found: {self.path}")

        self.values: Dict[str, Optional[str]] = dict(
            dotenv_values(self.path, interpolate=interpolate, encoding=encoding)
        )
        logger.debug("Read %d variables from %s", len(self.values), self.path)

    def lookup(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def __repr__(self) -> str:
        return f"DotEnvSource({str(self.path)!r})"
