"""Error types raised while loading environment variables."""

from typing import List, Optional, Sequence


class EnvError(Exception):
    """Base envbind error."""
    pass


class InvalidArgumentError(EnvError, TypeError):
    """The load target is not a mutable dataclass or model instance."""
    pass


class MalformedBindingError(EnvError):
    """A field's `env` annotation cannot be used."""
    pass


class UnsupportedTypeError(EnvError, TypeError):
    """A bound field has a type the coercion engine cannot produce."""

    def __init__(self, type_name: str):
        super().__init__(f"env: unsupported type `{type_name}`")
        self.type_name = type_name


class ParseError(EnvError, ValueError):
    """A value could not be converted to its field's type.

    The underlying ValueError or OverflowError is chained as __cause__.
    """

    def __init__(
        self,
        var_name: str,
        field_path: Sequence[str],
        message: str,
    ):
        self.var_name = var_name
        self.field_path = tuple(field_path)
        super().__init__(
            f"env: {var_name} ({'.'.join(self.field_path)}): {message}"
        )

    @property
    def cause(self) -> Optional[BaseException]:
        """Get the original conversion error."""
        return self.__cause__


class NotSetError(EnvError):
    """Required environment variables are not set."""

    def __init__(self, names: Sequence[str]):
        self.names: List[str] = list(names)
        if len(self.names) == 1:
            message = f"env: {self.names[0]} is required but not set"
        else:
            message = f"env: {' '.join(self.names)} are required but not set"
        super().__init__(message)
