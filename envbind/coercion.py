"""
Type Coercion for envbind

This module converts raw environment variable strings into typed field values.
It knows nothing about where a string came from: callers hand it a target type
and a string and get back a value of that type (or an exception).

Supported Types (checked in this order, first match wins):
1. datetime.timedelta: duration strings such as "1s" or "2h45m"
2. Any class defining ``unmarshal_text(self, text)``: the extension point for
   user types. The class is instantiated without arguments and the method is
   called with the raw string.
3. Signed integers: int and its subclasses (IntEnum included), numpy.int8-64
4. Unsigned integers: numpy.uint8-64
5. Floats: float, numpy.float16-64
6. Booleans: bool, numpy.bool_
7. Strings: str and its subclasses (str-valued enums included)
8. Sequences of any type above: list[T] and tuple[T, ...]. The raw string is
   split on a separator and every piece is converted on its own.

Numpy types keep their bit width: an int8 field rejects "200" with an
OverflowError. Syntax problems raise ValueError.

Example Usage:
    from envbind.coercion import Coercer

    coercer = Coercer(slice_sep=",")
    coercer.coerce(list[int], "1,2,3")  # [1, 2, 3]
    coercer.coerce(numpy.uint8, "256")  # OverflowError
"""

import copy
import math
import re
import sys
import types
from datetime import timedelta
from enum import Enum
from typing import (
    Any,
    Callable,
    Optional,
    Protocol,
    Tuple,
    Union,
    get_args,
    get_origin,
    runtime_checkable,
)

import numpy as np

from .durations import format_duration, parse_duration
from .errors import UnsupportedTypeError

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
_INF = re.compile(r"[+-]?(inf|infinity)", re.IGNORECASE)

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

if sys.version_info >= (3, 10):
    _UNION_TYPES: Tuple[Any, ...] = (Union, types.UnionType)
else:
    _UNION_TYPES = (Union,)


@runtime_checkable
class TextUnmarshaler(Protocol):
    """A type that can parse itself from text.

    Implementations signal bad input by raising ValueError.
    """

    def unmarshal_text(self, text: str) -> None:
        ...


def _is_class(tp: Any) -> bool:
    # list[int] passes isinstance(tp, type) before Python 3.11
    return isinstance(tp, type) and get_origin(tp) is None


def is_unmarshaler(tp: Any) -> bool:
    """Check whether tp implements the text unmarshaling hook."""
    return _is_class(tp) and callable(getattr(tp, "unmarshal_text", None))


def unwrap_optional(tp: Any) -> Any:
    """Get T from Optional[T]; other types are returned unchanged."""
    if get_origin(tp) in _UNION_TYPES:
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def sequence_element(tp: Any) -> Optional[Any]:
    """Get the element type of list[T] or tuple[T, ...], or None."""
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is list and len(args) == 1:
        return args[0]
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    return None


def type_name(tp: Any) -> str:
    """Get a short human readable name for a type."""
    origin = get_origin(tp)
    if origin in _UNION_TYPES:
        return " | ".join(type_name(arg) for arg in get_args(tp))
    if origin is not None:
        args = ", ".join("..." if arg is Ellipsis else type_name(arg) for arg in get_args(tp))
        return f"{getattr(origin, '__name__', repr(origin))}[{args}]"
    if tp is type(None):
        return "None"
    if _is_class(tp):
        return tp.__name__
    return repr(tp)


def parse_int(text: str, tp: Any = int) -> Any:
    """Parse a base 10 signed integer, honoring the bit width of numpy types."""
    if not _SIGNED.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if issubclass(tp, np.integer):
        info = np.iinfo(tp)
        if not info.min <= value <= info.max:
            raise OverflowError(f"parsing {text!r}: value out of range")
    return tp(value)


def parse_uint(text: str, tp: Any = np.uint64) -> Any:
    """Parse a base 10 unsigned integer sized to tp."""
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if value > np.iinfo(tp).max:
        raise OverflowError(f"parsing {text!r}: value out of range")
    return tp(value)


def parse_float(text: str, tp: Any = float) -> Any:
    """Parse a decimal float sized to tp."""
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"parsing {text!r}: invalid syntax")
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"parsing {text!r}: invalid syntax") from None

    if math.isinf(value) and not _INF.fullmatch(text):
        raise OverflowError(f"parsing {text!r}: value out of range")

    if issubclass(tp, np.floating):
        with np.errstate(over="ignore"):
            result = tp(value)
        if np.isinf(result) and not math.isinf(value):
            raise OverflowError(f"parsing {text!r}: value out of range")
        return result
    return tp(value)


def parse_bool(text: str, tp: Any = bool) -> Any:
    """Parse 1, t, T, TRUE, true, True, 0, f, F, FALSE, false or False."""
    if text in _TRUE:
        value = True
    elif text in _FALSE:
        value = False
    else:
        raise ValueError(f"parsing {text!r}: invalid syntax")
    return value if tp is bool else tp(value)


def _unmarshal(tp: Any, text: str, current: Any = None) -> Any:
    if isinstance(current, tp):
        # leave the current value untouched until the text is accepted
        instance = copy.copy(current)
    else:
        try:
            instance = tp()
        except TypeError as e:
            raise ValueError(f"cannot create {type_name(tp)}: {e}") from e
    instance.unmarshal_text(text)
    return instance


def scalar_parser(tp: Any) -> Optional[Callable[[str], Any]]:
    """Get the parse function for a non-sequence type, or None."""
    if tp is timedelta:
        return parse_duration
    if is_unmarshaler(tp):
        return lambda text: _unmarshal(tp, text)
    if not _is_class(tp):
        return None
    if issubclass(tp, (bool, np.bool_)):
        return lambda text: parse_bool(text, tp)
    if issubclass(tp, (int, np.signedinteger)):
        return lambda text: parse_int(text, tp)
    if issubclass(tp, np.unsignedinteger):
        return lambda text: parse_uint(text, tp)
    if issubclass(tp, (float, np.floating)):
        return lambda text: parse_float(text, tp)
    if issubclass(tp, str):
        return tp
    return None


class Coercer:
    """Converts raw strings to typed values."""

    def __init__(self, slice_sep: str = " "):
        """Initialize coercer.

        Args:
            slice_sep: Separator used to split sequence values.
        """
        if not slice_sep:
            raise ValueError("slice separator must not be empty")
        self.slice_sep = slice_sep

    def check(self, tp: Any) -> None:
        """Ensure values of tp can be produced.

        Raises:
            UnsupportedTypeError: If tp is not supported.
        """
        tp = unwrap_optional(tp)
        if scalar_parser(tp) is not None:
            return
        element = sequence_element(tp)
        if element is not None and scalar_parser(unwrap_optional(element)) is not None:
            return
        raise UnsupportedTypeError(type_name(tp))

    def coerce(self, tp: Any, raw: str, current: Any = None) -> Any:
        """Convert raw to a value of type tp.

        Args:
            tp: Target type.
            raw: Raw string value.
            current: Current field value. Text unmarshalers decode into a
                copy of it; other types ignore it.

        Returns:
            Converted value.

        Raises:
            UnsupportedTypeError: If tp is not supported.
            ValueError: If raw has invalid syntax for tp.
            OverflowError: If raw is out of range for tp.
        """
        tp = unwrap_optional(tp)
        if is_unmarshaler(tp):
            return _unmarshal(tp, raw, current)
        parser = scalar_parser(tp)
        if parser is not None:
            return parser(raw)

        element = sequence_element(tp)
        if element is not None:
            parse_element = scalar_parser(unwrap_optional(element))
            if parse_element is not None:
                values = [parse_element(part) for part in raw.split(self.slice_sep)]
                return tuple(values) if get_origin(tp) is tuple else values

        raise UnsupportedTypeError(type_name(tp))

    def format(self, value: Any) -> str:
        """Format value in a form coerce accepts back."""
        if value is None:
            return ""
        if callable(getattr(value, "marshal_text", None)):
            return value.marshal_text()
        if isinstance(value, timedelta):
            return format_duration(value)
        if isinstance(value, Enum):
            return self.format(value.value)
        if isinstance(value, (bool, np.bool_)):
            return "true" if value else "false"
        if isinstance(value, str):
            return str.__str__(value)
        if isinstance(value, (list, tuple)):
            return self.slice_sep.join(self.format(item) for item in value)
        return str(value)


def coerce(tp: Any, raw: str, slice_sep: str = " ") -> Any:
    """Convert raw to a value of type tp.

    This is a convenience function that creates a coercer
    and converts a single value.
    """
    return Coercer(slice_sep).coerce(tp, raw)
