"""
envbind - Environment Variables into Typed Config Objects

This package populates dataclasses and pydantic models from environment
variables. Fields opt in with an ``env`` binding; values are converted to the
field's declared type, and every required variable that is missing is
reported at once.

Key Features:
- Bindings of the form "NAME[,required][,expand]" with default and description tags
- ints, floats, bools, strings, durations and sequences of them
- numpy integer and float types with their bit widths enforced
- User types through an ``unmarshal_text`` method
- Nested configs with optional name prefixes
- Pluggable sources: process environment, dicts, functions, .env files
- Usage reports as plain or rich tables

Example Usage:
    from dataclasses import dataclass
    from envbind import Options, load, var

    @dataclass
    class Config:
        port: int = var("PORT,required", value=0)
        addr: str = var("ADDR,expand", value="localhost")

    cfg = Config()
    load(cfg, options=Options(prefix="APP_"))
"""

import logging

from .cache import VarCache
from .coercion import Coercer, TextUnmarshaler, coerce
from .durations import format_duration, parse_duration
from .errors import (
    EnvError,
    InvalidArgumentError,
    MalformedBindingError,
    NotSetError,
    ParseError,
    UnsupportedTypeError,
)
from .fields import model_var, var
from .loader import Loader, load
from .models import Options, Var
from .sources import OS, DotEnvSource, FuncSource, Map, MultiSource, Source
from .usage import RichUsage, TableUsage, UsageFormatter, usage

__version__ = "1.0.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "load",
    "usage",
    "Loader",
    "Options",
    "Var",
    "VarCache",
    "var",
    "model_var",
    "Source",
    "OS",
    "Map",
    "FuncSource",
    "MultiSource",
    "DotEnvSource",
    "Coercer",
    "TextUnmarshaler",
    "coerce",
    "parse_duration",
    "format_duration",
    "UsageFormatter",
    "TableUsage",
    "RichUsage",
    "EnvError",
    "InvalidArgumentError",
    "MalformedBindingError",
    "UnsupportedTypeError",
    "ParseError",
    "NotSetError",
]
