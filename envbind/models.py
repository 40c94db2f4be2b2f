"""Loader options and resolved variable metadata."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .cache import VarCache


@dataclass(frozen=True)
class Var:
    """An environment variable bound to a config field.

    Holds no reference to the config instance it was resolved from; ``path``
    locates the field from the root of the config.
    """

    name: str
    type: Any
    desc: str = ""
    default: str = ""
    required: bool = False
    expand: bool = False
    has_default_tag: bool = False
    path: Tuple[str, ...] = ()


class Options(BaseModel):
    """Options for load and usage."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    prefix: str = Field("", description="Prepended to every variable name")
    slice_sep: str = Field(" ", min_length=1, description="Separator of sequence values")
    name_sep: str = Field("", description="Joins nested struct prefixes and variable names")
    strict: bool = Field(False, description="Require every variable without a default tag")
    usage_on_error: Optional[Any] = Field(
        None, description="Text stream receiving the usage table when variables are missing"
    )
    formatter: Optional[Any] = Field(None, description="Usage formatter for usage_on_error")
    cache: Optional[VarCache] = Field(None, description="Cache of resolved variables")
