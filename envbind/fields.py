"""
Field Descriptors for envbind

This module turns configuration classes into flat tables of field descriptors,
so the loader never has to care how a class declares its fields. Two kinds of
configuration classes are supported:

1. Dataclasses:
   Bindings live in the field metadata.

       @dataclass
       class Config:
           port: int = field(default=8080, metadata={"env": "PORT", "desc": "http port"})

2. Pydantic models:
   Bindings live in ``json_schema_extra``; the field description doubles as
   the variable description.

       class Config(BaseModel):
           port: int = Field(8080, json_schema_extra={"env": "PORT"}, description="http port")

The helpers ``var`` and ``model_var`` build such fields.

Descriptor tables are computed once per class.
"""

import dataclasses
import functools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, get_origin, get_type_hints

from pydantic import BaseModel, Field

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

ENV_TAG = "env"
DEFAULT_TAG = "default"
DESC_TAG = "desc"


@dataclass(frozen=True)
class FieldSpec:
    """Declaration-time information about one field."""

    name: str
    annotation: Any
    tags: Mapping[str, str]
    settable: bool = True

    def tag(self, key: str) -> Optional[str]:
        """Get a tag value, or None if the tag is absent."""
        return self.tags.get(key)


def is_struct_type(tp: Any) -> bool:
    """Check whether tp is a class the loader can walk."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_frozen(tp: type) -> bool:
    """Check whether instances of a struct type reject attribute assignment."""
    if issubclass(tp, BaseModel):
        return bool(tp.model_config.get("frozen"))
    params = getattr(tp, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def _string_tags(values: Mapping[str, Any]) -> Dict[str, str]:
    return {
        key: str(values[key])
        for key in (ENV_TAG, DEFAULT_TAG, DESC_TAG)
        if key in values and values[key] is not None
    }


def _dataclass_fields(tp: type) -> Tuple[FieldSpec, ...]:
    try:
        hints = get_type_hints(tp)
    except NameError as e:
        # postponed annotations naming classes local to a function
        raise InvalidArgumentError(
            f"env: cannot resolve the field annotations of {tp.__qualname__}: {e}"
        ) from e
    frozen = is_frozen(tp)
    return tuple(
        FieldSpec(
            name=f.name,
            annotation=hints.get(f.name, f.type),
            tags=_string_tags(f.metadata),
            settable=not frozen and not f.name.startswith("_"),
        )
        for f in dataclasses.fields(tp)
    )


def _model_fields(tp: type) -> Tuple[FieldSpec, ...]:
    frozen = is_frozen(tp)
    specs = []
    for name, info in tp.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        tags = _string_tags(extra)
        if info.description:
            tags[DESC_TAG] = info.description
        specs.append(
            FieldSpec(
                name=name,
                annotation=info.annotation,
                tags=tags,
                settable=not frozen and not info.frozen and not name.startswith("_"),
            )
        )
    return tuple(specs)


@functools.lru_cache(maxsize=None)
def describe(tp: type) -> Tuple[FieldSpec, ...]:
    """Get the field descriptors of a struct type in declaration order.

    Args:
        tp: Dataclass or pydantic model class.

    Returns:
        Field descriptors.

    Raises:
        TypeError: If tp is not a struct type.
        InvalidArgumentError: If the annotations of tp cannot be resolved.
    """
    if dataclasses.is_dataclass(tp):
        specs = _dataclass_fields(tp)
    elif isinstance(tp, type) and issubclass(tp, BaseModel):
        specs = _model_fields(tp)
    else:
        raise TypeError(f"not a dataclass or pydantic model: {tp!r}")
    logger.debug("Described %d fields of %s", len(specs), tp.__qualname__)
    return specs


def _binding_metadata(
    env: Optional[str],
    default: Optional[str],
    desc: Optional[str],
) -> Dict[str, str]:
    metadata = {}
    if env is not None:
        metadata[ENV_TAG] = env
    if default is not None:
        metadata[DEFAULT_TAG] = default
    if desc is not None:
        metadata[DESC_TAG] = desc
    return metadata


def var(
    env: Optional[str] = None,
    *,
    default: Optional[str] = None,
    desc: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field bound to an environment variable.

    Args:
        env: Binding, "NAME[,required][,expand]", or the group prefix of a nested struct.
        default: Default value as it would appear in the environment.
            It only applies when loading; the field itself still needs
            value or default_factory to be optional in the constructor.
        desc: Human readable description.
        kwargs: Passed on to dataclasses.field (value, default_factory, ...).

    Returns:
        Dataclass field.
    """
    if "value" in kwargs:
        kwargs["default"] = kwargs.pop("value")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata.update(_binding_metadata(env, default, desc))
    return dataclasses.field(metadata=metadata, **kwargs)


def model_var(
    env: Optional[str] = None,
    *,
    default: Optional[str] = None,
    desc: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """Declare a pydantic model field bound to an environment variable.

    Takes the same arguments as var; kwargs go to pydantic.Field. As with
    var, default is the string applied when the variable is unset at load
    time, not the pydantic default: pass value (or default_factory) as well,
    otherwise the field is required by the model constructor.

        class Config(BaseModel):
            ports: List[int] = model_var("PORTS", default="80 443", default_factory=list)
    """
    if "value" in kwargs:
        kwargs["default"] = kwargs.pop("value")
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra.update(_binding_metadata(env, default, None))
    if desc is not None:
        kwargs.setdefault("description", desc)
    return Field(json_schema_extra=extra, **kwargs)
