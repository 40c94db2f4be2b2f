"""
Environment Variable Loader

This module walks a config instance, resolves every bound field against a
source and stores the converted values in place.

Loading happens in two passes:
1. Collect: fields are visited depth first in declaration order. Nested
   dataclasses and models are recursed into, bindings are parsed and
   validated, and defaults are resolved. Any malformed binding or
   unsupported type aborts before a single value is looked up.
2. Assign: every variable is looked up, optionally expanded, converted and
   assigned. The first conversion failure aborts; missing required variables
   are collected and reported together once all others have been assigned.

Example Usage:
    from dataclasses import dataclass
    from typing import List
    from envbind import Map, load, var

    @dataclass
    class Config:
        port: int = var("PORT,required", value=0)
        hosts: List[str] = var("HOSTS", default="a b", default_factory=list)

    cfg = Config()
    load(cfg, Map({"PORT": "8080"}))
"""

import dataclasses
import logging
from typing import Any, List, Optional, Tuple

from .coercion import Coercer, is_unmarshaler, type_name, unwrap_optional
from .errors import InvalidArgumentError, MalformedBindingError, NotSetError, ParseError
from .expansion import expand as expand_vars
from .fields import DEFAULT_TAG, DESC_TAG, ENV_TAG, describe, is_frozen, is_struct_type
from .models import Options, Var
from .sources import OS, Source

logger = logging.getLogger(__name__)

REQUIRED = "required"
EXPAND = "expand"


def check_target(cfg: Any) -> type:
    """Ensure cfg can be loaded into.

    Args:
        cfg: Load target.

    Returns:
        Class of cfg.

    Raises:
        InvalidArgumentError: If cfg is not a mutable dataclass or model instance.
    """
    if cfg is None or isinstance(cfg, type) or not is_struct_type(type(cfg)):
        raise InvalidArgumentError(
            f"env: cfg must be a dataclass or pydantic model instance, got {cfg!r}"
        )
    if is_frozen(type(cfg)):
        raise InvalidArgumentError(f"env: cfg must be mutable, {type(cfg).__name__} is frozen")
    return type(cfg)


def parse_binding(tag: str) -> Tuple[str, bool, bool]:
    """Parse an env tag of the form "NAME[,required][,expand]".

    Returns:
        Name, required flag, expand flag.

    Raises:
        MalformedBindingError: If the name is empty or a flag is unknown.
    """
    name, *flags = tag.split(",")
    if not name:
        raise MalformedBindingError("env: empty tag name is not allowed")

    required = expand = False
    for flag in flags:
        if flag == REQUIRED:
            required = True
        elif flag == EXPAND:
            expand = True
        else:
            raise MalformedBindingError(f"env: invalid tag option `{flag}`")
    return name, required, expand


class Loader:
    """Loads environment variables into config instances."""

    def __init__(self, source: Optional[Source] = None, options: Optional[Options] = None):
        """Initialize loader.

        Args:
            source: Source of environment variables. Defaults to the process environment.
            options: Loader options. Defaults to Options().
        """
        self.source = source if source is not None else OS
        self.options = options or Options()
        self.coercer = Coercer(self.options.slice_sep)

    def load(self, cfg: Any) -> List[Var]:
        """Load environment variables into cfg.

        Args:
            cfg: Dataclass or pydantic model instance, updated in place.

        Returns:
            Resolved variables, in declaration order.

        Raises:
            InvalidArgumentError: If cfg cannot be loaded into.
            MalformedBindingError: If a binding is invalid.
            UnsupportedTypeError: If a bound field has an unsupported type.
            ParseError: If a value cannot be converted.
            NotSetError: If required variables are missing.
        """
        cfg_type = check_target(cfg)
        variables = self.collect(cfg)
        if self.options.cache is not None:
            self.options.cache.put(self.cache_key(cfg_type), variables)

        logger.debug("Loading %d variables into %s", len(variables), cfg_type.__qualname__)

        notset = []
        for v in variables:
            value = self.lookup(v.name, v.expand)
            if value is None:
                if v.required:
                    notset.append(v.name)
                    continue
                if not v.has_default_tag:
                    # the current value is the default
                    continue
                value = v.default
            self._assign(cfg, v, value)

        if notset:
            logger.debug("Required variables not set: %s", ", ".join(notset))
            if self.options.usage_on_error is not None:
                from .usage import TableUsage

                formatter = self.options.formatter or TableUsage()
                formatter.render(variables, self.options.usage_on_error)
            raise NotSetError(notset)

        return variables

    def cache_key(self, cfg_type: type) -> Tuple[Any, ...]:
        """Get the cache key of cfg_type under the options of this loader.

        Names, required flags and formatted defaults depend on these options,
        so variables resolved under different options are cached apart.
        """
        o = self.options
        return (cfg_type, o.prefix, o.name_sep, o.slice_sep, o.strict)

    def collect(self, cfg: Any) -> List[Var]:
        """Resolve the variables bound to the fields of cfg without loading them."""
        check_target(cfg)
        prefix = self.options.prefix
        return [dataclasses.replace(v, name=prefix + v.name) for v in self._walk(cfg, ())]

    def lookup(self, name: str, expand: bool = False) -> Optional[str]:
        """Look up a variable, expanding $VAR references if asked to.

        Variables referenced from the value are looked up without prefix;
        unset references expand to the empty string.
        """
        value = self.source.lookup(name)
        if value is None or not expand:
            return value
        return expand_vars(value, lambda key: self.source.lookup(key) or "")

    def _walk(self, obj: Any, path: Tuple[str, ...]) -> List[Var]:
        variables: List[Var] = []

        for spec in describe(type(obj)):
            if not spec.settable:
                continue

            field_type = unwrap_optional(spec.annotation)
            tag = spec.tag(ENV_TAG)
            field_path = path + (spec.name,)

            if is_struct_type(field_type) and not is_unmarshaler(field_type):
                variables.extend(self._walk_nested(obj, spec.name, field_type, tag, field_path))
                continue

            if tag is None:
                continue

            name, required, expand = parse_binding(tag)
            default = spec.tag(DEFAULT_TAG)
            if default is not None and required:
                raise MalformedBindingError(
                    "env: `required` and `default` can't be used simultaneously"
                )
            self.coercer.check(spec.annotation)

            has_default_tag = default is not None
            if self.options.strict and not has_default_tag:
                required = True
            if not has_default_tag and not required:
                default = self.coercer.format(getattr(obj, spec.name))

            variables.append(
                Var(
                    name=name,
                    type=spec.annotation,
                    desc=spec.tag(DESC_TAG) or "",
                    default=default or "",
                    required=required,
                    expand=expand,
                    has_default_tag=has_default_tag,
                    path=field_path,
                )
            )

        return variables

    def _walk_nested(
        self,
        obj: Any,
        attr: str,
        field_type: type,
        tag: Optional[str],
        path: Tuple[str, ...],
    ) -> List[Var]:
        prefix = ""
        if tag:
            if "," in tag:
                raise MalformedBindingError(
                    f"env: nested struct `{attr}` takes a plain prefix, got `{tag}`"
                )
            prefix = tag + self.options.name_sep

        child = getattr(obj, attr)
        if child is None:
            try:
                child = field_type()
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    f"env: cannot create nested struct `{attr}` of type {field_type.__name__}"
                ) from e
            setattr(obj, attr, child)

        return [dataclasses.replace(v, name=prefix + v.name) for v in self._walk(child, path)]

    def _assign(self, cfg: Any, v: Var, value: str) -> None:
        target = cfg
        for attr in v.path[:-1]:
            target = getattr(target, attr)

        try:
            parsed = self.coercer.coerce(v.type, value, getattr(target, v.path[-1], None))
        except (ValueError, OverflowError) as e:
            target_type = unwrap_optional(v.type)
            if is_unmarshaler(target_type):
                action = "unmarshaling text"
            else:
                action = f"parsing {type_name(target_type)}"
            raise ParseError(v.name, v.path, f"{action}: {e}") from e

        setattr(target, v.path[-1], parsed)


def load(cfg: Any, source: Optional[Source] = None, options: Optional[Options] = None) -> List[Var]:
    """Load environment variables into cfg.

    This is a convenience function that creates a loader
    and loads the config in one step.

    Args:
        cfg: Dataclass or pydantic model instance, updated in place.
        source: Source of environment variables. Defaults to the process environment.
        options: Loader options.

    Returns:
        Resolved variables.
    """
    return Loader(source, options).load(cfg)
