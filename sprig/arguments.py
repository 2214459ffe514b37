r"""
Sprig argument specifications.

Overview
- ArgSpec: a positional argument declared in a command signature.
  • kind "scalar" binds one token, kind "variadic" binds every remaining token.
- ParamSpec: a named option declared in a command signature.
  • kind "boolean" (presence switch), "scalar" (one value) or "multi" (list of values).
  • long name is mandatory, the short alias is a single character.

Both are immutable once built; every field is a read-only property generated
by SpecType from __introspectable__. They are normally produced by
sprig.signatures.parse_signature, but can be built by hand:

    >>> ArgSpec("target", descr="what to build")
    arg-spec(name='target', kind='scalar', optional=False, default=None, descr='what to build')
    >>> ParamSpec("fast", short="f")
    param-spec(long='fast', short='f', kind='boolean', ...)

Validation highlights
- Names match r"[^\W\d][\w-]*" (letters first, then letters, digits, '_' or '-').
- Short aliases are exactly one letter or digit.
- Boolean options are always optional and default to False.
- Variadic arguments and multi-value options default to an empty list and
  store list defaults.
- descr strings are trimmed; empty descriptions become None.
"""
import re

from .utils import *

_NAME = re.compile(r"[^\W\d][\w-]*")
_SHORT = re.compile(r"[^\W_]")

ARGUMENT_KINDS = ("scalar", "variadic")
PARAM_KINDS = ("boolean", "scalar", "multi")


def _sanitize_descr(cls, metadata, /):
    if not isinstance(descr := metadata["descr"], str | Unset | None):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = (descr.strip() or None) if isinstance(descr, str) else None


def _sanitize_name(cls, field, metadata, /):
    if not isinstance(name := metadata[field], str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    elif not _NAME.fullmatch(name):
        raise ValueError(f"{cls.__typename__} {field!r} must start with a letter and contain only letters, digits, '_' or '-'")
    metadata[field] = name


def _sanitize_listing(cls, metadata, /):
    """
    list-valued kinds keep list defaults; a scalar default becomes a one-item list.
    """
    default = metadata["default"]
    if default is Unset or default is None:
        metadata["default"] = []
    elif isinstance(default, str):
        metadata["default"] = [default]
    else:
        try:
            metadata["default"] = list(default)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'default' must be a string or an iterable of strings") from None


class ArgSpec(metaclass=SpecType):
    """
    Positional argument of a command.

    Binding order follows declaration order; a variadic argument swallows the
    rest of the positional tokens and therefore has to be the last one.
    """

    __introspectable__ = (
        "name",
        "kind",
        "optional",
        "default",
        "descr",
    )

    def __init__(self, name, /, kind="scalar", optional=False, default=Unset, descr=Unset):
        metadata = {
            "name": name,
            "kind": kind,
            "optional": bool(optional),
            "default": default,
            "descr": descr,
        }
        _sanitize_name(type(self), "name", metadata)
        _sanitize_descr(type(self), metadata)

        if kind not in ARGUMENT_KINDS:
            raise ValueError(f"{type(self).__typename__} 'kind' must be one of {', '.join(map(repr, ARGUMENT_KINDS))}")

        if kind == "variadic":
            _sanitize_listing(type(self), metadata)
        else:
            metadata["default"] = coalesce(default)

        # A declared default makes the argument optional.
        metadata["optional"] |= default is not Unset

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def variadic(self):
        return self._kind == "variadic"

    @property
    def required(self):
        return not self._optional

    def __eq__(self, other):
        if not isinstance(other, ArgSpec):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    __hash__ = None


class ParamSpec(metaclass=SpecType):
    """
    Named option of a command.

    Parameters
    - long: str, the option name used after "--".
    - short: Unset | str, single-character alias used after "-".
    - kind: "boolean" | "scalar" | "multi".
    - optional: bool; booleans are always optional.
    - requires_value: bool; the option was declared as "--name=" and must be given a value.
    - default: any; booleans default to False, multi-value options to [].
    - descr: Unset | str.
    """

    __introspectable__ = (
        "long",
        "short",
        "kind",
        "optional",
        "requires_value",
        "default",
        "descr",
    )

    def __init__(self, long, /, short=Unset, kind="boolean", optional=False, requires_value=False, default=Unset, descr=Unset):
        metadata = {
            "long": long,
            "short": short,
            "kind": kind,
            "optional": bool(optional),
            "requires_value": bool(requires_value),
            "default": default,
            "descr": descr,
        }
        _sanitize_name(type(self), "long", metadata)
        _sanitize_descr(type(self), metadata)

        if short is not Unset and short is not None:
            if not isinstance(short, str):
                raise TypeError(f"{type(self).__typename__} 'short' must be a string")
            elif not _SHORT.fullmatch(short := short.strip()):
                raise ValueError(f"{type(self).__typename__} 'short' must be a single letter or digit")
            metadata["short"] = short
        else:
            metadata["short"] = None

        if kind not in PARAM_KINDS:
            raise ValueError(f"{type(self).__typename__} 'kind' must be one of {', '.join(map(repr, PARAM_KINDS))}")

        match kind:
            case "boolean":
                if requires_value:
                    raise ValueError(f"{type(self).__typename__} boolean options cannot require a value")
                metadata["optional"] = True
                metadata["default"] = bool(coalesce(default, False))
            case "multi":
                _sanitize_listing(type(self), metadata)
            case _:
                metadata["default"] = coalesce(default)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def names(self):
        """
        every key this option can be found under in an interpretation (long first).
        """
        return (self._long,) if self._short is None else (self._long, self._short)

    @property
    def required(self):
        return not self._optional

    def __eq__(self, other):
        if not isinstance(other, ParamSpec):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    __hash__ = None


__all__ = (
    "ArgSpec",
    "ParamSpec",
    "ARGUMENT_KINDS",
    "PARAM_KINDS",
)
