"""
Sprig utilities (shared helpers for specs, commands and prompts)

Overview
- UnsetType / Unset
  • Sealed, falsy sentinel meaning "not provided", kept apart from None because
    None is a perfectly valid default for arguments and options.

- coalesce(value, default=None)
  • Materialize Unset into a concrete default; every other value (None, 0, "")
    passes through untouched.

- rename(callable, name) / @rename("name")
  • Give generated callables a readable __name__/__qualname__.

- mirror("attr")
  • Read-only property over self._attr that hands out container copies.

- ordinal(number)
  • "first", "second", ..., "11th", "22nd": positions in user-facing messages.

- SpecType
  • Metaclass shared by the spec-like classes (ArgSpec, ParamSpec, CommandSpec,
    InvocationContext, Question, ...). It derives a hyphenated __typename__,
    publishes every name in __introspectable__ through mirror(), and installs
    __repr__/__rich_repr__ built from the same names.

- mglob(pattern)
  • Expand "pkg.commands.*" / "pkg.**.cli" into importable module names; used
    by command discovery (Application.include).

Names outside __all__ are internal.
"""
import fnmatch
import functools
import importlib
import itertools
import pkgutil
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    - bool(Unset) is False, yet Unset is neither None nor 0.
    - repr(Unset) is "Unset".
    - UnsetType() always returns the same object and cannot be subclassed.
    - Usable in unions: isinstance(value, str | Unset).
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()
"""
Sentinel for "not provided"; see UnsetType.
"""


def coalesce(object, default=None, /):
    """
    Return object unless it is Unset, in which case return default.

    Falsy values are preserved:
    - coalesce(Unset, "x") -> "x"
    - coalesce(None, "x")  -> None
    - coalesce("", "x")    -> ""
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")

        def decorator(target):
            return rename(target, name)

        decorator.__name__ = decorator.__qualname__ = "rename"
        return decorator

    if len(parameters) != 2:
        raise TypeError(f"rename() takes 1 or 2 arguments ({len(parameters)} given)")

    target, name = parameters
    if not callable(target):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    try:
        target.__name__ = target.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError(f"cannot rename {target!r}") from None
    return target


def _copy(value):
    # strings are sequences too: keep them whole
    match value:
        case str() | bytes():
            return value
        case Mapping():
            return {key: _copy(item) for key, item in value.items()}
        case Set():
            return {_copy(item) for item in value}
        case Sequence():
            return [_copy(item) for item in value]
        case _:
            return value


def mirror(name, /):
    """
    Read-only property over self._{name}. Containers come back as fresh lists,
    dicts and sets, so the backing state cannot be reached through it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    attribute = "_" + name

    def getter(self):
        return _copy(getattr(self, attribute))

    return property(rename(getter, name))


@functools.cache
def ordinal(number, /):
    """
    Human-friendly ordinal for a 1-based position ("first" .. "tenth", then "11th", "21st", ...).
    """
    try:
        return (
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        )[number - 1]
    except IndexError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"
    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


class SpecType(type):
    """
    Metaclass for small, read-only value objects.

    Conventions
    - __typename__ is the class name split on capitals and hyphenated
      ("ParamSpec" -> "param-spec"); validation messages start with it.
    - Every name in __introspectable__ becomes a mirror() property over "_name".
    - __displayable__ (if set) narrows what __repr__/__rich_repr__ show.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        namespace = dict(namespace)
        namespace["__typename__"] = re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()
        for field in namespace.get("__introspectable__", ()):
            namespace[field] = mirror(field)

        if "__rich_repr__" not in namespace:
            def __rich_repr__(self):
                for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield field, getattr(self, field)
            namespace["__rich_repr__"] = __rich_repr__

        if "__repr__" not in namespace:
            def __repr__(self):
                fields = ", ".join(f"{field}={value!r}" for field, value in self.__rich_repr__())
                return f"{type(self).__typename__}({fields})"
            namespace["__repr__"] = __repr__

        return super().__new__(cls, name, bases, namespace, **options)


_IDENTIFIER = re.compile(r"(?!\d)\w+")


@functools.cache
def _match(pattern, name):
    """
    match dotted segments with fnmatch; '**' spans zero or more whole segments.
    """
    if not pattern:
        return not name
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match(rest, name[index:]) for index in range(len(name) + 1))
    return bool(name) and fnmatch.fnmatchcase(name[0], head) and _match(rest, name[1:])


def mglob(source, /):
    """
    expand a dotted module glob into sorted, fully-qualified module names.

    - segments use fnmatch wildcards (*, ?, [...], [!...]) and never span a dot;
      "**" spans any number of segments.
    - the pattern must start with at least one concrete package segment.
    - a pattern without wildcards is returned as-is: ["pkg.module"].
    - an unimportable prefix yields no matches.

    examples
    - "app.commands.*"     → direct children of app.commands
    - "app.**.cli"         → any cli module below app
    - "app.commands.[a-m]*"
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    if not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    pattern = tuple(source.split("."))
    if not any(set(segment) & set("*?[") for segment in pattern):
        return [source]

    prefix = list(itertools.takewhile(_IDENTIFIER.fullmatch, pattern))
    if not prefix:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(base := ".".join(prefix))
    except ImportError:
        return []

    candidates = [base]
    if hasattr(package, "__path__"):
        candidates += [module.name for module in pkgutil.walk_packages(package.__path__, base + ".")]

    return sorted({name for name in candidates if _match(pattern, tuple(name.split(".")))})


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "mglob",

    # Types
    "UnsetType",
    "SpecType",

    # Constants
    "Unset",
)
