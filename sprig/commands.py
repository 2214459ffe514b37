"""
Sprig commands: specs, invocation contexts, the Command base class and the registry.

Overview
- CommandSpec
  • A compiled signature bound to a handler. Calling a spec with an
    InvocationContext calls the handler.
  • Built at registration time: a malformed signature raises SignatureParseError
    right here, never at dispatch time.

- InvocationContext
  • What a handler receives: command name, bound arguments, bound params and
    the raw argv snapshot. Read-only.

- Command
  • Class-based form. Subclasses set `signature` (and optionally `description`
    and `help`) and implement handle(context). Output helpers (write, writeln,
    info, comment, error, question) go through sprig.style.

- command(signature, handler) / @command(signature)
  • Functional form returning a CommandSpec.

- CommandRegistry
  • Read-only Mapping of name -> CommandSpec. register() accepts a spec, any
    object exposing __command__(), a class (instantiated first) or an iterable
    of those. Registering an existing name replaces it (last wins).

Quick example
    >>> @command("greet {name} {--y|yell}", description="say hello")
    ... def greet(context):
    ...     message = f"hello {context.argument('name')}"
    ...     print(message.upper() if context.param("yell") else message)
    ...     return 0
"""
import inspect
import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from . import style
from .signatures import parse_signature
from .utils import *
from .utils import _copy

logger = logging.getLogger(__name__)


class CommandSpec(metaclass=SpecType):
    """
    Parsed command: name, signature, description, help, arguments, params, handler.

    Derived properties
    - namespace: the text before the first ':' of the name, or None.
    - flags: long and short names of boolean options; the argv interpreter
      never lets these consume the following token.
    """

    __introspectable__ = (
        "name",
        "signature",
        "description",
        "help",
        "arguments",
        "params",
    )

    def __init__(self, signature, handler, /, description=Unset, help=Unset):
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} handler must be callable")
        for field, value in (("description", description), ("help", help)):
            if not isinstance(value, str | Unset | None):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")

        self._name, self._arguments, self._params = parse_signature(signature)
        self._signature = signature.strip()
        self._handler = handler
        self._description = (coalesce(description) or inspect.getdoc(handler) or "").strip() or None
        self._help = (coalesce(help) or "").strip() or None

    @property
    def handler(self):
        return self._handler

    @property
    def namespace(self):
        namespace, separator, _ = self._name.partition(":")
        return namespace if separator else None

    @property
    def flags(self):
        return frozenset(
            name
            for param in self._params.values() if param.kind == "boolean"
            for name in param.names
        )

    def __call__(self, context, /):
        return self._handler(context)

    def __command__(self):
        return self


class InvocationContext(metaclass=SpecType):
    """
    Bound input of one dispatch.

    - command: resolved command name.
    - arguments: argument name -> value (variadic arguments hold lists).
    - params: option long name -> value.
    - argv: the raw tokens, command name included.
    """

    __introspectable__ = (
        "command",
        "arguments",
        "params",
        "argv",
    )

    def __init__(self, command, arguments, params, argv):
        self._command = command
        self._arguments = MappingProxyType(_copy(arguments))
        self._params = MappingProxyType(_copy(params))
        self._argv = tuple(argv)

    def argument(self, name, /):
        try:
            return _copy(self._arguments[name])
        except KeyError:
            raise KeyError(f"command {self._command!r} has no argument {name!r}") from None

    def param(self, name, /):
        try:
            return _copy(self._params[name])
        except KeyError:
            raise KeyError(f"command {self._command!r} has no option {name!r}") from None

    option = param


class Command:
    """
    Base class for class-based commands.

        class Deploy(Command):
            signature = "deploy {target} {--f|force}"
            description = "deploy a target"

            def handle(self, context):
                self.info(f"deploying {context.argument('target')}")
                return 0

    Registering the class instantiates it with no arguments.
    """
    signature = Unset
    description = Unset
    help = Unset

    console = Unset

    def handle(self, context, /):
        raise NotImplementedError(f"{type(self).__name__}.handle() is not implemented")

    def __command__(self):
        if not isinstance(self.signature, str):
            raise TypeError(f"command class {type(self).__name__!r} must define a string 'signature'")
        return CommandSpec(
            self.signature,
            self.handle,
            description=coalesce(self.description, inspect.getdoc(type(self)) if type(self).__doc__ else None),
            help=self.help,
        )

    def write(self, markup, /):
        style.write(markup, console=self.console)

    def writeln(self, markup="", /):
        style.writeln(markup, console=self.console)

    def info(self, markup, /):
        self.writeln(f"<info>{markup}</info>")

    def comment(self, markup, /):
        self.writeln(f"<comment>{markup}</comment>")

    def error(self, markup, /):
        self.writeln(f"<error>{markup}</error>")

    def question(self, markup, /):
        self.writeln(f"<question>{markup}</question>")


def command(signature, handler=Unset, /, description=Unset, help=Unset):
    """
    Build a CommandSpec from a signature and a handler.

    Forms
    - command("build {target}", handler) -> CommandSpec
    - @command("build {target}") on a function -> CommandSpec

    The handler's docstring is the description when none is given.
    """
    if handler is not Unset:
        return CommandSpec(signature, handler, description=description, help=help)

    # Parse now so a bad signature fails at the decorator line.
    parse_signature(signature)

    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return CommandSpec(signature, handler, description=description, help=help)

    return wrapper


def _normalize(source):
    if isinstance(source, type):
        source = source()
    if not hasattr(source, "__command__") or not callable(source.__command__):
        raise TypeError(f"cannot register {type(source).__name__!r} as a command")
    spec = source.__command__()
    if not isinstance(spec, CommandSpec):
        raise TypeError(f"{type(source).__name__}.__command__() must return a command-spec")
    return spec


class CommandRegistry(Mapping):
    """
    Name -> CommandSpec, in registration order (a replaced name keeps its slot).
    """

    def __init__(self):
        self._commands = {}

    def register(self, source, /):
        """
        register a command (or an iterable of commands, recursively).

        returns the registered CommandSpec, or a list of them for iterables.
        """
        if isinstance(source, Iterable) and not isinstance(source, str | type) and not hasattr(source, "__command__"):
            return [self.register(item) for item in source]

        spec = _normalize(source)
        if spec.name in self._commands:
            logger.debug("replacing command %r", spec.name)
        self._commands[spec.name] = spec
        return spec

    def namespaces(self):
        """
        namespace -> sorted specs; global commands (no namespace) come first under None.
        """
        groups = {}
        for spec in sorted(self._commands.values(), key=lambda x: (x.namespace is not None, x.namespace or "", x.name)):
            groups.setdefault(spec.namespace, []).append(spec)
        return groups

    def __getitem__(self, name):
        return self._commands[name]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return f"command-registry({list(self._commands)!r})"


__all__ = (
    "CommandSpec",
    "InvocationContext",
    "Command",
    "CommandRegistry",
    "command",
)
