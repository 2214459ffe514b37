"""
Sprig application: command registration, lifecycle events and dispatch.

    app = Application("forge", "1.2.0")

    @app.command("build {target} {--f|fast}", description="build a target")
    def build(context):
        ...
        return 0

    @app.on("command.before")
    def audit(event):
        if event.command == "build" and not authorized():
            event.stop_propagation(2)

    sys.exit(app.run())

Dispatch (run)
1. no command, "list", -h/--help → command list; -V/--version → version line.
2. unknown command → "command.notFound" listeners decide the exit code; with
   no listeners a not-found warning is reported and 0 is returned.
3. "command.before", then the event named after the command (when it has
   listeners); a stopped event aborts the run with its exit code.
4. options are bound (long name, then short alias, then default); a missing
   required option or a bare --opt declared as --opt= is fatal.
5. arguments are bound in order; a variadic argument takes the rest.
6. -h/--help anywhere → help for the command, handler not called.
7. a required argument left empty is fatal.
8. the handler runs; its return value (None means 0) is the exit code and is
   reported through "command.after".

Fatal faults go through trigger(): with shell=True they are printed on stderr
and the process exits with status 1, with shell=False they are raised.
"""
import difflib
import importlib
import inspect
import logging
import os
import shlex
import sys

from rich.console import Console

from .argv import interpret
from .commands import Command, CommandRegistry, CommandSpec, InvocationContext, command as _command
from .events import AFTER, BEFORE, NOT_FOUND, EventBus
from .faults import (
    CommandNotFoundWarning,
    FaultCode,
    MissingOptionValueError,
    MissingRequiredArgumentError,
    MissingRequiredOptionError,
    trigger,
)
from .logger import setup_logging
from .process import Process
from .prompts import Prompt
from .utils import *
from .views import render_help, render_list, render_version

logger = logging.getLogger(__name__)

LIST = "list"
HELP = ("-h", "--help")
VERSION = ("-V", "--version")

_FALSY = frozenset({"", "0", "false", "no", "off"})


def _tokens(argv):
    if argv is Unset:
        return list(sys.argv[1:])
    if isinstance(argv, str):
        return shlex.split(argv)
    tokens = list(argv)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("run() argument must be a string or an iterable of strings")
    return tokens


class Application(metaclass=SpecType):
    """
    Owner of one command registry and one event bus.

    Parameters
    - name: Unset | str, shown in views and fault headers (defaults to the script name).
    - version: Unset | str.
    - description: Unset | str, shown under the name in the command list.
    - autoload: Unset | str | Iterable[str], module globs passed to include().
    - autorun: bool, call run() on sys.argv once construction finishes; in shell
      mode the process then exits with the returned code.
    - shell: bool, print faults and exit (True) or raise them (False).
    - colorful: bool, style views, prompts and faults.
    - fancy: bool, wrap views and faults in panels.
    - console: rich Console for views and prompts (stdout by default).
    - log_level: Unset | str | int, level of the "sprig" logger.
    """

    __introspectable__ = ("name", "version", "description", "shell", "colorful", "fancy")
    __displayable__ = ("name", "version", "commands")

    def __init__(
            self,
            name=Unset,
            version=Unset,
            /,
            *,
            description=Unset,
            autoload=Unset,
            autorun=False,
            shell=True,
            colorful=True,
            fancy=False,
            console=Unset,
            log_level=Unset,
    ):
        for field, value in (("name", name), ("version", version), ("description", description)):
            if not isinstance(value, str | Unset):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")

        self._name = coalesce(name, "").strip() or os.path.basename(sys.argv[0] if sys.argv else "") or "sprig"
        self._version = coalesce(version, "").strip() or None
        self._description = coalesce(description, "").strip() or None
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._console = coalesce(console, Console(highlight=False))
        self._commands = CommandRegistry()
        self._events = EventBus()
        self._fallback = Unset

        setup_logging(log_level)

        if autoload is not Unset:
            for pattern in [autoload] if isinstance(autoload, str) else autoload:
                self.include(pattern)

        if autorun:
            code = self.run()
            logger.debug("autorun of %r finished with %r", self._name, code)
            if self._shell:
                sys.exit(code)

    @property
    def commands(self):
        return self._commands

    @property
    def events(self):
        return self._events

    @property
    def console(self):
        return self._console

    # --- registration ---

    def register(self, source, /):
        """
        register a CommandSpec, Command class or instance, or an iterable of them.
        """
        return self._commands.register(source)

    def command(self, signature, handler=Unset, /, description=Unset, help=Unset):
        """
        register an inline command; without a handler, return a decorator.
        """
        if handler is not Unset:
            return self.register(_command(signature, handler, description=description, help=help))

        decorator = _command(signature, description=description, help=help)

        @rename("command")
        def wrapper(handler, /):
            return self.register(decorator(handler))

        return wrapper

    def include(self, source, /):
        """
        import every module matching a module glob and register the commands it defines.

        Registered
        - Command subclasses defined in the module (with a string signature).
        - CommandSpec and Command instances found in the module globals.
        """
        if not isinstance(source, str):
            raise TypeError("include() argument must be a string")

        registered = []
        for name in mglob(source):
            try:
                module = importlib.import_module(name)
            except ImportError:
                raise TypeError(f"unable to import module {name!r}") from None

            for _, object in inspect.getmembers(module):
                if isinstance(object, CommandSpec | Command):
                    registered.append(self.register(object))
                elif (
                    isinstance(object, type) and
                    issubclass(object, Command) and
                    object.__module__ == module.__name__ and
                    isinstance(object.signature, str)
                ):
                    registered.append(self.register(object))
            logger.debug("included %r", name)
        return registered

    # --- events ---

    def on(self, name, listener=Unset, /):
        return self._events.on(name, listener)

    def off(self, name, /):
        self._events.off(name)

    def emit(self, name, payload=Unset, /, **data):
        return self._events.emit(name, payload, **data)

    def has_listeners(self, name, /):
        return self._events.has_listeners(name)

    # --- faults ---

    def fallback(self, fallback, /):
        """
        install a one-time fault hook; it receives faults instead of trigger().
        """
        if not callable(fallback):
            raise TypeError(f"{type(self).__typename__} fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError(f"{type(self).__typename__} fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def trigger(self, fault, /, **options):
        """
        surface a fault with this application's shell, fancy and colorful settings;
        the fallback hook, when installed, receives it instead.
        """
        options |= {"application": self, "shell": self._shell, "fancy": self._fancy, "colorful": self._colorful}
        if self._fallback is Unset:
            trigger(fault, **options)
        else:
            self._fallback(fault.__replace__(**options))

    # --- collaborators ---

    def prompt(self, questions, /, **options):
        return Prompt(questions, **{"console": self._console, "colorful": self._colorful} | options).ask()

    def process(self, command, /, **options):
        return Process(command, **options)

    # --- dispatch ---

    def _bind_params(self, spec, options):
        params = {}
        for param in spec.params.values():
            value = Unset
            for key in param.names:
                if key in options:
                    value = options[key]
                    break

            match param.kind:
                case "boolean":
                    if isinstance(value, str):
                        value = value.strip().lower() not in _FALSY
                    elif isinstance(value, list):
                        value = bool(value)
                case "multi":
                    if value is True:
                        if param.requires_value:
                            return self._missing_value(spec, param)
                        value = Unset
                    elif isinstance(value, str):
                        value = [value]
                case "scalar":
                    if value is True:
                        if param.requires_value:
                            return self._missing_value(spec, param)
                        value = Unset

            value = coalesce(value, param.default)
            if param.required and (value is None or value == []):
                self.trigger(
                    MissingRequiredOptionError(f"option '--{param.long}' is required by command {spec.name!r}"),
                    title="missing option",
                    code=FaultCode.MISSING_OPTION,
                    hint=f"pass it as '--{param.long}=<value>' or see '{spec.name} --help'",
                    command=spec.name,
                    param=param,
                )
                return None
            params[param.long] = list(value) if param.kind == "multi" else value
        return params

    def _missing_value(self, spec, param):
        self.trigger(
            MissingOptionValueError(f"option '--{param.long}' of command {spec.name!r} requires a value"),
            title="missing option value",
            code=FaultCode.MISSING_OPTION_VALUE,
            hint=f"write '--{param.long}=<value>' or '--{param.long} <value>'",
            command=spec.name,
            param=param,
        )
        return None

    def _bind_arguments(self, spec, args):
        arguments = {}
        for index, argument in enumerate(spec.arguments):
            if argument.variadic:
                arguments[argument.name] = list(args[index:]) or list(argument.default)
                break
            arguments[argument.name] = args[index] if index < len(args) else argument.default
        return arguments

    def _check_arguments(self, spec, arguments):
        for index, argument in enumerate(spec.arguments, 1):
            value = arguments.get(argument.name)
            if argument.required and (value is None or value == []):
                self.trigger(
                    MissingRequiredArgumentError(
                        f"argument {argument.name!r} of command {spec.name!r} is required at the {ordinal(index)} position"
                    ),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint=f"usage: see '{spec.name} --help'",
                    command=spec.name,
                    argument=argument,
                )
                return False
        return True

    def _not_found(self, name):
        matches = difflib.get_close_matches(name, list(self._commands), n=3)
        self.trigger(
            CommandNotFoundWarning(f"command {name!r} is not defined"),
            title="command not found",
            code=FaultCode.UNKNOWN_COMMAND,
            hint=f"did you mean {' or '.join(map(repr, matches))}?" if matches else "run 'list' to see the available commands",
            command=name,
        )

    def run(self, argv=Unset, /):
        """
        dispatch one invocation; returns the exit code.

        argv: Unset (sys.argv[1:]), a command line string, or an iterable of tokens.
        """
        tokens = _tokens(argv)

        if not tokens or tokens[0] == LIST or tokens[0] in HELP:
            render_list(self, console=self._console)
            return 0
        if tokens[0] in VERSION:
            render_version(self, console=self._console)
            return 0

        name = tokens[0]
        spec = self._commands.get(name)
        interpretation = interpret(tokens[1:], flags=spec.flags if spec is not None else ())
        payload = {"command": name, "interpretation": interpretation, "argv": tuple(tokens)}

        if spec is None:
            logger.debug("command %r not found", name)
            if self._events.has_listeners(NOT_FOUND):
                return self._events.emit(NOT_FOUND, payload).exit_code
            self._not_found(name)
            return 0

        for event in (BEFORE, name):
            if event == name and not self._events.has_listeners(name):
                continue
            if (emitted := self._events.emit(event, payload)).propagation_stopped:
                logger.debug("%r stopped by a %r listener", name, event)
                return emitted.exit_code

        if (params := self._bind_params(spec, interpretation.options)) is None:
            return 1
        arguments = self._bind_arguments(spec, interpretation.args)

        if any(token in HELP for token in tokens):
            render_help(spec, application=self, console=self._console)
            return 0

        if not self._check_arguments(spec, arguments):
            return 1

        context = InvocationContext(name, arguments, params, tokens)
        logger.debug("running %r with %r", name, context)
        result = spec(context)
        code = 0 if result is None else result

        self._events.emit(AFTER, payload, context=context, result=code)
        return code


__all__ = (
    "Application",
    "LIST",
)
