"""
Sprig faults (errors and warnings) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing problem, grouped
  by the stage that raises them (signatures, dispatch, processes, warnings).
- CommandException / CommandWarning: base types carrying a message plus the
  options used to render it (application, title, code, hint, ...).
- trigger(): the one entry point that surfaces a fault, honoring shell/fancy/colorful.
- getdoc(): optional documentation lookup supplied by the host program.

Behavior
- shell=True: errors are printed to stderr through rich and the process exits
  with status 1; warnings are printed and execution continues.
- shell=False: errors are raised; warnings go through warnings.warn.
- Signature errors are developer mistakes and are always raised, never rendered.

Customization (all optional, read from __main__)
- __styles__: palette overrides ("prog-name", "code", "error-title", ...).
- __codes__: FaultCode -> label used instead of the numeric code.
- __docs__: FaultCode -> short documentation string.
- __prog__: program name shown in the header.
"""
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - signatures (101xx): raised while compiling a command signature.
    - dispatch (111xx): raised while resolving and binding an invocation.
    - processes (113xx): raised by the process facade.
    - warnings (121xx): reported, never fatal.

    normalize() lets the host remap a code to a friendlier label.
    """
    # --- signature errors (10xxx) ---
    MALFORMED_SIGNATURE         = 10101
    MALFORMED_TOKEN             = 10102
    INVALID_NAME                = 10103
    DUPLICATED_TOKEN            = 10104
    MISPLACED_VARIADIC          = 10105
    RESERVED_NAME               = 10106

    # --- dispatch errors (11xxx) ---
    MISSING_OPTION              = 11111
    MISSING_OPTION_VALUE        = 11112
    MISSING_ARGUMENT            = 11121

    # --- process errors (11xxx) ---
    PROCESS_TIMEOUT             = 11301

    # --- warnings (12xxx) ---
    UNKNOWN_COMMAND             = 12101

    def normalize(self):
        """
        return the host label for this code, or the numeric value as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    application = options.get("application")
    prog = getattr(main, "__prog__", getattr(application, "name", None) or "sprig")
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(code.normalize() if code else "?", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(f"{kind}-title")),
        " ]"
    )
    message = text(coalesce(fault.message, ""), styler(f"{kind}-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
    if code and (docs := getdoc(code)):
        renders.append(text(docs, styler("docs")))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class _Fault:
    """
    Shared body of errors and warnings: a message plus rendering options.
    """
    kind = Unset
    palette = {}

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, self.palette, self.kind)

    def __replace__(self, **overrides):
        return type(self)(self.message, **self.options | overrides)


class CommandException(_Fault, Exception):
    kind = "error"
    palette = {
        # header
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",

        # body
        "error-message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
        "docs": "#737373",
    }

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)


class SignatureParseError(CommandException):
    def __trigger__(self):
        raise self


class MissingRequiredOptionError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class MissingRequiredArgumentError(CommandException): ...
class ProcessTimedOutError(CommandException): ...


class CommandWarning(_Fault, Warning):
    kind = "warning"
    palette = {
        # header
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "warning-title": "bold #FFC2E0",

        # body
        "warning-message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
        "docs": "#737373",
    }

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
        else:
            warnings.warn(self, stacklevel=2)


class CommandNotFoundWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into the fault via __replace__(**options) first.

    typical options
    - application, shell, fancy, colorful, title, code, hint, and any context the
      renderer may show.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must provide __trigger__() and __replace__()")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    documentation for a fault code from __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "SignatureParseError",
    "MissingRequiredOptionError",
    "MissingOptionValueError",
    "MissingRequiredArgumentError",
    "ProcessTimedOutError",
    "CommandWarning",
    "CommandNotFoundWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
