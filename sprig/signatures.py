"""
Signature grammar compiler.

A signature declares a command in one line:

    "deploy:app {target : where to deploy} {files?*} {--f|force} {--env=production : stage}"

Grammar
- name: everything before the first '{' (letters, digits, '_', '-', and ':'
  namespace separators, e.g. "cache:clear").
- {arg}          required scalar argument
- {arg?}         optional argument (default None)
- {arg=default}  optional argument with a literal default
- {arg*}         variadic argument (binds every remaining token), must be last
- {--opt}        boolean option (False unless given)
- {--opt=}       option that requires a value when given
- {--opt=value}  option with a default value
- {--opt*}       multi-value option (always binds a list)
- {--s|opt}      option with a single-character alias
- {... : text}   description (split on the first ':')

Defaults of list-valued tokens are split on ','. Any violation raises
SignatureParseError at once; nothing is deferred to dispatch time.
"""
import logging
import re
from collections import namedtuple

from .arguments import ArgSpec, ParamSpec
from .faults import FaultCode, SignatureParseError
from .utils import Unset

logger = logging.getLogger(__name__)

Signature = namedtuple("Signature", ("name", "arguments", "params"))

RESERVED = frozenset({"list"})

_SKELETON = re.compile(r"\s*(?P<name>[^\s{}]*)\s*(?P<tokens>(?:\{[^{}]*\}\s*)*)")
_COMMAND = re.compile(r"[^\W\d_][\w-]*(?::[^\W_][\w-]*)*")
_TOKEN = re.compile(r"\{([^{}]*)\}")


def _fail(signature, message, code, hint):
    return SignatureParseError(message, signature=signature, title="bad signature", code=code, hint=hint)


def _strip_suffixes(head):
    """
    strip trailing '*' / '?' markers in any order: "files?*" -> ("files", True, True)
    """
    variadic = optional = False
    while head and head[-1] in "*?":
        if head[-1] == "*":
            variadic = True
        else:
            optional = True
        head = head[:-1].rstrip()
    return head, variadic, optional


def _parse_token(body, signature):
    head, _, descr = body.partition(":")
    head = head.strip()
    descr = descr.strip() or Unset

    if not head:
        raise _fail(signature, f"empty token '{{{body}}}' in signature {signature!r}", FaultCode.MALFORMED_TOKEN,
                    "every '{...}' must declare a name, e.g. {target} or {--force}")

    option = head.startswith("--")
    if option:
        head = head[2:].lstrip()

    default = Unset
    requires_value = False
    assigned = "=" in head
    if assigned:
        head, _, default = head.partition("=")
        default = default.strip()
        if default == "*":
            # "{--id=*}": multi-value option without a default
            head, default = head + "*", ""
        if not default:
            default = Unset
            requires_value = True

    head, variadic, optional = _strip_suffixes(head.strip())
    optional |= assigned

    if variadic and default is not Unset:
        default = [part.strip() for part in default.split(",")]

    try:
        if not option:
            return ArgSpec(
                head,
                kind="variadic" if variadic else "scalar",
                optional=optional,
                default=default,
                descr=descr,
            )

        names = [name.strip() for name in head.split("|")]
        if len(names) > 2 or not all(names):
            raise ValueError(f"option aliases must read 'short|long', got {head!r}")
        if len(names) == 1:
            short, long = Unset, names[0]
        else:
            left, right = names
            if len(left) == 1:
                short, long = left, right
            elif len(right) == 1:
                short, long = right, left
            else:
                raise ValueError(f"one side of {head!r} must be a single-character alias")

        if variadic:
            kind = "multi"
        elif assigned:
            kind = "scalar"
        else:
            kind = "boolean"

        return ParamSpec(
            long,
            short=short,
            kind=kind,
            optional=optional,
            requires_value=requires_value,
            default=default,
            descr=descr,
        )
    except (TypeError, ValueError) as error:
        raise _fail(signature, f"malformed token '{{{body}}}': {error}", FaultCode.MALFORMED_TOKEN,
                    "see the signature grammar: {arg}, {arg?}, {arg=default}, {arg*}, {--opt}, {--s|opt=}") from None


def parse_signature(signature, /):
    """
    compile a signature string into Signature(name, arguments, params).

    - arguments: tuple of ArgSpec in declaration order.
    - params: dict of ParamSpec keyed by long name, in declaration order.
    """
    if not isinstance(signature, str):
        raise TypeError("parse_signature() argument must be a string")

    if not (match := _SKELETON.fullmatch(signature)):
        raise _fail(signature, f"signature {signature!r} does not read 'name {{...}} {{...}}'",
                    FaultCode.MALFORMED_SIGNATURE, "braces cannot nest and every token must be closed")

    if not (name := match["name"]):
        raise _fail(signature, f"signature {signature!r} does not declare a command name",
                    FaultCode.INVALID_NAME, "start the signature with the command name, e.g. 'build {target}'")
    if not _COMMAND.fullmatch(name):
        raise _fail(signature, f"invalid command name {name!r}", FaultCode.INVALID_NAME,
                    "use letters, digits, '-' or '_', with ':' between namespace parts")
    if name in RESERVED:
        raise _fail(signature, f"command name {name!r} is reserved", FaultCode.RESERVED_NAME,
                    "'list' always renders the command listing")

    arguments = []
    params = {}
    seen = set()

    for body in _TOKEN.findall(match["tokens"]):
        spec = _parse_token(body, signature)

        if isinstance(spec, ArgSpec):
            if arguments and arguments[-1].variadic:
                raise _fail(signature, f"argument {spec.name!r} follows variadic argument {arguments[-1].name!r}",
                            FaultCode.MISPLACED_VARIADIC, "a variadic argument must be the last argument")
            keys = [("argument", spec.name)]
        else:
            keys = [("option", name) for name in spec.names]

        for key in keys:
            if key in seen:
                raise _fail(signature, f"duplicated {key[0]} {key[1]!r} in signature {signature!r}",
                            FaultCode.DUPLICATED_TOKEN, "every argument and option name must be unique")
            seen.add(key)

        if isinstance(spec, ArgSpec):
            arguments.append(spec)
        else:
            params[spec.long] = spec

    logger.debug("parsed signature %r: %d argument(s), %d option(s)", name, len(arguments), len(params))
    return Signature(name, tuple(arguments), params)


__all__ = (
    "Signature",
    "parse_signature",
    "RESERVED",
)
