"""
Tag-styled terminal output.

Handlers write text such as "<info>built</info> <b>3</b> targets"; this module
turns the tags into rich styles and, through a rich console, into escape codes.

Tags (rich style definitions, replaceable through tags()):
    error     bold white on red
    info      bold blue
    comment   bold yellow
    question  black on cyan
    b         bold
    u         underline
    i         italic

- A style ends at its closing tag; tags nest.
- Unknown tags and stray closing tags are kept as literal text.
- render() returns the escaped string; write()/writeln() print it.
"""
import io
import re

from rich.console import Console
from rich.style import Style
from rich.text import Text

from .utils import Unset, coalesce

stdout = Console(highlight=False, soft_wrap=True)

_tags = {
    "error": Style.parse("bold white on red"),
    "info": Style.parse("bold blue"),
    "comment": Style.parse("bold yellow"),
    "question": Style.parse("black on cyan"),
    "b": Style(bold=True),
    "u": Style(underline=True),
    "i": Style(italic=True),
}

_MARKUP = re.compile(r"<(/?)([\w-]+)>")


def tags(mapping=Unset, /, **styles):
    """
    add or replace tags; values are rich style strings or Style objects.
    returns the resulting tag names.
    """
    for name, style in {**coalesce(mapping, {}), **styles}.items():
        if not re.fullmatch(r"[\w-]+", name):
            raise ValueError(f"invalid tag name {name!r}")
        _tags[name] = style if isinstance(style, Style) else Style.parse(style)
    return tuple(_tags)


def parse(markup, /):
    """
    build a rich Text from tag markup.
    """
    if not isinstance(markup, str):
        raise TypeError("parse() argument must be a string")

    text = Text()
    stack = []
    position = 0
    for match in _MARKUP.finditer(markup):
        text.append(markup[position:match.start()])
        position = match.end()
        closing, name = match.groups()

        if name not in _tags:
            text.append(match.group())
        elif not closing:
            stack.append((name, len(text)))
        elif any(open == name for open, _ in stack):
            while stack:
                open, start = stack.pop()
                if open == name:
                    text.stylize(_tags[name], start, len(text))
                    break
                # an inner tag left open ends with its parent
                text.stylize(_tags[open], start, len(text))
        else:
            text.append(match.group())
    text.append(markup[position:])

    # unclosed tags run to the end
    for name, start in stack:
        text.stylize(_tags[name], start, len(text))
    return text


def render(markup, /, *, colorful=True, color_system="standard"):
    """
    tag markup to a string with ANSI escape codes (plain text when colorful=False).
    """
    buffer = io.StringIO()
    target = Console(
        file=buffer,
        force_terminal=colorful,
        no_color=not colorful,
        color_system=color_system if colorful else None,
        highlight=False,
        soft_wrap=True,
        legacy_windows=False,
    )
    target.print(parse(markup), end="")
    return buffer.getvalue()


def write(markup, /, *, console=Unset):
    coalesce(console, stdout).print(parse(markup), end="")


def writeln(markup="", /, *, console=Unset):
    coalesce(console, stdout).print(parse(markup))


__all__ = (
    "tags",
    "parse",
    "render",
    "write",
    "writeln",
)
