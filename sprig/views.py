"""
List, help and version views.

- render_list: application name/version, usage, global options and the
  commands grouped by namespace (global commands first, everything sorted).
- render_help: description, usage, arguments, options and the long help of one command.
- render_version: "name version".

Palette keys (override through __styles__ in __main__)
- program-name, version, usage-label, usage-section, section-label,
  namespace-label, command-name, description, argument-name, option-name,
  default, empty, panel-title

colorful=False drops every style; fancy=True wraps the view in a panel.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset, coalesce

GLOBAL_OPTIONS = (
    ("-h, --help", "display help for the given command, or this list"),
    ("-V, --version", "display the application version"),
)


def _palette(colorful):
    styles = defaultdict(str, {
        "program-name": "bold #FF4D94",
        "version": "bold #22C55E",
        "usage-label": "bold #00E6FF",
        "usage-section": "bold #36C5F0",
        "section-label": "bold #FFFFFF",
        "namespace-label": "bold #FFD600",
        "command-name": "bold #22C55E",
        "description": "#9CA3AF",
        "argument-name": "bold #FFD600",
        "option-name": "bold #00E6FF",
        "default": "italic #737373",
        "empty": "italic #737373",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _rows(rows, styler, name_style):
    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column()
    for name, description in rows:
        table.add_row(
            Text("  " + name, styler(name_style)),
            Text(description or "", styler("description")),
        )
    return table


def _emit(renders, title, styler, *, console, fancy):
    renderable = Group(*renders)
    if fancy:
        renderable = Panel(renderable, title=Text(title, styler("panel-title")), title_align="left")
    coalesce(console, Console()).print(renderable)


def render_version(application, /, *, console=Unset):
    styler = _palette(application.colorful)
    coalesce(console, Console()).print(Text.assemble(
        (application.name, styler("program-name")),
        " ",
        (application.version or "", styler("version")),
    ))


def render_list(application, /, *, console=Unset):
    styler = _palette(application.colorful)
    renders = []

    head = Text(application.name, styler("program-name"))
    if application.version:
        head.append(" ").append(application.version, styler("version"))
    renders.append(head)
    if application.description:
        renders.append(Text(application.description, styler("description")))

    renders.append(Text.assemble(
        "\n",
        ("usage", styler("usage-label")), ":\n  ",
        ("command [options] [arguments]", styler("usage-section")),
        "\n",
    ))

    renders.append(Text("options:", styler("section-label")))
    renders.append(_rows(GLOBAL_OPTIONS, styler, "option-name"))

    renders.append(Text("\navailable commands:", styler("section-label")))
    groups = application.commands.namespaces()
    if not groups:
        renders.append(Text("  no commands registered", styler("empty")))
    for namespace, specs in groups.items():
        if namespace is not None:
            renders.append(Text(" " + namespace, styler("namespace-label")))
        renders.append(_rows(((spec.name, spec.description) for spec in specs), styler, "command-name"))

    _emit(renders, f"[ {application.name.upper()} ]", styler, console=console, fancy=application.fancy)


def _usage(spec):
    parts = [spec.name]
    if spec.params:
        parts.append("[options]")
    for argument in spec.arguments:
        label = f"<{argument.name}>" + ("..." if argument.variadic else "")
        parts.append(f"[{label}]" if argument.optional else label)
    return " ".join(parts)


def _option_label(param):
    label = f"-{param.short}, --{param.long}" if param.short else f"    --{param.long}"
    match param.kind:
        case "scalar":
            label += f"={param.long.upper()}"
        case "multi":
            label += f"={param.long.upper()}..."
    return label


def _describe(descr, default, styler):
    text = Text(descr or "", styler("description"))
    if default not in (None, [], False):
        if text:
            text.append(" ")
        text.append(f"[default: {default!r}]", styler("default"))
    return text


def render_help(spec, /, *, application, console=Unset):
    styler = _palette(application.colorful)
    renders = []

    if spec.description:
        renders.append(Text.assemble(("description", styler("section-label")), ":\n  ", (spec.description, styler("description")), "\n"))

    renders.append(Text.assemble(
        ("usage", styler("usage-label")), ":\n  ",
        (_usage(spec), styler("usage-section")),
        "\n",
    ))

    renders.append(Text("arguments:", styler("section-label")))
    if spec.arguments:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for argument in spec.arguments:
            table.add_row(
                Text("  " + argument.name, styler("argument-name")),
                _describe(argument.descr, argument.default, styler),
            )
        renders.append(table)
    else:
        renders.append(Text("  this command has no arguments", styler("empty")))

    renders.append(Text("\noptions:", styler("section-label")))
    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column()
    for param in spec.params.values():
        table.add_row(
            Text("  " + _option_label(param), styler("option-name")),
            _describe(param.descr, param.default, styler),
        )
    table.add_row(Text("  -h, --help", styler("option-name")), Text("display this help", styler("description")))
    renders.append(table)

    if spec.help:
        renders.append(Text.assemble("\n", ("help", styler("section-label")), ":\n", (spec.help, styler("description"))))

    _emit(renders, f"[ {spec.name.upper()} HELP ]", styler, console=console, fancy=application.fancy)


__all__ = (
    "render_list",
    "render_help",
    "render_version",
)
