"""
Sprout help rendering (rich).

- render_global_help(commands, brand, version, options)
    header, title (`brand vX`), USAGE, COMMANDS, FLAGS.
- render_command_help(command, brand, options, path=None)
    description, ALIASES, USAGE, ARGUMENTS, FLAGS, SUBCOMMANDS.

Both return a rich Group; callers print it to whichever console they own.
Palette entries can be overridden through __styles__ in __main__.
"""
from collections import defaultdict, namedtuple

from rich.box import ROUNDED
from rich.console import Group
from rich.table import Table
from rich.text import Text

from .utils import Unset

HelpOptions = namedtuple(
    "HelpOptions",
    ("header", "show_aliases", "show_hidden", "sort_commands"),
    defaults=(None, True, False, True),
)


def _styles():
    return defaultdict(str, {
        "program-name": "bold #FF4D94",
        "program-version": "#9CA3AF",
        "header": "bold #E6E6F0",
        "section-label": "bold #00E6FF",
        "usage": "#E5E7EB",
        "description": "#D1D5DB",
        "command-name": "bold #36C5F0",
        "flag-name": "bold #A78BFA",
        "argument-name": "bold #22C55E",
        "annotation": "#9CA3AF",
        "table-border": "#4B5563",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _table(styles):
    table = Table(box=ROUNDED, show_header=False, border_style=styles["table-border"], pad_edge=True)
    table.add_column(no_wrap=True)
    table.add_column()
    return table


def _label(name, command, options):
    if options.show_aliases and command.aliases:
        return f"{name} ({', '.join(command.aliases)})"
    return name


def _visible(commands, options):
    commands = [command for command in commands if options.show_hidden or not command.hidden]
    if options.sort_commands:
        commands.sort(key=lambda command: command.name)
    return commands


def _section(title, styles):
    return Text(title, styles["section-label"])


def render_global_help(commands, brand, version=None, options=None, /):
    """
    Overview of every visible command.

    Layout
        <header>
        brand vX
        USAGE
          brand <command> [options]
        COMMANDS
          name (alias, ...)    description
        FLAGS
          --help, -h           Show help
          --version, -v        Show version
    """
    options = options if options is not None else HelpOptions()
    styles = _styles()
    renders = []

    if options.header:
        renders.append(Text(options.header, styles["header"]))

    title = Text(brand, styles["program-name"])
    if version:
        title.append(f" v{version}", styles["program-version"])
    renders.append(title)

    renders.append(Text())
    renders.append(_section("USAGE", styles))
    renders.append(Text(f"  {brand} <command> [options]", styles["usage"]))

    if commands := _visible(commands, options):
        renders.append(Text())
        renders.append(_section("COMMANDS", styles))
        table = _table(styles)
        for command in commands:
            table.add_row(
                Text(_label(command.name, command, options), styles["command-name"]),
                Text(command.descr or "", styles["description"]),
            )
        renders.append(table)

    renders.append(Text())
    renders.append(_section("FLAGS", styles))
    table = _table(styles)
    table.add_row(Text("--help, -h", styles["flag-name"]), Text("Show help", styles["description"]))
    table.add_row(Text("--version, -v", styles["flag-name"]), Text("Show version", styles["description"]))
    renders.append(table)

    return Group(*renders)


def _usage(brand, path, command):
    parts = [brand, path]
    for name, argument in command.args.items():
        parts.append(f"<{name}>" if argument.required else f"[{name}]")
    if command.subcommands:
        parts.append("<subcommand>")
    parts.append("[options]")
    return " ".join(parts)


def _annotations(declaration):
    notes = []
    if declaration.choices:
        notes.append("(" + " | ".join(map(str, declaration.choices)) + ")")
    if declaration.required:
        notes.append("(required)")
    if declaration.default is not Unset:
        notes.append(f"(default: {declaration.default})")
    return " ".join(notes)


def _describe(declaration, styles):
    text = Text(declaration.descr or "", styles["description"])
    if notes := _annotations(declaration):
        text.append((" " if declaration.descr else "") + notes, styles["annotation"])
    return text


def _flag_names(name, flag):
    names = f"-{flag.alias}, --{name}" if flag.alias else f"--{name}"
    if flag.boolean:
        return names
    return f"{names} <n>" if flag.numeric else f"{names} <value>"


def render_command_help(command, brand, options=None, /, path=None):
    """
    Detailed help for one command.

    Parameters
    - path: full command path used in USAGE ("db migrate"); defaults to the
      command name.
    """
    options = options if options is not None else HelpOptions()
    styles = _styles()
    path = path or command.name
    renders = []

    if options.header:
        renders.append(Text(options.header, styles["header"]))

    if command.descr:
        renders.append(Text(command.descr, styles["description"]))
        renders.append(Text())

    if options.show_aliases and command.aliases:
        renders.append(_section("ALIASES", styles))
        renders.append(Text("  " + ", ".join(command.aliases), styles["command-name"]))
        renders.append(Text())

    renders.append(_section("USAGE", styles))
    renders.append(Text(f"  {_usage(brand, path, command)}", styles["usage"]))

    if command.args:
        renders.append(Text())
        renders.append(_section("ARGUMENTS", styles))
        table = _table(styles)
        for name, argument in command.args.items():
            table.add_row(Text(name, styles["argument-name"]), _describe(argument, styles))
        renders.append(table)

    renders.append(Text())
    renders.append(_section("FLAGS", styles))
    table = _table(styles)
    for name, flag in command.flags.items():
        if flag.hidden and not options.show_hidden:
            continue
        table.add_row(Text(_flag_names(name, flag), styles["flag-name"]), _describe(flag, styles))
    table.add_row(Text("--help, -h", styles["flag-name"]), Text("Show help", styles["description"]))
    renders.append(table)

    if subcommands := _visible(command.subcommands, options):
        renders.append(Text())
        renders.append(_section("SUBCOMMANDS", styles))
        table = _table(styles)
        for subcommand in subcommands:
            table.add_row(
                Text(_label(subcommand.name, subcommand, options), styles["command-name"]),
                Text(subcommand.descr or "", styles["description"]),
            )
        renders.append(table)

    return Group(*renders)


__all__ = (
    "HelpOptions",
    "render_global_help",
    "render_command_help",
)
