"""
Commandeer usage rendering (presentation layer).

Reads initialized clause metadata only; never called mid-resolution except by
help hooks (which exit right after) and by Application.run()'s fault path.

Text helpers (plain strings, reused by hints and tests)
- format_flag(flag)      "-a, --channel=CHANNEL", "--debug"
- flag_summary(flags)    required flags in declaration order, then "[<flags>]"
- arg_summary(args)      "<nick> [<first> [<rest>...]]"
- usage_line(app, cmd)   "chat [<flags>] post --channel=CHANNEL [<flags>]"

render() prints the full help through rich: usage line, description, then the
"flags", "args" and "commands" sections.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.padding import Padding
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset


def format_flag(flag, /):
    """
    Render a flag the way usage lists it: short alias first, placeholder for
    value-bearing flags.
    """
    text = f"-{flag.short}, " if flag.short else ""
    text += f"--{flag.name}"
    if not flag.boolean:
        text += f"={flag.placeholder}"
    return text


def flag_summary(flags, /):
    """
    Required visible flags spelled out, remaining visible flags folded into "[<flags>]".
    """
    out = []
    optional = False
    for flag in flags:
        if flag.hidden:
            continue
        if flag.required:
            out.append(f"--{flag.name}" if flag.boolean else f"--{flag.name}={flag.placeholder}")
        else:
            optional = True
    if optional:
        out.append("[<flags>]")
    return " ".join(out)


def arg_summary(args, /):
    """
    Positional summary; optional arguments open a bracket closed at the end.
    """
    out = []
    depth = 0
    for arg in args:
        if arg.hidden:
            continue
        fragment = f"<{arg.name}>" + ("..." if arg.variadic else "")
        if not arg.required:
            fragment = "[" + fragment
            depth += 1
        out.append(fragment)
    if out:
        out[-1] += "]" * depth
    return " ".join(out)


def usage_line(application, command=None, /):
    """
    One-line usage: program name and root flag summary, then each command on
    the path with its own flag summary, then the grammar of the last level
    (arguments, or a command placeholder).
    """
    parts = [application.name, flag_summary(application.flags)]
    node = application
    if command is not None:
        group = application.commands
        for name in command.path:
            node = group[name]
            parts.extend((node.name, flag_summary(node.flags)))
            group = node.commands
    if node.args.have():
        parts.append(arg_summary(node.args))
    elif node.commands.have():
        parts.append("<command> [<args> ...]")
    return " ".join(part for part in parts if part)


def _leaves(group, /):
    for command in group:
        if command.hidden:
            continue
        if command.commands.have():
            yield from _leaves(command.commands)
        else:
            yield command


def render(application, command=None, /, *, console=Unset, compact=False):
    """
    Print usage for the application, or for one of its commands.

    Palette keys
    - usage-label, program-name, usage-section, description-section
    - group-label, flag-name, argument-name, description
    - commands-title, commands-table, command-name, command-description
    - panel-title

    Customization
    - Define a mapping named __styles__ in __main__ to override any palette entry.
    - Styling only applies when the application is colorful; fancy wraps the
      output in a panel.
    - compact=True prints the usage line alone (fault path of run()).
    """
    console = console or Console()
    colorful = application.colorful
    styles = defaultdict(str, {
        # head
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",

        # sections
        "group-label": "bold #FFFFFF",
        "flag-name": "bold #22C55E",
        "argument-name": "bold #FFD600",
        "description": "#9CA3AF",

        # commands table
        "commands-title": "bold #FFFFFF",
        "commands-table": "#4B5563",
        "command-name": "bold #36C5F0",
        "command-description": "#9CA3AF",

        # fancy panel
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), style)

    node = command if command is not None else application

    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(text(application.name, styler("program-name")))
    if grammar := usage_line(application, command).removeprefix(application.name).strip():
        usage.append(" ").append(text(grammar, styler("usage-section")))

    if compact:
        console.print(usage)
        return

    renders = [usage]
    if node.descr:
        renders.append(Text(""))
        renders.append(text(node.descr, styler("description-section")))

    # Flags of every level from the root down to the rendered node apply.
    flags = list(application.flags)
    if command is not None:
        owner = application.commands
        for name in command.path:
            owner = owner[name]
            flags.extend(owner.flags)
            owner = owner.commands

    sections = [
        ("flags", [(format_flag(flag), flag.descr) for flag in flags if not flag.hidden], "flag-name"),
        ("args", [
            (f"<{arg.name}>" + ("..." if arg.variadic else ""), arg.descr) for arg in node.args if not arg.hidden
        ], "argument-name"),
    ]
    for label, rows, style in sections:
        if not rows:
            continue
        grid = Table.grid(padding=(0, 2))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for name, descr in rows:
            grid.add_row(text(name, styler(style)), text(descr, styler("description")))
        renders.append(Text(""))
        renders.append(text(label.title(), styler("group-label")).append(":"))
        renders.append(Padding(grid, (0, 0, 0, 2)))

    if node.commands.have():
        table = Table(
            "command", "help",
            title=text("commands", styler("commands-title")),
            title_justify="left",
            box=ROUNDED,
            style=styler("commands-table"),
            header_style=styler("commands-title"),
        )
        for leaf in _leaves(node.commands):
            grammar = arg_summary(leaf.args)
            name = " ".join(leaf.path) + (" " + grammar if grammar else "")
            table.add_row(text(name, styler("command-name")), text(leaf.descr, styler("command-description")))
        renders.append(Text(""))
        renders.append(table)

    renderable = Group(*renders)
    if application.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{application.name} help".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )
    console.print(renderable)


__all__ = (
    "format_flag",
    "flag_summary",
    "arg_summary",
    "usage_line",
    "render",
)
