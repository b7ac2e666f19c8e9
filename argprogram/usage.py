"""
argprogram usage renderer.

render(program, command=None) formats the schema of a whole program (command is
None) or of one of its commands into help text:

    Usage: <program>[ <command>] OPTIONS[ <positionals>]

    <Description.>

    COMMANDS | ARGUMENTS

    <name>  <description>

    OPTIONS | GLOBAL OPTIONS

    <signature>  <description> (default: <value>)

    COMMAND OPTIONS

    <signature>  <description>

Sections are separated by a blank line and only emitted when non-empty. The
program root lists its commands (sorted by name) and replaces the positional
signature with "<command>"; otherwise the arguments of the view are listed.
Every table shares one column width: the widest label among the commands,
arguments and options shown in the view.

The renderer is pure: it returns a rich Text and never prints. Styles are only
applied when colorful=True; the palette may be overridden through a __styles__
mapping defined in __main__, so the plain text is identical in both modes.
"""
from collections import defaultdict

from rich.text import Text

from .utils import sentence


def _styles():
    return defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "description-section": "italic #A3A3A3",  # Neutral gray
        "group-label": "bold #FFFFFF",  # Pure white headers
        "children": "bold #36C5F0",  # Sky-blue commands
        "cardinal-name": "bold #FFD600",  # AMBER for positionals
        "option-name": "bold #00E6FF",  # CYAN for options
        "argument-description": "#9CA3AF",  # Muted gray
        "default": "italic #737373",  # Dim default annotation
    } | getattr(__import__("__main__"), "__styles__", {}))


def _table(title, rows, width, styler):
    """
    Build one titled, column-aligned table.

    rows are (label, label-style, description, default) tuples; a non-empty
    default is annotated after the description.
    """
    lines = [Text(title, styler("group-label")), Text("")]
    for label, style, descr, default in rows:
        line = Text.assemble(
            (label.ljust(width), styler(style)),
            "  ",
            (descr, styler("argument-description")),
        )
        if default:
            line.append(" ").append(f"(default: {default})", styler("default"))
        line.rstrip()
        lines.append(line)
    return Text("\n").join(lines)


def render(program, command=None, /, *, colorful=False):
    """
    Render the usage text of `program`, or of `command` when given.

    Parameters
    - program: Program
      The program whose name, global options and commands are rendered.
    - command: Command | None
      The command to describe; None renders the program root.
    - colorful: bool
      Apply the rich palette. The plain text does not depend on it.

    Returns
    - rich.text.Text without a trailing newline.
    """
    styles = _styles()

    def styler(style):
        return styles[style] if colorful else ""

    root = command is None
    listing = root and bool(program.commands)

    if root:
        name, descr, arguments = program.name, program.descr, program.arguments
    else:
        name, descr, arguments = f"{program.name} {command.name}", command.descr, command.arguments

    local = () if root else command.options

    # Column width across everything the view shows.
    labels = [option.label for option in (*program.options, *local)]
    if listing:
        labels.extend(program.commands)
    else:
        labels.extend(argument.name for argument in arguments)
    width = max(map(len, labels), default=0)

    usage = Text.assemble(("Usage", styler("usage-label")), ": ", (name, styler("program-name")), " OPTIONS")
    if listing:
        usage.append(" ").append("<command>", styler("usage-section"))
    for argument in () if listing else arguments:
        usage.append(" ").append(argument.signature, styler("usage-section"))

    sections = [usage]

    if descr:
        sections.append(Text(sentence(descr), styler("description-section")))

    if listing:
        sections.append(_table("COMMANDS", [
            (name, "children", program.commands[name].descr, "")
            for name in sorted(program.commands)
        ], width, styler))
    elif arguments:
        sections.append(_table("ARGUMENTS", [
            (argument.name, "cardinal-name", argument.descr, "")
            for argument in arguments
        ], width, styler))

    def rows(options):
        return [
            (option.label, "option-name", option.descr, option.default)
            for option in sorted(options, key=lambda option: option.sortkey)
        ]

    if program.options:
        title = "GLOBAL OPTIONS" if local else "OPTIONS"
        sections.append(_table(title, rows(program.options), width, styler))

    if local:
        sections.append(_table("COMMAND OPTIONS", rows(local), width, styler))

    return Text("\n\n").join(sections)


__all__ = (
    "render",
)
