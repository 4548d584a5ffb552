"""
Flagship help renderer: usage/argument/option help and the command list.

Contract (plain text, bit-exact; every line ends with a newline)

    Usage: copy <source> <destination> [options]

    Copies a file from source to destination

    Arguments:
      <source>  The source file path
      <destination>  The destination file path

    Options:
      -v, --verbose  Show detailed output
      -r, --retries <retries>  How many times to retry

- "[options]" appears only when the command has a flag or flags-enum field.
- the description paragraph and the "Arguments:" block appear only when present;
  "Arguments:" is always followed by a blank line.
- "Options:" lists flag fields first (declaration order), then every non-zero
  member of every flags-enum field (field order, then member order). The zero
  member of a flags enumeration is never listed.
- a "<metavar>" value hint follows the aliases of non-bool flag fields.

    Available commands:

      copy   Copies a file from source to destination
      greet  Greets a person by name

- entries are sorted by name (ordinal), names padded to the longest name + 2.

Rendering
- command_help_text / command_list_text build rich Text objects styled with the
  palette below (override any entry through __styles__ in __main__); styling is
  applied only when colorful=True.
- render_command_help / render_command_list return their plain strings and are
  the pure, side-effect-free contract.
"""
from collections import defaultdict
from collections.abc import Mapping

from rich.text import Text

from .aliases import resolve
from .arguments import Primitive


def _palette(colorful):
    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Groups / arguments ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray

        # === Names / metavars ===
        "option-name": "bold #00E6FF",  # CYAN for value-bearing flags
        "flag-name": "bold #22C55E",  # GREEN for bool flags and enum members
        "metavar": "bold #FFD600",  # AMBER for parameters

        # === Command list ===
        "children": "bold #36C5F0",  # Sky-blue command names
        "children-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _described(line, descr, style):
    if isinstance(descr, Text):
        line.append("  ").append_text(descr)
    elif descr:
        line.append("  ").append(str(descr), style)
    return line.append("\n")


def command_help_text(command, /, *, colorful=False):
    """
    Build the help of one command as a rich Text (see module docstring for layout).
    """
    styler = _palette(colorful)
    positionals = command.positionals
    flags = command.flags
    enums = command.enums

    usage = Text()
    usage.append("Usage", styler("usage-label")).append(": ")
    usage.append(command.name, styler("program-name"))
    for field in positionals:
        usage.append(" ").append("<%s>" % field.metavar, styler("metavar"))
    if flags or enums:
        usage.append(" [options]")
    usage.append("\n\n")

    if command.descr:
        if isinstance(command.descr, Text):
            usage.append_text(command.descr)
        else:
            usage.append(str(command.descr), styler("description-section"))
        usage.append("\n\n")

    if positionals:
        usage.append("Arguments:", styler("group-label")).append("\n")
        for field in positionals:
            line = Text("  ").append("<%s>" % field.metavar, styler("metavar"))
            usage.append_text(_described(line, field.descr, styler("argument-description")))
        usage.append("\n")

    options = []
    for field in flags:
        boolean = field.type is Primitive.BOOL
        line = Text("  ").append(str(resolve(field)), styler("flag-name" if boolean else "option-name"))
        if not boolean:
            line.append(" ").append("<%s>" % field.metavar, styler("metavar"))
        options.append(_described(line, field.descr, styler("argument-description")))
    for field in enums:
        for member in field.members:
            line = Text("  ").append(str(resolve(member)), styler("flag-name"))
            options.append(_described(line, member.descr, styler("argument-description")))

    if options:
        usage.append("Options:", styler("group-label")).append("\n")
        for line in options:
            usage.append_text(line)

    return usage


def render_command_help(command, /):
    """Plain-text help of one command. Pure; never fails on a valid descriptor."""
    return command_help_text(command).plain


def _entries(catalog):
    if isinstance(catalog, Mapping):
        return [(str(name), command) for name, command in catalog.items()]
    return [(command.name, command) for command in catalog]


def command_list_text(catalog, /, *, colorful=False):
    """
    Build the command list as a rich Text.

    Parameters
    - catalog: Catalog, Mapping[name, Command], or an iterable of Commands.
    """
    styler = _palette(colorful)
    listing = Text("Available commands:\n\n")

    entries = sorted(_entries(catalog), key=lambda entry: entry[0])
    if not entries:
        return listing

    width = max(len(name) for name, _ in entries) + 2
    for name, command in entries:
        listing.append("  ").append(name.ljust(width), styler("children"))
        if isinstance(command.descr, Text):
            listing.append_text(command.descr)
        else:
            listing.append(str(command.descr or ""), styler("children-description"))
        listing.append("\n")
    return listing


def render_command_list(catalog, /):
    """Plain-text command list, sorted by name. Pure; an empty catalog renders the header only."""
    return command_list_text(catalog).plain


__all__ = (
    "command_help_text",
    "command_list_text",
    "render_command_help",
    "render_command_list",
)
