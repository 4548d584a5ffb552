"""
Flagship faults (errors) and rendering.

Scope
- FaultCode: stable numeric identifiers, grouped by domain.
- CommandException: message + options, rendered through rich as a header,
  the message and an optional hint.
- Concrete faults:
  • MissingArgumentError: a positional field had no remaining token.
  • InvalidArgumentValueError: a token could not be converted to the field's kind.
  • UnknownCommandError / MissingCommandError: dispatcher-level routing issues.
  • CommandFailedError: a command callback raised; reported by the executor.
  • AliasCollisionError: duplicate alias inside one resolution scope, raised while
    a descriptor is being built (also a ValueError).
- trigger(): central entry point to surface any fault (raise or print).
- getdoc(): optional description lookup for a code from the host application.

Host configuration (looked up on __main__, all optional)
- __prog__:   program name shown in fault headers.
- __codes__:  mapping FaultCode -> label, used by FaultCode.normalize().
- __docs__:   mapping FaultCode -> short documentation string, used by getdoc().
- __styles__: palette overrides for the rich renderers.

Propagation
- The binder raises the first fault it meets; nothing is recovered internally.
- The executor pairs every binding fault with the help text of the command.
"""
import copy
import os
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    stable numeric identifiers of every user-facing fault.

    - 1110x: routing (UNKNOWN_COMMAND, MISSING_COMMAND)
    - 1112x: binding (MISSING_ARGUMENT, INVALID_ARGUMENT_VALUE)
    - 1114x: execution (COMMAND_FAILED)
    - 1115x: descriptors (ALIAS_COLLISION)
    """
    # --- routing ---
    UNKNOWN_COMMAND        = 11101
    MISSING_COMMAND        = 11103

    # --- binding ---
    MISSING_ARGUMENT       = 11125
    INVALID_ARGUMENT_VALUE = 11127

    # --- execution ---
    COMMAND_FAILED         = 11141

    # --- descriptors ---
    ALIAS_COLLISION        = 11151

    def normalize(self):
        """label of this code: __main__.__codes__[self] when declared, else the number."""
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_palette = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


class CommandException(Exception):
    """
    base fault: a lowercased message plus read-only options.

    options read by the framework
    - code (FaultCode), title, hint, docs: shown when the fault is rendered.
    - colorful / fancy: palette and panel switches (both off by default).
    - shell / deferred / console: how trigger() surfaces the fault.
    - prog: program name for the header when __main__ has no __prog__.
    anything else (field, raw, cause, input, ...) is kept as context.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        styles = defaultdict(str, _palette | getattr(main, "__styles__", {}))

        def styled(fragment, style):
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment or ""), styles[style] if colorful else "")

        prog = getattr(main, "__prog__", self.options.get("prog") or os.path.basename(sys.argv[0]))
        header = Text.assemble(
            "[ ",
            styled(prog, "prog-name"),
            " — ",
            styled(self.code.normalize() if self.code else "", "code"),
            " | ",
            styled(str(self.options.get("title", "error")).title(), "error-title"),
            " ]",
        )
        body = [styled(self.message or "", "error-message")]
        if self.hint:
            body.append(Text.assemble(styled(" → ", "hint-arrow"), styled(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __trigger__(self):
        """
        outside shell mode the fault is raised; in shell mode it is printed on
        options["console"] (stderr by default), then the process exits with 1
        unless the fault is deferred.
        """
        if not self.options.get("shell", False):
            raise self from self.__cause__
        self.options.get("console", console).print(self)
        if not self.options.get("deferred", False):
            sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class MissingArgumentError(CommandException):
    """a positional field had no remaining token."""

    @property
    def field(self):
        return self.options.get("field")


class InvalidArgumentValueError(CommandException):
    """a token could not be converted to the declared kind of its field."""

    @property
    def field(self):
        return self.options.get("field")

    @property
    def raw(self):
        return self.options.get("raw")

    @property
    def cause(self):
        return self.options.get("cause")


class UnknownCommandError(CommandException):
    @property
    def input(self):
        return self.options.get("input")

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))


class MissingCommandError(CommandException): ...


class CommandFailedError(CommandException):
    """a command callback raised; the original exception is kept as cause."""

    @property
    def command(self):
        return self.options.get("command")

    @property
    def cause(self):
        return self.options.get("cause")


class AliasCollisionError(CommandException, ValueError):
    """duplicate alias within one resolution scope (descriptor-construction time)."""

    @property
    def alias(self):
        return self.options.get("alias")


def trigger(fault, /, **options):
    """
    surface `fault` after merging `options` into it with copy.replace().

    used by the executor with shell=True, deferred=True so faults are printed
    and control comes back to pick the exit code; library callers leave
    shell off and get the fault raised.
    """
    for method in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, method, None)):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """__main__.__docs__[code] when the host declares it, else None."""
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "MissingArgumentError",
    "InvalidArgumentValueError",
    "UnknownCommandError",
    "MissingCommandError",
    "CommandFailedError",
    "AliasCollisionError",
    "FaultCode",
    "trigger",
    "getdoc",
)
