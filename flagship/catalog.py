"""
Flagship command catalog: case-insensitive name -> Command registry.

Lifecycle
- registration phase: register() / @catalog.command(...) insert commands; a
  name already taken (compared case-insensitively) is a ValueError.
- use phase: after freeze(), the catalog is read-only; lookups and rendering
  only. Registering into a frozen catalog raises RuntimeError.

Lookups
- catalog["Greet"] and catalog["greet"] return the same command; iteration
  yields the names as registered, in registration order.
- lookup(name) raises UnknownCommandError (with close-match suggestions)
  instead of KeyError, ready to be reported by the executor.
"""
import difflib
from collections.abc import Mapping

from .commands import Command, command
from .faults import UnknownCommandError, FaultCode, getdoc


class Catalog(Mapping):
    """
    Registry of the commands known to one program.

        >>> catalog = Catalog()
        >>> @catalog.command(Positional("name"))
        ... def greet(args): ...
        >>> catalog.freeze()["GREET"] is greet
        True
    """

    def __init__(self, commands=(), /):
        self._commands = {}
        self._frozen = False
        for command in commands:
            self.register(command)

    @property
    def frozen(self):
        return self._frozen

    def register(self, command, /):
        """
        Insert a command under its (case-insensitive) name and return it.
        """
        if self._frozen:
            raise RuntimeError("catalog is frozen; register commands before using it")
        if not isinstance(command, Command):
            raise TypeError("catalog.register() argument must be a command")
        if self._commands.setdefault(key := command.name.casefold(), command) is not command:
            raise ValueError(f"command name {self._commands[key].name!r} is already in use")
        return command

    def command(self, *args, **kwargs):
        """
        Same as flagship.command(...), registering the created command here.
        """
        if len(args) == 1 and callable(args[0]) and not isinstance(args[0], Command):
            return self.register(command(*args, **kwargs))

        def wrapper(callback, /):
            return self.register(command(*args, **kwargs)(callback))

        return wrapper

    def freeze(self):
        """End the registration phase; returns the catalog for chaining."""
        self._frozen = True
        return self

    def lookup(self, name, /):
        """
        Return the command registered under `name` (case-insensitive).

        Raises
        - UnknownCommandError with up to five close matches as suggestions.
        """
        try:
            return self[name]
        except KeyError:
            pass

        suggestions = difflib.get_close_matches(name.casefold(), self._commands.keys(), 5)
        suggestions = [self._commands[key].name for key in suggestions]
        try:
            hint = "did you mean %r? run without arguments to see all available commands" % suggestions[0]
        except IndexError:
            hint = "run without arguments to see all available commands"
        raise UnknownCommandError(
            "unknown command %r" % name,
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            input=name,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND),
        )

    def __getitem__(self, name):
        if not isinstance(name, str):
            raise KeyError(name)
        return self._commands[name.casefold()]

    def __contains__(self, name):
        return isinstance(name, str) and name.casefold() in self._commands

    def __iter__(self):
        return (command.name for command in self._commands.values())

    def __len__(self):
        return len(self._commands)

    def __rich_repr__(self):
        yield "commands", tuple(self)
        yield "frozen", self._frozen

    def __repr__(self):
        return "catalog(commands=%r, frozen=%r)" % (tuple(self), self._frozen)


__all__ = (
    "Catalog",
)
