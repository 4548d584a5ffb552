"""
Flagship command layer: the static descriptor of one command's arguments.

What this module provides
- Command: canonical name, description, and an ordered tuple of fields
  (Positional, Flag, FlagsEnum), optionally bound to a callback that the
  executor runs with the bound namespace.
- command(...): create a Command directly or as a decorator.

Construction rules (checked once, so parsing never meets a broken descriptor)
- positional fields precede every flag and flags-enum field;
- field names are unique and readable as Namespace attributes: no leading
  underscore, and none of the Mapping methods (keys, items, values, get);
- every alias (flag fields and flags-enum members alike) is unique across the
  command, otherwise AliasCollisionError is raised.

Quick start
    from flagship import command, Positional, Flag, Primitive

    @command(
        Positional("name", descr="the name of the person to greet"),
        Flag("uppercase", long="uppercase", short="u", descr="print the greeting in uppercase"),
        Flag("repeat", long="repeat", short="r", type=Primitive.INT32, descr="number of times to repeat"),
    )
    def greet(args):
        \"\"\"Greets a person by name\"\"\"
        ...
"""
import inspect
import re

from rich.text import Text

from .aliases import ensure_unique
from .arguments import Positional, Flag, FlagsEnum, FieldKind
from .binder import Namespace, bind
from .tokens import tokenize
from .utils import *

# public attributes of a bound namespace, which a field name would shadow
_reserved = frozenset(name for name in dir(Namespace) if not name.startswith("_"))


class Command:
    """
    Static description of one command: name, description and ordered fields.

    Properties
    - name, descr, fields, callback: as given (read-only views).
    - positionals / flags / enums: the fields of each kind, in declaration order.

    Calling a Command with a bound namespace forwards it to the callback and
    returns the callback's result (None when there is no callback).

    Aliases are unique across the whole command, not only within one field or
    one flags enumeration: a Flag "--verbose" next to a flags-enum member
    "Verbose" is rejected, since both would match the same token.
    """

    __typename__ = "command"

    name = mirror("name")
    descr = mirror("descr")
    fields = mirror("fields")
    callback = mirror("callback")

    def __init__(self, name, /, *fields, descr=Unset, callback=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{self.__typename__} 'name' cannot be empty")
        elif re.search(r"\s", name):
            raise ValueError(f"{self.__typename__} 'name' cannot contain whitespace")

        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{self.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{self.__typename__} 'descr' cannot be empty")

        if callback is not Unset and not callable(callback):
            raise TypeError(f"{self.__typename__} 'callback' must be callable")

        names = set()
        flagged = False
        for field in fields:
            if not isinstance(field, Positional | Flag | FlagsEnum):
                raise TypeError(f"{self.__typename__} fields must be positionals, flags or flags-enums")
            elif field.name.startswith("_"):
                raise ValueError(f"{self.__typename__} field name {field.name!r} cannot start with an underscore")
            elif field.name in _reserved:
                raise ValueError(f"{self.__typename__} field name {field.name!r} is reserved by the namespace")
            elif field.name in names:
                raise ValueError(f"{self.__typename__} field name {field.name!r} is already in use")
            elif field.kind is FieldKind.POSITIONAL and flagged:
                raise ValueError(f"{self.__typename__} positional {field.name!r} must precede every flag")
            names.add(field.name)
            flagged |= field.kind is not FieldKind.POSITIONAL

        # flag fields and enum members share the command line, so they share one scope
        ensure_unique(
            [field for field in fields if field.kind is FieldKind.FLAG] +
            [member for field in fields if field.kind is FieldKind.FLAGS_ENUM for member in field.members],
            scope=f"{self.__typename__} {name!r}",
        )

        self._name = name
        self._descr = coalesce(descr)
        self._fields = list(fields)
        self._callback = coalesce(callback)

    @property
    def positionals(self):
        return tuple(field for field in self._fields if field.kind is FieldKind.POSITIONAL)

    @property
    def flags(self):
        return tuple(field for field in self._fields if field.kind is FieldKind.FLAG)

    @property
    def enums(self):
        return tuple(field for field in self._fields if field.kind is FieldKind.FLAGS_ENUM)

    def parse(self, args, /):
        """
        Tokenize `args` and bind them against this command.

        Returns
        - Namespace with one attribute per field.

        Raises
        - MissingArgumentError / InvalidArgumentValueError (see flagship.binder).
        """
        return bind(self, tokenize(args))

    def __call__(self, arguments, /):
        if self._callback is None:
            return None
        return self._callback(arguments)

    def __rich__(self):
        from .help import command_help_text
        return command_help_text(self)

    def __rich_repr__(self):
        yield "name", self._name
        yield "descr", self._descr
        yield "fields", tuple(self._fields)

    def __repr__(self):
        return "command(name=%r, descr=%r, fields=%r)" % (self._name, self._descr, tuple(self._fields))


def command(*args, name=Unset, descr=Unset):
    """
    Create a Command or return a decorator that builds one around a callback.

    Invocation modes
    - Bare decorator:        @command
    - Decorator with fields: @command(Positional("name"), Flag("verbose", short="v"), descr="...")

    Defaults
    - name: the callback's __name__, lowercased, underscores turned into '-'.
    - descr: the callback's docstring, cleaned by inspect.getdoc().
    """
    if len(args) == 1 and callable(args[0]) and not isinstance(args[0], Command):
        return command(name=name, descr=descr)(args[0])

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        return Command(
            coalesce(name, re.sub(r"_+", "-", callback.__name__.lower().strip("_"))),
            *args,
            descr=coalesce(descr, inspect.getdoc(callback) or Unset),
            callback=callback,
        )

    return wrapper


__all__ = (
    "Command",
    "command",
)
