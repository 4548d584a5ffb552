r"""
Flagship argument descriptors.

Overview
- Value kinds
  • Primitive: STRING, BOOL, INT32, INT64, FLOAT64 (builtins str/bool/int/float are
    accepted as shorthands; int means INT64).
  • Enumeration: an ordered list of Members. A plain enumeration is a single-value
    kind (one member is bound); a flags enumeration (flags=True) backs a FlagsEnum
    field and combines its members as a bitmask.

- Fields (one kind per field, never both positional and flagged)
  • Positional: mandatory, bound by position in declaration order.
  • Flag: optional, bound by its long and/or short alias.
  • FlagsEnum: optional bitmask whose non-zero members are each exposed as a flag.

Metadata (sanitized on construction)
- name: python identifier; the attribute of the bound namespace.
- metavar: display name in usage/help; defaults to the lowercased name with
  underscores turned into '-'.
- descr: short help; non-empty when provided, None otherwise.
- long/short: explicit aliases. A long alias matches r"[^\W\d_](-?[^\W_]+)*", a short
  alias is a single non-dash, non-space character.

Validation highlights
- A Flag without aliases gets a long alias derived from its name (see resolve()).
- Flags enumerations accept only 0 or single-bit values, unique values and names.
- Member aliases (explicit or derived) are unique per enumeration.

Quick example:
    >>> from flagship.arguments import Positional, Flag, FlagsEnum, Enumeration, Member, Primitive
    >>> Build = Enumeration("Build",
    ...     Member("None", 0),
    ...     Member("Verbose", 1, long="verbose", short="v"),
    ...     Member("NoCache", 4),
    ...     flags=True,
    ... )
    >>> fields = (
    ...     Positional("project", descr="project to build"),
    ...     Flag("jobs", long="jobs", short="j", type=Primitive.INT32),
    ...     FlagsEnum("options", Build),
    ... )
"""
import functools
import operator
import re
from enum import Enum, StrEnum

from rich.text import Text

from .aliases import resolve, ensure_unique
from .utils import *


class Primitive(StrEnum):
    """Scalar value kinds a token can be converted to."""
    STRING  = "string"
    BOOL    = "bool"
    INT32   = "int32"
    INT64   = "int64"
    FLOAT64 = "float64"


class FieldKind(Enum):
    POSITIONAL = "positional"
    FLAG       = "flag"
    FLAGS_ENUM = "flags-enum"


_shorthands = {
    str: Primitive.STRING,
    bool: Primitive.BOOL,
    int: Primitive.INT64,
    float: Primitive.FLOAT64,
}


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable, read-only specs.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the "_<name>" backing field (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_identity(cls, metadata, /):
    """
    Internal: validate 'name' and normalize 'metavar'/'descr' shared by all descriptors.

    Raises
    - TypeError: wrong types (including an explicit None for descr/metavar).
    - ValueError: empty strings or a name that is not a python identifier.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name.isidentifier():
        raise ValueError(f"{cls.__typename__} 'name' must be a valid identifier")

    if "metavar" in metadata:
        if not isinstance(metavar := metadata["metavar"], str | Unset):
            raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
        metadata["metavar"] = coalesce(metavar, re.sub(r"_+", "-", name.lower().strip("_")) or name.lower())

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_aliases(cls, metadata, /):
    """
    Internal: validate explicit 'long'/'short' aliases (leading dashes are not part of them).
    """
    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' alias must be a string")
    elif isinstance(long, str) and not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", long):
        raise ValueError(f"{cls.__typename__} 'long' alias %r must be a valid kebab-case name" % long)

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' alias must be a string")
    elif isinstance(short, str) and (len(short) != 1 or short == "-" or short.isspace()):
        raise ValueError(f"{cls.__typename__} 'short' alias %r must be a single character" % short)

    metadata["long"] = coalesce(long)
    metadata["short"] = coalesce(short)


def _sanitize_kind(cls, metadata, /):
    """
    Internal: normalize 'type' into a Primitive or a single-value Enumeration.
    """
    type = metadata["type"]
    if isinstance(type, Enumeration):
        if type.flags:
            raise TypeError(f"{cls.__typename__} 'type' cannot be a flags enumeration (use flags-enum)")
        return
    try:
        metadata["type"] = _shorthands[type] if type in _shorthands else Primitive(type)
    except (TypeError, ValueError):
        raise TypeError(f"{cls.__typename__} 'type' must be a primitive or an enumeration") from None


class Member(metaclass=ArgumentType):
    """
    One member of an Enumeration: symbolic name, numeric value, optional aliases.

    In a flags enumeration the value must be 0 (the implicit "no flags" sentinel,
    never bindable nor shown in help) or a single set bit.
    """

    __introspectable__ = (
        "name",
        "value",
        "long",
        "short",
        "descr",
    )

    def __new__(cls, name, value, /, long=Unset, short=Unset, descr=Unset):
        metadata = {
            "name": name,
            "value": value,
            "long": long,
            "short": short,
            "descr": descr,
        }
        _sanitize_identity(cls, metadata)
        _sanitize_aliases(cls, metadata)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{cls.__typename__} 'value' must be an integer")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def alias(self):
        """Resolved alias pair (explicit, or derived from the name)."""
        return resolve(self)


class Enumeration(metaclass=ArgumentType):
    """
    Ordered, validated list of members.

    - flags=False: single-value kind; binding picks one member by alias, then by
      name (case-insensitive), then by numeric value.
    - flags=True: bitmask kind; values are 0 or single bits and each non-zero
      member becomes its own flag.
    """

    __introspectable__ = (
        "name",
        "members",
        "flags",
        "descr",
    )

    def __new__(cls, name, /, *members, flags=False, descr=Unset):
        metadata = {
            "name": name,
            "descr": descr,
        }
        _sanitize_identity(cls, metadata)

        if not members:
            raise TypeError(f"{cls.__typename__} must specify at least one member")
        names = set()
        values = set()
        for member in members:
            if not isinstance(member, Member):
                raise TypeError(f"{cls.__typename__} members must be members")
            elif member.name.casefold() in names:
                raise ValueError(f"{cls.__typename__} member names cannot contain duplicates ({member.name!r})")
            elif member.value in values:
                raise ValueError(f"{cls.__typename__} member values cannot contain duplicates ({member.value!r})")
            elif flags and (member.value < 0 or member.value & (member.value - 1)):
                raise ValueError(f"{cls.__typename__} flags member {member.name!r} must be 0 or a single bit")
            names.add(member.name.casefold())
            values.add(member.value)

        ensure_unique(members, scope=f"{cls.__typename__} {name!r}")

        self = super().__new__(cls)
        self._name = metadata["name"]
        self._descr = metadata["descr"]
        self._members = list(members)
        self._flags = bool(flags)
        return self

    @property
    def zero(self):
        """The member valued 0 (the "no flags" sentinel), or None."""
        return next((member for member in self._members if member.value == 0), None)

    @property
    def bits(self):
        """Members that can be bound: every member except the zero one (flags only)."""
        if not self._flags:
            return tuple(self._members)
        return tuple(member for member in self._members if member.value != 0)

    def __iter__(self):
        return iter(self._members)

    def __len__(self):
        return len(self._members)


class Positional(metaclass=ArgumentType):
    """
    Mandatory argument bound by position.

    Parameters
    - name: identifier of the bound attribute.
    - type: Primitive | str/bool/int/float | single-value Enumeration (default STRING).
    - metavar: display name in usage/help.
    - descr: short description.
    """

    __introspectable__ = (
        "name",
        "type",
        "metavar",
        "descr",
    )

    kind = FieldKind.POSITIONAL
    nullable = False

    def __new__(cls, name, /, type=Primitive.STRING, metavar=Unset, descr=Unset):
        metadata = {
            "name": name,
            "type": type,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_identity(cls, metadata)
        _sanitize_kind(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Flag(metaclass=ArgumentType):
    """
    Optional argument bound by alias ("--long" and/or "-s").

    Parameters
    - name: identifier of the bound attribute.
    - long / short: explicit aliases; with neither, the long alias is the
      kebab-cased name ("noCache" -> "--no-cache").
    - type: Primitive | str/bool/int/float | single-value Enumeration (default BOOL).
    - default: value bound when the flag is absent; False for BOOL, None otherwise.
    - metavar: value placeholder in help (non-bool flags only).
    - descr: short description.

    Notes
    - A BOOL flag given bare ("-v") binds True; any other kind needs a value.
    """

    __introspectable__ = (
        "name",
        "long",
        "short",
        "type",
        "default",
        "metavar",
        "descr",
    )

    kind = FieldKind.FLAG

    def __new__(
            cls,
            name,
            /,
            long=Unset,
            short=Unset,
            type=Primitive.BOOL,
            default=Unset,
            metavar=Unset,
            descr=Unset
    ):
        metadata = {
            "name": name,
            "long": long,
            "short": short,
            "type": type,
            "default": default,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_identity(cls, metadata)
        _sanitize_aliases(cls, metadata)
        _sanitize_kind(cls, metadata)
        metadata["default"] = coalesce(default, False if metadata["type"] is Primitive.BOOL else None)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def alias(self):
        return resolve(self)

    @property
    def nullable(self):
        return self._type is not Primitive.BOOL


class FlagsEnum(metaclass=ArgumentType):
    """
    Optional bitmask field backed by a flags Enumeration.

    Every non-zero member is matched as its own flag; the bound value is the
    bitwise OR of the members present (0, the zero sentinel, when none are).
    """

    __introspectable__ = (
        "name",
        "enumeration",
        "descr",
    )

    kind = FieldKind.FLAGS_ENUM
    nullable = False

    def __new__(cls, name, enumeration, /, descr=Unset):
        metadata = {
            "name": name,
            "enumeration": enumeration,
            "descr": descr,
        }
        _sanitize_identity(cls, metadata)
        if not isinstance(enumeration, Enumeration):
            raise TypeError(f"{cls.__typename__} 'enumeration' must be an enumeration")
        elif not enumeration.flags:
            raise TypeError(f"{cls.__typename__} 'enumeration' must be a flags enumeration")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def default(self):
        return 0

    @property
    def members(self):
        """Bindable members (the zero sentinel excluded), in declaration order."""
        return self._enumeration.bits


__all__ = (
    # Value kinds
    "Primitive",
    "FieldKind",
    "Member",
    "Enumeration",

    # Fields
    "Positional",
    "Flag",
    "FlagsEnum",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
