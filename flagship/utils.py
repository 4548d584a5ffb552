"""
Flagship utilities shared by the descriptor, binder and renderer layers.

Contents
- Unset: the "not provided" sentinel, so None stays a legitimate value.
- coalesce(): swap Unset for a default, leaving None/0/"" alone.
- rename(): give generated callables a readable __name__/__qualname__.
- mirror(): read-only property over a "_<name>" backing field; containers are
  handed out as tuple / MappingProxyType / frozenset views.
- kebabize(): long alias derived from a member identifier.

    >>> coalesce(Unset, 8), coalesce(None, 8)
    (8, None)
    >>> kebabize("EnableFeatureX")
    'enable-feature-x'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton.

    Falsey, distinct from None, sealed against subclassing, and usable inside
    PEP 604 unions given to isinstance() (``str | Unset``).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Return `object`, or `default` when it is Unset."""
    return default if object is Unset else object


def rename(*parameters):
    """
    Set __name__ and __qualname__ of a callable.

    rename(function, "name") updates and returns the function;
    rename("name") returns the equivalent decorator.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return functools.partial(_rename, name=name)
    if len(parameters) == 2:
        function, name = parameters
        if not isinstance(name, str):
            raise TypeError("rename() second argument must be a string")
        return _rename(function, name=name)
    raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _rename(function, /, name):
    if not builtins.callable(function):
        raise TypeError("rename() target must be callable")
    try:
        function.__name__ = function.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() target does not accept a new name") from None
    return function


def _freeze(object):
    match object:
        case str():
            return object
        case Sequence():
            return tuple(object)
        case Mapping():
            return MappingProxyType(object)
        case Set():
            return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property exposing ``self._<name>``.

        class Command:
            fields = mirror("fields")   # list stored, tuple returned
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def kebabize(identifier, /):
    """
    Kebab-case an identifier: the first character is lowercased, every later
    uppercase character becomes '-' plus its lowercase. Kebab text is a fixed
    point.

    - "NoCache"        -> "no-cache"
    - "SkipTests"      -> "skip-tests"
    - "EnableFeatureX" -> "enable-feature-x"
    """
    if not isinstance(identifier, str):
        raise TypeError("kebabize() argument must be a string")
    return "".join(
        ("-" + character.lower()) if index and character.isupper() else
        character.lower() if not index else
        character
        for index, character in enumerate(identifier)
    )


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "kebabize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
