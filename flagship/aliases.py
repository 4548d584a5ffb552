"""
Flagship alias resolution.

An alias is the long and/or short name under which a flag field or a
flags-enum member is matched on the command line ("--no-cache", "-n").

resolve(x)
- x declares explicit aliases (x.long / x.short): returned verbatim; either or
  both may be present.
- x declares none: a long alias is derived by kebab-casing x.name
  ("NoCache" -> "no-cache"); no short alias is ever derived.

ensure_unique(owners, scope=...)
- resolves every owner and raises AliasCollisionError on the first long or
  short alias that appears twice. Called while descriptors are being built, so
  collisions never reach the parser.
"""
from typing import NamedTuple

from .faults import AliasCollisionError, FaultCode, getdoc
from .utils import kebabize


class Alias(NamedTuple):
    long: str | None = None
    short: str | None = None

    def spellings(self):
        """Command-line spellings in help order (short first)."""
        spellings = []
        if self.short:
            spellings.append("-" + self.short)
        if self.long:
            spellings.append("--" + self.long)
        return tuple(spellings)

    def __str__(self):
        return ", ".join(self.spellings())


def resolve(x, /):
    """
    Compute the canonical alias pair for a flag field or an enumeration member.

    Parameters
    - x: any object exposing `name`, `long` and `short` (None when not declared).

    Returns
    - Alias(long, short)
    """
    if x.long or x.short:
        return Alias(x.long or None, x.short or None)
    return Alias(kebabize(x.name), None)


def ensure_unique(owners, /, scope="command"):
    """
    Reject duplicated aliases among `owners` (resolved with resolve()).

    Both long and short aliases are compared case-insensitively, the way the
    binder matches them.

    Raises
    - AliasCollisionError naming the alias and both owners.
    """
    longs = {}
    shorts = {}
    for owner in owners:
        alias = resolve(owner)
        if alias.long is not None:
            if (other := longs.setdefault(alias.long.casefold(), owner)) is not owner:
                _collide("--" + alias.long, other, owner, scope)
        if alias.short is not None:
            if (other := shorts.setdefault(alias.short.casefold(), owner)) is not owner:
                _collide("-" + alias.short, other, owner, scope)


def _collide(spelling, first, second, scope):
    raise AliasCollisionError(
        "alias %r of %r is already used by %r in %s" % (spelling, second.name, first.name, scope),
        title="alias collision",
        code=FaultCode.ALIAS_COLLISION,
        alias=spelling,
        owners=(first.name, second.name),
        hint="give %r a distinct long or short alias" % second.name,
        docs=getdoc(FaultCode.ALIAS_COLLISION),
    )


__all__ = (
    "Alias",
    "resolve",
    "ensure_unique",
)
