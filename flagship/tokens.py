"""
Flagship tokenizer: split raw argv into positionals, valued flags and bare flags.

The tokenizer has no knowledge of target types or declared aliases; it only
classifies tokens. Binding (alias lookup, conversion) happens later.

Rules (left to right, one token of lookahead)
- "--key=value": the left part is the flag-key, the right part its value,
  split once on the first '='; no lookahead.
- "--key" / "-k": when a next token exists and does not start with '-', it is
  consumed as the value; otherwise the key is recorded as a bare flag.
- anything else (including a lone "-") is a positional, in order of appearance.

Policy
- A token starting with '-' is never consumed as a value, so a flag cannot take
  a negative number in the spaced form ("--offset -3" is two flags). Use the
  inline form ("--offset=-3"), which is taken verbatim.
- Flag-keys keep their case; matching policy belongs to the binder.
- Repeated keys: the last value wins; bare flags are a set.
"""
from collections.abc import Iterable
from types import MappingProxyType


class TokenSet:
    """
    Read-only result of tokenizing one argv slice.

    Attributes
    - positionals: tuple[str, ...]      non-flag tokens in order.
    - values: Mapping[str, str]         flag-key -> value.
    - flags: frozenset[str]             flag-keys seen without a value.
    """
    __slots__ = ("_positionals", "_values", "_flags")

    def __init__(self, positionals=(), values=None, flags=()):
        self._positionals = tuple(positionals)
        self._values = MappingProxyType(dict(values or {}))
        self._flags = frozenset(flags)

    @property
    def positionals(self):
        return self._positionals

    @property
    def values(self):
        return self._values

    @property
    def flags(self):
        return self._flags

    def value(self, key, default=None, /):
        """Return the value recorded for `key`, or `default`."""
        return self._values.get(key, default)

    def has_flag(self, key, /):
        """True when `key` was given without a value."""
        return key in self._flags

    def __eq__(self, other):
        if not isinstance(other, TokenSet):
            return NotImplemented
        return (
            self._positionals == other._positionals and
            dict(self._values) == dict(other._values) and
            self._flags == other._flags
        )

    def __hash__(self):
        return hash((self._positionals, frozenset(self._values.items()), self._flags))

    def __rich_repr__(self):
        yield "positionals", self._positionals
        yield "values", dict(self._values)
        yield "flags", set(self._flags)

    def __repr__(self):
        return "token-set(positionals=%r, values=%r, flags=%r)" % (
            self._positionals, dict(self._values), set(self._flags)
        )


def tokenize(args, /):
    """
    Tokenize an argv slice into a TokenSet. Never fails on string input.

    Parameters
    - args: Iterable[str]
      the raw tokens (command name already stripped by the caller).

    Returns
    - TokenSet

    Raises
    - TypeError: when args is not an iterable of strings (a caller bug, not input).
    """
    if isinstance(args, str) or not isinstance(args, Iterable):
        raise TypeError("tokenize() argument must be an iterable of strings")
    args = list(args)
    if not all(isinstance(arg, str) for arg in args):
        raise TypeError("tokenize() argument must be an iterable of strings")

    positionals = []
    values = {}
    flags = set()

    index = 0
    while index < len(args):
        arg = args[index]

        if arg.startswith("--"):
            key = arg[2:]
            if "=" in key:
                key, value = key.split("=", 1)
                values[key] = value
                index += 1
                continue
        elif arg.startswith("-") and len(arg) > 1:
            key = arg[1:]
        else:
            positionals.append(arg)
            index += 1
            continue

        # shared value-or-bare lookahead for long and short flags
        if index + 1 < len(args) and not args[index + 1].startswith("-"):
            values[key] = args[index + 1]
            index += 2
        else:
            flags.add(key)
            index += 1

    return TokenSet(positionals, values, flags)


__all__ = (
    "TokenSet",
    "tokenize",
)
