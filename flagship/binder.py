"""
Flagship argument binder: TokenSet + Command -> Namespace.

phases (fail fast, first unsatisfiable field wins)
1. positionals, in declaration order, each pops the next positional token;
   running out raises MissingArgumentError, a bad token InvalidArgumentValueError.
2. flags: value by long alias, bare by long alias, then the same two checks by
   short alias. a bare BOOL flag means "true"; a bare flag of any other kind
   has no value and raises InvalidArgumentValueError. absent flags keep their
   default (False for BOOL, None otherwise, unless declared).
3. flags-enums: every non-zero member whose long or short alias is present
   (bare or with a value) ORs its bit into the accumulator; the result is an int.

matching
- long and short aliases are matched case-insensitively; an exact key is
  preferred, so "-V" binds a flag aliased "v".

leftovers
- surplus positional tokens and unknown flags are ignored.
"""
import re
from collections.abc import Mapping

from .aliases import resolve
from .arguments import Primitive, Enumeration, FieldKind
from .faults import MissingArgumentError, InvalidArgumentValueError, FaultCode, getdoc
from .tokens import TokenSet

_INT_RANGES = {
    Primitive.INT32: (-2 ** 31, 2 ** 31 - 1),
    Primitive.INT64: (-2 ** 63, 2 ** 63 - 1),
}

_integer = re.compile(r"\s*[+-]?[0-9]+\s*")
_decimal = re.compile(
    r"\s*[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)\s*",
    re.IGNORECASE,
)


class Namespace(Mapping):
    """
    Bound arguments: read-only, both a mapping and an attribute bag.

        >>> arguments.name, arguments["verbose"]
        ('Alice', True)
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        object.__setattr__(self, "_values", dict(values))

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"namespace has no argument {name!r}") from None

    def __setattr__(self, name, value):
        raise AttributeError("bound arguments are read-only")

    def __delattr__(self, name):
        raise AttributeError("bound arguments are read-only")

    def __getitem__(self, name):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __rich_repr__(self):
        yield from self._values.items()

    def __repr__(self):
        return "namespace(%s)" % ", ".join("%s=%r" % item for item in self._values.items())


def convert(kind, raw, /):
    """
    Convert one raw token to the given kind.

    kinds
    - STRING: identity.
    - BOOL: exactly "true" or "false" (case-sensitive).
    - INT32 / INT64: base-10 signed integer (ascii digits, optional sign), range checked.
    - FLOAT64: invariant decimal ('.' separator, optional exponent, inf/nan).
    - Enumeration (single-value): member alias, then member name (case-insensitive),
      then member value; the matching Member is returned.

    Raises
    - ValueError with a lowercased explanation when the token does not fit.
    """
    if isinstance(kind, Enumeration):
        return _convert_member(kind, raw)

    match kind:
        case Primitive.STRING:
            return raw
        case Primitive.BOOL:
            if raw == "true":
                return True
            if raw == "false":
                return False
            raise ValueError("expected 'true' or 'false'")
        case Primitive.INT32 | Primitive.INT64:
            if not _integer.fullmatch(raw):
                raise ValueError("expected a base-10 integer")
            value = int(raw)
            low, high = _INT_RANGES[kind]
            if not low <= value <= high:
                raise ValueError("value is out of range for %s (%d..%d)" % (kind, low, high))
            return value
        case Primitive.FLOAT64:
            if not _decimal.fullmatch(raw):
                raise ValueError("expected a decimal number")
            return float(raw)
        case _:
            raise TypeError("convert() unsupported kind %r" % (kind,))


def _convert_member(enumeration, raw):
    for member in enumeration.bits:
        alias = resolve(member)
        if raw in (alias.long, alias.short):
            return member
    for member in enumeration.bits:
        if member.name.casefold() == raw.casefold():
            return member
    if _integer.fullmatch(raw):
        for member in enumeration.bits:
            if member.value == int(raw):
                return member
    choices = ", ".join(member.name for member in enumeration.bits)
    raise ValueError("expected one of: %s" % choices)


class _Lookup:
    """Alias-aware view over a TokenSet (exact key first, then casefolded)."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.values = {}
        for key, value in tokens.values.items():
            self.values.setdefault(key.casefold(), value)
        self.flags = {key.casefold() for key in tokens.flags}

    def _find(self, key):
        if key in self.tokens.values:
            return self.tokens.values[key], False
        if key.casefold() in self.values:
            return self.values[key.casefold()], False
        if key in self.tokens.flags or key.casefold() in self.flags:
            return None, True
        return None

    def value(self, alias):
        for key in (alias.long, alias.short):
            if key is not None and (found := self._find(key)) is not None:
                yield found

    def present(self, alias):
        return any(True for _ in self.value(alias))


def _fail_conversion(command, field, raw, error):
    spelling = "<%s>" % field.metavar if field.kind is FieldKind.POSITIONAL else str(resolve(field))
    raise InvalidArgumentValueError(
        "invalid value %r for %s: %s" % (raw, spelling, error),
        title="invalid argument value",
        code=FaultCode.INVALID_ARGUMENT_VALUE,
        field=field.name,
        raw=raw,
        cause=error,
        hint="run '%s --help' to see the expected arguments" % command.name,
        docs=getdoc(FaultCode.INVALID_ARGUMENT_VALUE),
    ) from error


def bind(command, tokens, /):
    """
    Bind a TokenSet against a command descriptor.

    Parameters
    - command: Command (any object exposing `name` and ordered `fields`).
    - tokens: TokenSet produced by tokenize().

    Returns
    - Namespace mapping every field name to its bound value.

    Raises
    - MissingArgumentError: fewer positional tokens than positional fields.
    - InvalidArgumentValueError: a token does not convert to its field's kind,
      or a non-bool flag was given without a value.
    """
    if not isinstance(tokens, TokenSet):
        raise TypeError("bind() second argument must be a token-set")

    values = {}
    positionals = iter(tokens.positionals)
    lookup = _Lookup(tokens)

    for field in command.fields:
        if field.kind is FieldKind.POSITIONAL:
            try:
                raw = next(positionals)
            except StopIteration:
                raise MissingArgumentError(
                    "missing required argument <%s>" % field.metavar,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    field=field.name,
                    hint="run '%s --help' to see the expected order of arguments" % command.name,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT),
                ) from None
            try:
                values[field.name] = convert(field.type, raw)
            except ValueError as error:
                _fail_conversion(command, field, raw, error)

    for field in command.fields:
        if field.kind is not FieldKind.FLAG:
            continue
        raw = None
        bare = False
        for value, flagged in lookup.value(resolve(field)):
            if not flagged:
                raw = value
                break
            if field.type is Primitive.BOOL:
                raw = "true"
                break
            bare = True
        if raw is None and bare:
            _fail_conversion(command, field, "", ValueError("a value is required"))
        if raw is None:
            values[field.name] = field.default
            continue
        try:
            values[field.name] = convert(field.type, raw)
        except ValueError as error:
            _fail_conversion(command, field, raw, error)

    for field in command.fields:
        if field.kind is not FieldKind.FLAGS_ENUM:
            continue
        accumulator = 0
        for member in field.members:
            if lookup.present(resolve(member)):
                accumulator |= member.value
        values[field.name] = accumulator

    # keep declaration order in the namespace
    return Namespace((field.name, values[field.name]) for field in command.fields)


__all__ = (
    "Namespace",
    "convert",
    "bind",
)
