"""
subcmd kinds: the closed set of parameter value kinds.

Scope
- Kind: the enumeration every Param declares (bool, 32/64-bit signed and
  unsigned integers, string, float, duration and the extensible custom value).
- Per-kind text parsing (one token -> one value), rendering (value -> token),
  canonical storage type and the label used in usage lines.
- Value: the abstract custom value a VALUE parameter delegates to.
- parse_duration() / format_duration(): the "1m30s" duration grammar.

Invariants
- Every kind but VALUE has a fixed storage type and range; integers are range
  checked on parse, an overflowing token is an error, never truncated.
- render -> parse is an identity for every kind (see format()/parse()).
- Kinds are data: resolve() turns a Kind or its string value into a Kind and
  raises ConfigurationError for anything outside the closed set.

Quick example
    >>> Kind.INT32.parse("42")
    42
    >>> Kind.DURATION.format(Kind.DURATION.parse("90s"))
    '1m30s'
"""
import copy
import datetime
import re
from abc import ABC, abstractmethod
from enum import Enum

from .faults import ConfigurationError


class Value(ABC):
    """
    Abstract custom value delegated to by VALUE parameters.

    Contract
    - set(text): parse `text` into this object (mutating); raise ValueError
      (or any Exception) on malformed input.
    - __str__(): render the current state as a token that set() accepts.
    - copy(): return an independent clone. Defaults are cloned before every
      use so one declaration never observes mutations from an invocation.
    """

    @abstractmethod
    def set(self, text, /):
        raise NotImplementedError

    @abstractmethod
    def __str__(self):
        raise NotImplementedError

    def copy(self):
        return copy.deepcopy(self)


_BOOLEANS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_RANGES = {
    "int32": (-(1 << 31), (1 << 31) - 1),
    "int64": (-(1 << 63), (1 << 63) - 1),
    "uint32": (0, (1 << 32) - 1),
    "uint64": (0, (1 << 64) - 1),
}

# nanoseconds per unit
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_MAX_NANOSECONDS = (1 << 63) - 1

_MICROSECOND = datetime.timedelta(microseconds=1)


def parse_duration(text, /):
    """
    parse a duration token such as "300ms", "-1.5h" or "2h45m" into a timedelta.

    grammar
    - optional sign, then either "0" or a sequence of <decimal><unit> groups.
    - decimal: digits, digits ".", digits "." digits, or "." digits.
    - units: ns, us (µs/μs), ms, s, m, h.

    notes
    - the total must fit in a signed 64-bit nanosecond count.
    - sub-microsecond remainders are truncated toward zero (timedelta
      resolution).

    raises
    - ValueError: on any malformed token or overflow.
    """
    if not isinstance(text, str):
        raise TypeError("parse_duration() argument must be a string")

    original, negative = text, False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return datetime.timedelta(0)
    if not text:
        raise ValueError("invalid duration %r" % original)

    total = 0
    while text:
        match = re.match(r"(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?(?P<unit>[^0-9.]*)", text)
        whole, fraction, unit = match["whole"], match["fraction"] or "", match["unit"]
        if not whole and not fraction:
            # neither "5" nor ".5" precedes the unit
            raise ValueError("invalid duration %r" % original)
        if not unit:
            raise ValueError("missing unit in duration %r" % original)
        try:
            scale = _UNITS[unit]
        except KeyError:
            raise ValueError("unknown unit %r in duration %r" % (unit, original)) from None

        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > _MAX_NANOSECONDS + negative:
            raise ValueError("invalid duration %r" % original)
        text = text[match.end():]

    microseconds = total // 1_000
    return datetime.timedelta(microseconds=-microseconds if negative else microseconds)


def _fraction(number, precision, /):
    """
    split `number` into (whole, ".digits") at `precision` decimal places,
    dropping trailing zeros from the fractional part.
    """
    whole, rest = divmod(number, 10 ** precision)
    digits = ("%0*d" % (precision, rest)).rstrip("0") if precision else ""
    return whole, "." + digits if digits else ""


def format_duration(value, /):
    """
    render a timedelta the way parse_duration() reads it back.

    shape
    - "0s" for zero.
    - below one second: the largest of ns/µs/ms with a fractional part,
      e.g. "1.5ms", "250µs".
    - otherwise hours, minutes and seconds: "1h0m0s", "1m30s", "7.25s".
    """
    if not isinstance(value, datetime.timedelta):
        raise TypeError("format_duration() argument must be a timedelta")

    nanoseconds = (value // _MICROSECOND) * 1_000
    if not nanoseconds:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    nanoseconds = abs(nanoseconds)

    if nanoseconds < 1_000_000_000:
        if nanoseconds < 1_000:
            unit, precision = "ns", 0
        elif nanoseconds < 1_000_000:
            unit, precision = "µs", 3
        else:
            unit, precision = "ms", 6
        whole, fraction = _fraction(nanoseconds, precision)
        return f"{sign}{whole}{fraction}{unit}"

    seconds, fraction = _fraction(nanoseconds, 9)
    minutes, seconds = divmod(seconds, 60)
    text = f"{seconds}{fraction}s"
    if minutes:
        hours, minutes = divmod(minutes, 60)
        text = f"{minutes}m" + text
        if hours:
            text = f"{hours}h" + text
    return sign + text


_PREFIXED = re.compile(r"0[xX][_0-9a-fA-F]+|0[bB][_01]+|0[oO][_0-7]+|0[_0-7]*|[1-9][_0-9]*")


def _parse_integer(text, kind, /, prefixed=False):
    # signed kinds accept a leading sign, unsigned ones only digits
    if not isinstance(text, str):
        raise ValueError("parsing %r: invalid syntax" % (text,))
    sign, digits = (text[:1], text[1:]) if text[:1] in ("+", "-") and not kind.value.startswith("u") else ("", text)
    if not prefixed:
        if not re.fullmatch(r"[0-9]+", digits):
            raise ValueError("parsing %r: invalid syntax" % (text,))
        number = int(digits)
    else:
        # 0x/0o/0b prefixes, a bare leading 0 for octal, "_" between digits
        if not _PREFIXED.fullmatch(digits):
            raise ValueError("parsing %r: invalid syntax" % (text,))
        if digits[:1] != "0":
            base = 10
        elif digits[1:2] in ("x", "X", "b", "B", "o", "O"):
            base = 0
        else:
            base = 8
        try:
            number = int(digits, base)
        except ValueError:
            raise ValueError("parsing %r: invalid syntax" % (text,)) from None
    if sign == "-":
        number = -number
    low, high = _RANGES[kind.value]
    if not low <= number <= high:
        raise ValueError("parsing %r: value out of range for %s" % (text, kind.value))
    return number


def _parse_float(text, /):
    if text != text.strip() or "_" in text:
        raise ValueError("parsing %r: invalid syntax" % text)
    try:
        return float(text)
    except ValueError:
        raise ValueError("parsing %r: invalid syntax" % text) from None


class Kind(Enum):
    """
    closed set of parameter kinds.

    each member knows its storage type, usage label, how to parse one token
    and how to render a value back into a token.
    """
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    STRING = "string"
    FLOAT64 = "float64"
    DURATION = "duration"
    VALUE = "value"

    def __str__(self):
        return self.value

    @property
    def storage(self):
        """
        canonical Python type a bound value of this kind has.
        """
        match self:
            case Kind.BOOL:
                return bool
            case Kind.INT32 | Kind.INT64 | Kind.UINT32 | Kind.UINT64:
                return int
            case Kind.STRING:
                return str
            case Kind.FLOAT64:
                return float
            case Kind.DURATION:
                return datetime.timedelta
            case Kind.VALUE:
                return Value

    @property
    def label(self):
        """
        placeholder shown after a flag in usage lines ("" for bare booleans).
        """
        match self:
            case Kind.BOOL:
                return ""
            case Kind.INT32 | Kind.INT64:
                return "int"
            case Kind.UINT32 | Kind.UINT64:
                return "uint"
            case Kind.FLOAT64:
                return "float"
            case _:
                return self.value

    @property
    def range(self):
        """
        inclusive (low, high) bounds of an integer kind, None otherwise.
        """
        return _RANGES.get(self.value)

    def parse(self, text, /, into=None, prefixed=False):
        """
        convert one token into a value of this kind.

        parameters
        - text: str, the raw token.
        - into: Value, required for VALUE; it is mutated and returned.
        - prefixed: integer kinds also read 0x/0o/0b prefixes, a leading-0
          octal form and "_" digit separators (flag values do).

        raises
        - ValueError (or whatever Value.set raises) on malformed tokens.
        """
        match self:
            case Kind.BOOL:
                try:
                    return _BOOLEANS[text]
                except KeyError:
                    raise ValueError("parsing %r: invalid syntax" % (text,)) from None
            case Kind.INT32 | Kind.INT64 | Kind.UINT32 | Kind.UINT64:
                return _parse_integer(text, self, prefixed)
            case Kind.STRING:
                return text
            case Kind.FLOAT64:
                return _parse_float(text)
            case Kind.DURATION:
                return parse_duration(text)
            case Kind.VALUE:
                if not isinstance(into, Value):
                    raise ConfigurationError("value kind needs a Value to parse into, got %r" % (into,))
                into.set(text)
                return into

    def format(self, value, /):
        """
        render a value of this kind as a token parse() reads back.
        """
        match self:
            case Kind.BOOL:
                return "true" if value else "false"
            case Kind.FLOAT64:
                return repr(float(value))
            case Kind.DURATION:
                return format_duration(value)
            case _:
                return str(value)


def resolve(kind, /):
    """
    return `kind` as a Kind member.

    accepts Kind members and their string values ("int32", "duration", ...);
    anything else is a ConfigurationError.
    """
    if isinstance(kind, Kind):
        return kind
    if isinstance(kind, str):
        try:
            return Kind(kind)
        except ValueError:
            pass
    raise ConfigurationError("unknown parameter kind %r" % (kind,))


__all__ = (
    "Kind",
    "Value",
    "parse_duration",
    "format_duration",
    "resolve",
)
