"""
subcmd coercion helpers: turn a declared default into its kind's canonical value.

Scope
- One helper per kind (as_int32, as_int64, as_uint32, as_uint64, as_float64,
  as_duration, as_bool, as_string, as_value) and coerce(kind, value) which
  dispatches on the kind.

Rules
- None means "no default" and yields the kind's zero value (False, 0, "",
  0.0, timedelta(0)); VALUE has no zero, so None is rejected there.
- Integer kinds accept any object implementing __index__ except bool, as long
  as the value fits the target range. Crossing signedness is allowed only for
  representable values (a non-negative int64 fits uint64, nothing negative
  fits an unsigned kind).
- FLOAT64 accepts ints (not bools) and floats.
- DURATION accepts a timedelta or an integer count of microseconds (integer
  as above), within a signed 64-bit nanosecond range.
- Every rejection raises CoercionError; nothing is silently zeroed.
"""
import datetime
import operator

from .faults import CoercionError
from .kinds import _MAX_NANOSECONDS, _MICROSECOND, Kind, Value, resolve


def _integer(value, kind, /):
    if value is None:
        return 0
    if isinstance(value, bool):
        raise CoercionError(value, kind.value)
    try:
        number = operator.index(value)
    except TypeError:
        raise CoercionError(value, kind.value) from None
    low, high = kind.range
    if not low <= number <= high:
        raise CoercionError(value, kind.value, "out of range [%d, %d]" % (low, high))
    return number


def as_int32(value, /):
    return _integer(value, Kind.INT32)


def as_int64(value, /):
    return _integer(value, Kind.INT64)


def as_uint32(value, /):
    return _integer(value, Kind.UINT32)


def as_uint64(value, /):
    return _integer(value, Kind.UINT64)


def as_float64(value, /):
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CoercionError(value, Kind.FLOAT64.value)
    try:
        return float(value)
    except OverflowError:
        raise CoercionError(value, Kind.FLOAT64.value, "out of range") from None


def as_duration(value, /):
    """
    coerce to a timedelta.

    integers are read as microsecond ticks, the storage resolution. the result
    must fit a signed 64-bit nanosecond count, the range parse_duration() reads.
    """
    if value is None:
        return datetime.timedelta(0)
    result = value
    if not isinstance(value, datetime.timedelta):
        if isinstance(value, bool):
            raise CoercionError(value, Kind.DURATION.value)
        try:
            result = datetime.timedelta(microseconds=operator.index(value))
        except TypeError:
            raise CoercionError(value, Kind.DURATION.value) from None
        except OverflowError:
            raise CoercionError(value, Kind.DURATION.value, "out of range") from None
    nanoseconds = (result // _MICROSECOND) * 1_000
    if not -_MAX_NANOSECONDS - 1 <= nanoseconds <= _MAX_NANOSECONDS:
        raise CoercionError(value, Kind.DURATION.value, "out of range")
    return result


def as_bool(value, /):
    if value is None:
        return False
    if not isinstance(value, bool):
        raise CoercionError(value, Kind.BOOL.value)
    return value


def as_string(value, /):
    if value is None:
        return ""
    if not isinstance(value, str):
        raise CoercionError(value, Kind.STRING.value)
    return value


def as_value(value, /):
    """
    return an independent clone of a custom Value.
    """
    if not isinstance(value, Value):
        raise CoercionError(value, Kind.VALUE.value, "a custom value needs a Value instance to clone")
    return value.copy()


_HELPERS = {
    Kind.BOOL: as_bool,
    Kind.INT32: as_int32,
    Kind.INT64: as_int64,
    Kind.UINT32: as_uint32,
    Kind.UINT64: as_uint64,
    Kind.STRING: as_string,
    Kind.FLOAT64: as_float64,
    Kind.DURATION: as_duration,
    Kind.VALUE: as_value,
}


def coerce(kind, value, /):
    """
    coerce `value` with the helper registered for `kind`.

    raises ConfigurationError for an unknown kind, CoercionError otherwise.
    """
    return _HELPERS[resolve(kind)](value)


__all__ = (
    "as_int32",
    "as_int64",
    "as_uint32",
    "as_uint64",
    "as_float64",
    "as_duration",
    "as_bool",
    "as_string",
    "as_value",
    "coerce",
)
