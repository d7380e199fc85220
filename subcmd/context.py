"""
subcmd context: explicit per-invocation state handed to every handler.

Scope
- Context carries what a handler may want to know about the call it is part
  of: the FlagSet its flags were parsed with, the path of subcommands entered
  so far (nested dispatch), arbitrary key/value pairs from the host, whether
  run() should skip check_map(), and a cancellation signal.

Notes
- Contexts are immutable: with_value(), with_flag_set(), with_subcmd() and
  with_suppress_check() return derived copies. Derived copies share the
  cancellation event of their parent, so cancelling any of them cancels all.
- The dispatcher never checks cancellation; it is there for handlers and
  their helpers.
"""
import threading
from types import MappingProxyType

from .utils import *


class Context:
    """
    immutable request context.

    properties
    - values: read-only mapping of host-supplied key/value pairs.
    - flag_set: FlagSet of the current call, None if the subcommand has no flags.
    - path: tuple of (name, Subcmd) pairs for the subcommands entered so far.
    - suppress_check: when True, run() does not call check_map().
    - cancelled: True once cancel() was called on this context or a relative.
    """

    __slots__ = ("_values", "_flag_set", "_path", "_suppress_check", "_event")

    def __init__(self, values=None, /, *, flag_set=None, path=(), suppress_check=False, event=None):
        self._values = dict(values or {})
        self._flag_set = flag_set
        self._path = tuple(path)
        self._suppress_check = bool(suppress_check)
        self._event = threading.Event() if event is None else event

    @classmethod
    def background(cls):
        """
        a fresh, empty, uncancelled root context.
        """
        return cls()

    def _derive(self, *, values=Unset, **changes):
        return type(self)(coalesce(values, self._values), **{
            "flag_set": self._flag_set,
            "path": self._path,
            "suppress_check": self._suppress_check,
            "event": self._event,
        } | changes)

    @property
    def values(self):
        return MappingProxyType(self._values)

    flag_set = mirror("flag_set")
    path = mirror("path")
    suppress_check = mirror("suppress_check")

    @property
    def names(self):
        """
        names of the subcommands entered so far, outermost first.
        """
        return tuple(name for name, _ in self._path)

    def value(self, key, default=None, /):
        return self._values.get(key, default)

    def with_value(self, key, value, /):
        return self._derive(values=self._values | {key: value})

    def with_flag_set(self, flag_set, /):
        return self._derive(flag_set=flag_set)

    def with_subcmd(self, name, subcmd, /):
        return self._derive(path=self._path + ((name, subcmd),))

    def with_suppress_check(self, suppress=True, /):
        return self._derive(suppress_check=suppress)

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()

    def wait(self, timeout=None, /):
        """
        block until cancelled or `timeout` seconds elapse; return cancelled.
        """
        return self._event.wait(timeout)

    def __repr__(self):
        return "context(names=%r, suppress_check=%r, cancelled=%r)" % (
            self.names, self._suppress_check, self.cancelled
        )


__all__ = (
    "Context",
)
