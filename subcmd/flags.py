r"""
subcmd flag parsing: a small, single-prefix flag set.

Scope
- Flag: holder of one declared flag (name, kind, default, doc) and its
  current value.
- FlagSet: the flags of one subcommand call; parses the leading flag tokens
  of an argument list and keeps the rest (args).

Token grammar
- "-name" and "--name" are the same flag; there are no short-flag bundles.
- "-name=value" or "-name value" sets a valued flag.
- bool flags: "-name" sets true; "-name=false" (or any bool token after "=")
  sets that value; a bool flag never consumes the next token.
- integer flag values may carry a 0x, 0o or 0b prefix, a leading 0 for octal,
  and "_" between digits ("0x10", "010", "1_000"); positionals stay decimal.
- parsing stops before the first token that is "-" or does not start with
  "-", and right after a "--" token (which is consumed).

Faults (FlagParseError)
- bad flag syntax ("---x", "-=x"), unknown flag, missing value, bad value.
- an undeclared -h/-help/--help raises FlagParseError with
  help_requested=True; the dispatcher turns it into a help request.

Quick example
    >>> fs = FlagSet("grep")
    >>> fs.add("count", Kind.INT32, 0, "stop after `n` matches")
    >>> fs.parse(["-count=3", "pattern", "file"])
    ['pattern', 'file']
    >>> fs.lookup("count").value
    3
"""
import difflib
import logging
import re
from collections import deque

from .coercion import coerce
from .faults import ConfigurationError, FlagParseError
from .kinds import Kind, resolve

log = logging.getLogger(__name__)


def unquote_usage(flag, /):
    """
    return (label, usage) for a flag.

    the first `backquoted` word of the doc becomes the label and loses its
    backquotes in usage; otherwise the label comes from the flag's kind
    ("" for bool, "int", "uint", "float", "string", "duration", "value").
    """
    if match := re.search(r"`([^`]*)`", flag.doc):
        return match[1], flag.doc[:match.start()] + match[1] + flag.doc[match.end():]
    return flag.kind.label, flag.doc


class Flag:
    """
    one declared flag and its current value.

    the value starts as the coerced default (a private clone for VALUE flags)
    and is replaced by set().
    """

    __slots__ = ("name", "kind", "default", "doc", "value", "seen")

    def __init__(self, name, kind, default, doc=""):
        self.name = name
        self.kind = resolve(kind)
        self.default = coerce(self.kind, default)
        self.doc = doc
        self.value = coerce(self.kind, self.default) if self.kind is Kind.VALUE else self.default
        self.seen = False

    @property
    def is_bool(self):
        return self.kind is Kind.BOOL

    def set(self, text, /):
        self.value = self.kind.parse(text, into=self.value if self.kind is Kind.VALUE else None, prefixed=True)
        self.seen = True

    def __str__(self):
        return self.kind.format(self.value)

    def __repr__(self):
        return "flag(name=%r, kind=%r, value=%r)" % (self.name, self.kind, self.value)


class FlagSet:
    """
    the flags of one subcommand call.

    flags are registered with add(), looked up by name, iterated in sorted
    name order and filled in by parse().
    """

    def __init__(self, name=""):
        self.name = name
        self._flags = {}
        self._args = []
        self._parsed = False

    def add(self, name, kind, default=None, doc=""):
        """
        register a flag and return its holder.

        raises ConfigurationError for an empty or duplicate name, and
        CoercionError when the default does not suit the kind.
        """
        if not name or name.startswith("-") or "=" in name:
            raise ConfigurationError("bad flag name %r" % name)
        if name in self._flags:
            raise ConfigurationError("flag redefined: %s" % name)
        self._flags[name] = flag = Flag(name, kind, default, doc)
        return flag

    def lookup(self, name, /):
        return self._flags.get(name)

    def __contains__(self, name):
        return name in self._flags

    def __iter__(self):
        return iter(sorted(self._flags.values(), key=lambda flag: flag.name))

    def __len__(self):
        return len(self._flags)

    @property
    def args(self):
        """
        tokens left after the flags, available once parse() has run.
        """
        return list(self._args)

    @property
    def parsed(self):
        return self._parsed

    def visited(self):
        """
        flags set on the command line, in sorted name order.
        """
        return [flag for flag in self if flag.seen]

    def _suggest(self, name):
        if suggestions := difflib.get_close_matches(name, self._flags.keys(), 1):
            return "did you mean -%s?" % suggestions[0]
        if self._flags:
            return "known flags are: %s" % ", ".join("-" + flag.name for flag in self)
        return "this subcommand takes no flags"

    def parse(self, tokens, /):
        """
        parse the leading flag tokens and return the remaining ones.
        """
        tokens = deque(tokens)
        while tokens:
            token = tokens[0]
            if len(token) < 2 or not token.startswith("-"):
                break
            if token == "--":
                tokens.popleft()
                break
            tokens.popleft()

            name = token[2:] if token.startswith("--") else token[1:]
            if not name or name[0] in "-=":
                raise FlagParseError("bad flag syntax: %s" % token, token=token,
                                     hint="write flags as -name, -name=value or -name value")

            value, valued = None, False
            if "=" in name[1:]:
                name, value = name.split("=", 1)
                valued = True

            if (flag := self._flags.get(name)) is None:
                if name in ("h", "help"):
                    raise FlagParseError("flag: help requested", flag=name, token=token, help_requested=True)
                raise FlagParseError("flag provided but not defined: -%s" % name, flag=name, token=token,
                                     hint=self._suggest(name))

            if flag.is_bool:
                if not valued:
                    value = "true"
                try:
                    flag.set(value)
                except ValueError as error:
                    raise FlagParseError("invalid boolean value %r for -%s: %s" % (value, name, error),
                                         flag=name, token=token) from error
                log.debug("flag -%s = %s", name, flag)
                continue

            if not valued:
                if not tokens:
                    raise FlagParseError("flag needs an argument: -%s" % name, flag=name, token=token,
                                         hint="pass a value after -%s" % name)
                value = tokens.popleft()
            try:
                flag.set(value)
            except Exception as error:
                raise FlagParseError("invalid value %r for flag -%s: %s" % (value, name, error),
                                     flag=name, token=token) from error
            log.debug("flag -%s = %s", name, flag)

        self._args = list(tokens)
        self._parsed = True
        return self.args


__all__ = (
    "Flag",
    "FlagSet",
    "unquote_usage",
)
