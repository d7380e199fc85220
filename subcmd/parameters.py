r"""
subcmd parameter model: immutable descriptions of subcommands and their parameters.

Overview
- Specs
  • Param: one flag or positional parameter (name, kind, default, doc).
  • Subcmd: a handler, its ordered parameter list and a one-line description.

- Naming conventions (Param.name)
  • A leading "-" marks a flag; the whole run of leading dashes is stripped
    to get the flag name ("-verbose" and "--verbose" both declare "verbose").
  • Any other name is positional; a trailing "?" marks it optional
    ("count?" binds to its default when no token is left).

- Convenience constructors
  • params(quad, ...): build a Param tuple from (name, kind, default, doc)
    quadruples.
  • commands(group, ...): build a name -> Subcmd mapping from (name, Subcmd)
    pairs or (name, handler, desc, params) quadruples.

- Introspection & representation
  • SpecType metaclass exposes the fields listed in __introspectable__ as
    read-only properties (mirror()) and provides stable __repr__ and
    __rich_repr__ implementations.

Metadata (sanitized on construction)
- Param
  • name: non-empty str.
  • kind: Kind member or its string value ("int32", "duration", ...); any
    other value is a ConfigurationError.
  • default: any object; None means "no default" (the kind's zero value).
    Whether the default suits the kind is checked by check_param().
  • doc: str, may be empty. A backquoted word names the flag's value in
    usage lines ("the `word` to find").
- Subcmd
  • handler: callable (its signature is checked by check()).
  • params: iterable of Param, stored as a tuple.
  • desc: str, may be empty.

Quick example
    >>> from subcmd import Kind, Subcmd, params
    >>> def greet(ctx, loud, name, rest): ...
    >>> greet = Subcmd(greet, params(
    ...     ("-loud", Kind.BOOL, False, "shout the greeting"),
    ...     ("name", Kind.STRING, None, "who to greet"),
    ... ), "say hello")
"""
import functools
import operator
import re
from collections.abc import Iterable

from .faults import ConfigurationError
from .kinds import resolve
from .utils import *


class SpecType(type):
    """
    Metaclass of the immutable specs (Param, Subcmd).

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property over
      the matching private field.
    - Provide a compact __repr__ and a __rich_repr__ for pretty printers.
    - Seal the specs against subclassing.
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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


class Param(metaclass=SpecType):
    """
    One parameter of a subcommand.

    Properties
    - name, kind, default, doc: the sanitized metadata (read-only).
    - is_flag: True when the name starts with "-".
    - is_optional: True for flags and for positionals whose name ends in "?".
    - flag_name: the name without its leading dashes (flags only).
    - display_name: how usage lines show the parameter ("count" for "count?").
    """
    __introspectable__ = ("name", "kind", "default", "doc")

    def __new__(cls, name, kind, default=None, doc=""):
        if not isinstance(name, str):
            raise TypeError("parameter name must be a string, got %r" % (name,))
        if not name:
            raise ValueError("parameter name must be non-empty")
        if not isinstance(doc, str):
            raise TypeError("parameter doc must be a string, got %r" % (doc,))

        self = super().__new__(cls)
        self._name = name
        self._kind = resolve(kind)
        self._default = default
        self._doc = doc
        return self

    def __eq__(self, other):
        if not isinstance(other, Param):
            return NotImplemented
        return (self.name, self.kind, self.doc) == (other.name, other.kind, other.doc) and (
            self.default is other.default or self.default == other.default
        )

    __hash__ = None

    @property
    def is_flag(self):
        return self._name.startswith("-")

    @property
    def is_optional(self):
        return self.is_flag or self._name.endswith("?")

    @property
    def flag_name(self):
        if not self.is_flag:
            raise ConfigurationError("parameter %r is not a flag" % self._name)
        return self._name.lstrip("-")

    @property
    def display_name(self):
        if self.is_flag:
            return self.flag_name
        return self._name.removesuffix("?")


class Subcmd(metaclass=SpecType):
    """
    A subcommand: handler, parameters and description.

    The handler is called as handler(ctx, *values, rest) where values follow
    the parameter order and rest is the list of leftover tokens; with a
    *rest parameter the leftovers are spread instead.
    """
    __introspectable__ = ("handler", "params", "desc")

    def __new__(cls, handler, params=(), desc=""):
        if not callable(handler):
            raise TypeError("subcommand handler must be callable, got %r" % (handler,))
        if isinstance(params, (str, bytes)) or not isinstance(params, Iterable):
            raise TypeError("subcommand params must be an iterable of Param")
        params = tuple(params)
        for index, param in enumerate(params, 1):
            if not isinstance(param, Param):
                raise TypeError("%s subcommand parameter is not a Param: %r" % (ordinal(index), param))
        if not isinstance(desc, str):
            raise TypeError("subcommand description must be a string, got %r" % (desc,))

        self = super().__new__(cls)
        self._handler = handler
        self._params = params
        self._desc = desc
        return self

    def __eq__(self, other):
        if not isinstance(other, Subcmd):
            return NotImplemented
        return (self.handler, self.params, self.desc) == (other.handler, other.params, other.desc)

    __hash__ = None


def partition(params, /):
    """
    split `params` into (flags, positionals).

    flags is the leading run of flag parameters, positionals everything after
    it. check_order() guarantees no flag follows a positional.
    """
    params = tuple(params)
    index = 0
    while index < len(params) and params[index].is_flag:
        index += 1
    return params[:index], params[index:]


def params(*quads):
    """
    build a tuple of Param from (name, kind, default, doc) quadruples.

    raises
    - TypeError: an argument is not a tuple/list.
    - ValueError: an argument does not hold exactly four items.
    """
    result = []
    for index, quad in enumerate(quads, 1):
        if not isinstance(quad, (tuple, list)):
            raise TypeError("params() %s argument must be a (name, kind, default, doc) tuple" % ordinal(index))
        if len(quad) != 4:
            raise ValueError("params() %s argument has %d %s, want 4" % (
                ordinal(index), len(quad), pluralize("item", len(quad))
            ))
        result.append(Param(*quad))
    return tuple(result)


def commands(*groups):
    """
    build a name -> Subcmd mapping.

    each argument is either (name, Subcmd) or (name, handler, desc, params),
    where params may be None for a subcommand without parameters.
    """
    result = {}
    for index, group in enumerate(groups, 1):
        if not isinstance(group, (tuple, list)):
            raise TypeError("commands() %s argument must be a tuple" % ordinal(index))
        match tuple(group):
            case (str() as name, Subcmd() as subcmd):
                pass
            case (str() as name, handler, str() as desc, quads):
                subcmd = Subcmd(handler, () if quads is None else quads, desc)
            case (str(), _) | (str(), _, _, _):
                raise TypeError("commands() %s argument has the wrong item types" % ordinal(index))
            case (_, *_) if len(group) in (2, 4):
                raise TypeError("commands() %s argument must start with a name" % ordinal(index))
            case _:
                raise ValueError("commands() %s argument has %d %s, want 2 or 4" % (
                    ordinal(index), len(group), pluralize("item", len(group))
                ))
        if name in result:
            raise ValueError("commands() got subcommand %r twice" % name)
        result[name] = subcmd
    return result


__all__ = (
    "Param",
    "Subcmd",
    "partition",
    "params",
    "commands",
)
