"""
subcmd binding: turn raw tokens into the argument vector of a handler.

Phases
- to_flag_set(params): one Flag per flag parameter (dashes stripped) holding
  the coerced default; VALUE defaults are cloned so the declaration is never
  mutated.
- FlagSet.parse(tokens): consume the leading flag tokens.
- positionals, in order: take one token each and parse it by kind; with no
  token left an optional positional ("name?") takes its coerced default and
  a required one raises TooFewArgsError right away.
- leftovers become the tail.

The handler later receives (ctx, *flag values, *positional values, tail), or
the tail spread out when it declares *rest. The ctx it gets is the input
context with the FlagSet attached (or None when there are no flags).
"""
import logging

from .coercion import coerce
from .faults import CoercionError, ConfigurationError, ParamDefaultError, ParseError, TooFewArgsError
from .flags import FlagSet
from .kinds import Kind
from .parameters import partition
from .utils import pluralize

log = logging.getLogger(__name__)


class Binding:
    """
    the bound argument vector of one invocation.

    attributes
    - ctx: the Context the handler receives.
    - values: tuple of flag then positional values, in parameter order.
    - tail: list of leftover tokens.
    - variadic: True when the tail is spread into *rest.
    """

    __slots__ = ("ctx", "values", "tail", "variadic")

    def __init__(self, ctx, values, tail, variadic=False):
        self.ctx = ctx
        self.values = tuple(values)
        self.tail = list(tail)
        self.variadic = bool(variadic)

    def arguments(self):
        if self.variadic:
            return (self.ctx, *self.values, *self.tail)
        return (self.ctx, *self.values, list(self.tail))

    def __repr__(self):
        return "binding(values=%r, tail=%r, variadic=%r)" % (self.values, self.tail, self.variadic)


def _default(param):
    try:
        return coerce(param.kind, param.default)
    except CoercionError as error:
        raise ParamDefaultError(param, param.kind, type(param.default), reason=error.reason) from error


def to_flag_set(params, /, name=""):
    """
    build the FlagSet of a parameter list.

    returns (flag_set, holders, positionals) where holders are the Flag
    objects in parameter order and positionals the non-flag parameters.
    """
    flags, positionals = partition(params)
    for param in positionals:
        if param.is_flag:
            raise ConfigurationError("flag parameter %r follows a positional parameter" % param.name)

    flag_set = FlagSet(name)
    holders = []
    for param in flags:
        try:
            holders.append(flag_set.add(param.flag_name, param.kind, param.default, param.doc))
        except CoercionError as error:
            raise ParamDefaultError(param, param.kind, type(param.default), reason=error.reason) from error
    return flag_set, holders, positionals


def _positional(param, tokens):
    if not tokens:
        if not param.is_optional:
            raise TooFewArgsError(param)
        return _default(param)

    token = tokens.pop(0)
    into = _default(param) if param.kind is Kind.VALUE else None
    try:
        return param.kind.parse(token, into=into)
    except Exception as error:
        raise ParseError(param, token, error) from error


def bind(ctx, params, tokens, /, variadic=False, *, name=""):
    """
    parse `tokens` against `params` and return a Binding.

    raises FlagParseError, ParseError or TooFewArgsError; nothing is
    called when binding fails.
    """
    flag_set, holders, positionals = to_flag_set(params, name)
    tokens = flag_set.parse(tokens)
    ctx = ctx.with_flag_set(flag_set if holders else None)

    values = [holder.value for holder in holders]
    for param in positionals:
        values.append(_positional(param, tokens))

    log.debug("bound %s: %d %s, tail %r", name or "subcommand", len(values),
              pluralize("value", len(values)), tokens)
    return Binding(ctx, values, tokens, variadic)


__all__ = (
    "Binding",
    "to_flag_set",
    "bind",
)
