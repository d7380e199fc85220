"""
subcmd signature checking: does a handler fit its parameter list?

Scope
- check(subcmd): verify the handler signature against the declared params.
- check_map(mapping): check() every entry, in sorted name order.
- check_param(param): verify a default can be coerced into the param's kind.
- check_order(params): verify naming and ordering of a parameter list.

Handler shape
    handler(ctx, <one parameter per Param>, rest) -> None | Exception
    handler(ctx, <one parameter per Param>, *rest) -> None | Exception

Rules (checked in this order, first violation wins)
1. the handler is callable and inspectable               NOT_CALLABLE
2. every parameter is positional, *rest only last         PARAM_COUNT
3. len(params) + 2 parameters                             PARAM_COUNT
4. the first parameter accepts a Context                  MISSING_CONTEXT
5. the last is list[str]-accepting, or *rest: str         MISSING_COLLECTOR
6. each middle parameter accepts its kind's storage type  PARAM_TYPE
7. the return annotation is None or an exception type     NON_ERROR_RETURN
8. check_order(), then check_param() on every param

Annotations
- unannotated, Any and object accept everything; unions accept when any of
  their members does; int accepts bool (bool subclasses int).
- annotations that cannot be evaluated (forward references to names the
  handler's module does not define) accept everything.

All functions are pure: they only read the subcmd and raise on failure.
"""
import inspect
import logging
import types
import typing
from typing import Any

from .coercion import coerce
from .context import Context
from .faults import CoercionError, ConfigurationError, FaultCode, ParamDefaultError, SignatureError
from .kinds import Kind, Value
from .parameters import Param, Subcmd
from .utils import *

log = logging.getLogger(__name__)

_empty = inspect.Parameter.empty


def _members(annotation):
    """
    flatten an annotation into the types it admits (unions and Annotated unwrapped).
    """
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _members(typing.get_args(annotation)[0])
    if origin is typing.Union or origin is types.UnionType:
        return [member for argument in typing.get_args(annotation) for member in _members(argument)]
    if annotation is None:
        return [type(None)]
    return [annotation]


def _open(annotation):
    return annotation is _empty or annotation is Any or annotation is object or isinstance(annotation, str)


def _accepts(annotation, cls, /):
    """
    whether a parameter annotated `annotation` accepts values of class `cls`.
    """
    if _open(annotation):
        return True
    for member in _members(annotation):
        if _open(member) or isinstance(member, typing.TypeVar):
            return True
        target = typing.get_origin(member) or member
        if not isinstance(target, type):
            continue
        try:
            if issubclass(cls, target):
                return True
        except TypeError:
            # non runtime-checkable protocols
            return True
    return False


def _collects(annotation):
    """
    whether a parameter annotated `annotation` accepts a list of strings.
    """
    if _open(annotation):
        return True
    for member in _members(annotation):
        if _open(member):
            return True
        target = typing.get_origin(member) or member
        if not isinstance(target, type):
            continue
        try:
            if not issubclass(list, target):
                continue
        except TypeError:
            return True
        arguments = typing.get_args(member)
        if not arguments or _accepts(arguments[0], str):
            return True
    return False


def _returns_error(annotation):
    if _open(annotation):
        return True
    for member in _members(annotation):
        if member is type(None) or _open(member):
            continue
        if not (isinstance(member, type) and typing.get_origin(member) is None and issubclass(member, BaseException)):
            return False
    return True


def _signature(handler):
    try:
        return inspect.signature(handler, eval_str=True)
    except (NameError, SyntaxError, AttributeError, TypeError) as error:
        log.debug("cannot evaluate annotations of %r (%s), reading them as written", handler, error)
        return inspect.signature(handler)


def _name(annotation):
    if annotation is _empty:
        return "unannotated"
    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        return annotation.__qualname__
    return str(annotation).replace("typing.", "")


def _storage(param):
    if param.kind is Kind.VALUE:
        return type(param.default) if isinstance(param.default, Value) else Value
    return param.kind.storage


def check_param(param, /):
    """
    verify the default of `param` can be coerced into its kind.

    returns the coerced default; raises ParamDefaultError otherwise.
    """
    if not isinstance(param, Param):
        raise TypeError("check_param() argument must be a Param")
    try:
        return coerce(param.kind, param.default)
    except CoercionError as error:
        raise ParamDefaultError(param, param.kind, type(param.default), reason=error.reason) from error


def check_order(params, /):
    """
    verify names and ordering of a parameter list.

    - flag names are non-empty, unique, and contain neither "?" nor "=";
    - positional names are unique;
    - every flag precedes every positional;
    - no required positional follows an optional one.
    """
    flags, positionals = set(), set()
    optional = None
    for index, param in enumerate(params, 1):
        if not isinstance(param, Param):
            raise TypeError("%s parameter is not a Param: %r" % (ordinal(index), param))
        if param.is_flag:
            if positionals:
                raise ConfigurationError("flag %r follows a positional parameter" % param.name,
                                         hint="declare every flag before the positional parameters")
            name = param.flag_name
            if not name or "?" in name or "=" in name:
                raise ConfigurationError("bad flag name %r" % param.name,
                                         hint="flag names are a dash followed by a word without '?' or '='")
            if name in flags:
                raise ConfigurationError("flag %r declared twice" % name)
            flags.add(name)
            continue

        name = param.display_name
        if not name:
            raise ConfigurationError("bad positional name %r" % param.name)
        if name in positionals:
            raise ConfigurationError("positional parameter %r declared twice" % name)
        positionals.add(name)
        if param.is_optional:
            optional = param
        elif optional is not None:
            raise ConfigurationError(
                "required parameter %r follows optional parameter %r" % (param.name, optional.name),
                hint="move optional positional parameters after the required ones"
            )


def check(subcmd, /):
    """
    verify that `subcmd.handler` can be called with `subcmd.params`.

    raises SignatureError, ConfigurationError or ParamDefaultError on the
    first violation; returns None when the subcommand is sound.
    """
    if not isinstance(subcmd, Subcmd):
        raise TypeError("check() argument must be a Subcmd")
    handler, params = subcmd.handler, subcmd.params

    try:
        signature = _signature(handler)
    except (TypeError, ValueError) as error:
        raise SignatureError("handler %r is not an inspectable function" % (handler,),
                             reason=FaultCode.NOT_CALLABLE, got=handler) from error

    parameters = list(signature.parameters.values())
    want = len(params) + 2
    for index, parameter in enumerate(parameters):
        match parameter.kind:
            case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                pass
            case inspect.Parameter.VAR_POSITIONAL if index == len(parameters) - 1:
                pass
            case inspect.Parameter.VAR_POSITIONAL:
                raise SignatureError("*%s must be the last parameter" % parameter.name,
                                     reason=FaultCode.PARAM_COUNT, index=index, got=len(parameters), want=want,
                                     hint="collect the leftover arguments with a final *rest parameter")
            case _:
                raise SignatureError("handler takes %s parameter %r, want positional parameters only" % (
                    parameter.kind.description, parameter.name
                ), reason=FaultCode.PARAM_COUNT, index=index, got=len(parameters), want=want)

    if (got := len(parameters)) != want:
        raise SignatureError("handler has %d %s, want %d" % (got, pluralize("parameter", got), want),
                             reason=FaultCode.PARAM_COUNT, got=got, want=want, delta=got - want)

    first, *middle, last = parameters
    if not _accepts(first.annotation, Context):
        raise SignatureError("parameter 0 is %s, want Context" % _name(first.annotation),
                             reason=FaultCode.MISSING_CONTEXT, index=0, got=first.annotation, want=Context)

    if last.kind is inspect.Parameter.VAR_POSITIONAL:
        collects = _accepts(last.annotation, str)
    else:
        collects = _collects(last.annotation)
    if not collects:
        raise SignatureError("parameter %d is %s, want list[str]" % (got - 1, _name(last.annotation)),
                             reason=FaultCode.MISSING_COLLECTOR, index=got - 1, got=last.annotation, want=list[str])

    for index, (parameter, param) in enumerate(zip(middle, params), 1):
        if not _accepts(parameter.annotation, storage := _storage(param)):
            raise SignatureError("parameter %d is %s, want %s" % (index, _name(parameter.annotation), _name(storage)),
                                 reason=FaultCode.PARAM_TYPE, index=index, got=parameter.annotation, want=storage)

    if not _returns_error(signature.return_annotation):
        raise SignatureError("return type is %s, want None or an exception" % _name(signature.return_annotation),
                             reason=FaultCode.NON_ERROR_RETURN, got=signature.return_annotation, want=Exception)

    check_order(params)
    for param in params:
        check_param(param)


def check_map(subcmds, /):
    """
    check() every subcommand of a mapping, in sorted name order.

    the first failure is re-raised with "checking subcommand <name>: "
    prepended to its message and its `subcmd` attribute set to the name.
    """
    for name in sorted(subcmds):
        try:
            check(subcmds[name])
        except (SignatureError, ParamDefaultError, ConfigurationError) as error:
            error.message = "checking subcommand %s: %s" % (name, error.message)
            error.args = (error.message,)
            error.subcmd = name
            raise
        log.debug("checked subcommand %s", name)


__all__ = (
    "check",
    "check_map",
    "check_param",
    "check_order",
)
