"""
subcmd faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the
  dispatcher can surface, grouped by domain.
- SubcmdError and its subclasses: structured exceptions carrying the fields
  callers need (parameter, token, reason, wrapped error...) plus a
  friendly, rich-rendered representation.
- report(): print any fault on stderr through rich.

Domains
- registration (2xxxx): raised by the signature checker and the parameter
  model; meant to be caught once at program start (check_map).
- routing (111xx): missing/unknown subcommand, help requests.
- binding (112xx): flag syntax, positional conversion, too few arguments.
- execution (113xx): handler failures and delegated executables.

Integration
- Library code raises these exceptions; a CLI entry point (see
  subcmd.dispatch.main) catches SubcmdError and calls report().
- The host application may customize rendering from its __main__ module:
  __prog__ (program name), __styles__ (rich styles), __codes__ (code labels).
"""
import importlib
import os.path
import sys
from collections import defaultdict
from enum import IntEnum

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration (21xxx)
      • NOT_CALLABLE, PARAM_COUNT, PARAM_TYPE, MISSING_CONTEXT,
        MISSING_COLLECTOR, NON_ERROR_RETURN, PARAM_DEFAULT, CONFIGURATION
    - routing (111xx)
      • MISSING_SUBCOMMAND, UNKNOWN_SUBCOMMAND, HELP_REQUESTED
    - binding (112xx)
      • FLAG_PARSE, POSITIONAL_PARSE, TOO_FEW_ARGUMENTS
    - execution (113xx)
      • HANDLER_ERROR, DELEGATED_ERROR
    """
    # --- registration errors (21xxx) ---
    NOT_CALLABLE                = 21101
    PARAM_COUNT                 = 21102
    PARAM_TYPE                  = 21103
    MISSING_CONTEXT             = 21104
    MISSING_COLLECTOR           = 21105
    NON_ERROR_RETURN            = 21106
    PARAM_DEFAULT               = 21111
    CONFIGURATION               = 21121

    # --- routing errors (111xx) ---
    MISSING_SUBCOMMAND          = 11101
    UNKNOWN_SUBCOMMAND          = 11102
    HELP_REQUESTED              = 11103

    # --- binding errors (112xx) ---
    FLAG_PARSE                  = 11211
    POSITIONAL_PARSE            = 11221
    TOO_FEW_ARGUMENTS           = 11222

    # --- execution errors (113xx) ---
    HANDLER_ERROR               = 11311
    DELEGATED_ERROR             = 11312

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def prog():
    """
    program name used in headers and usage lines.

    __main__.__prog__ wins; otherwise the basename of sys.argv[0].
    """
    main = __import__("__main__")
    return getattr(main, "__prog__", None) or os.path.basename(sys.argv[0] if sys.argv else "") or "subcmd"


class SubcmdError(Exception):
    """
    base class of every fault raised by subcmd.

    attributes
    - message: one-line, lowercase description (also str(error)).
    - code: FaultCode of this fault.
    - title: short heading used by the renderer.
    - hint: one actionable sentence (may be empty).
    - subcmd: name of the subcommand being checked, set by check_map().
    """
    code = FaultCode.CONFIGURATION
    title = "subcommand error"
    hint = ""
    subcmd = None

    def __init__(self, message, /, *, hint=Unset):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.hint = coalesce(hint, type(self).hint)

    def __str__(self):
        return self.message

    def __rich__(self):
        return render(self)


class ConfigurationError(SubcmdError):
    """
    a parameter list or kind is unusable (unknown kind, bad names, ordering).
    """
    code = FaultCode.CONFIGURATION
    title = "invalid configuration"
    hint = "fix the parameter declarations of this subcommand"


class SignatureError(SubcmdError, TypeError):
    """
    a handler's signature does not match its parameter list.

    attributes
    - reason: FaultCode naming the violated rule (NOT_CALLABLE, PARAM_COUNT,
      PARAM_TYPE, MISSING_CONTEXT, MISSING_COLLECTOR, NON_ERROR_RETURN).
    - index: handler parameter index at fault, when meaningful.
    - got / want: what was found and what was expected (types or counts).
    - delta: for PARAM_COUNT, got minus want.
    """
    title = "handler signature mismatch"
    hint = "make the handler take (ctx, <one argument per parameter>, rest) and return None or an exception"

    def __init__(self, message, /, *, reason, index=None, got=None, want=None, delta=None, hint=Unset):
        super().__init__(message, hint=hint)
        self.reason = self.code = FaultCode(reason)
        self.index = index
        self.got = got
        self.want = want
        self.delta = delta


class ParamDefaultError(SubcmdError, TypeError):
    """
    a declared default cannot be coerced into its parameter's kind.

    attributes
    - param: the offending Param.
    - expected: the kind (or type name) the default had to match.
    - supplied: the concrete type of the default.
    """
    code = FaultCode.PARAM_DEFAULT
    title = "bad parameter default"
    hint = "give the parameter a default of its declared kind"

    def __init__(self, param, expected, supplied, /, *, reason=None):
        message = "default value %r of parameter %r is %s, want %s" % (
            param.default, param.name, getattr(supplied, "__name__", supplied), expected
        )
        if reason:
            message += " (%s)" % reason
        super().__init__(message)
        self.param = param
        self.expected = expected
        self.supplied = supplied


class CoercionError(SubcmdError, ValueError):
    """
    a coercion helper could not turn a value into its target kind.

    attributes
    - value: the rejected value.
    - expected: name of the target kind.
    - reason: optional detail ("out of range", ...).
    """
    code = FaultCode.PARAM_DEFAULT
    title = "cannot coerce value"

    def __init__(self, value, expected, /, reason=None):
        message = "cannot use %r (type %s) as %s" % (value, type(value).__name__, expected)
        if reason:
            message += ": %s" % reason
        super().__init__(message)
        self.value = value
        self.expected = expected
        self.reason = reason


class FlagParseError(SubcmdError):
    """
    a flag token is malformed, unknown, or carries a bad value.

    attributes
    - flag: the flag name involved (without dashes), if known.
    - token: the raw token at fault.
    - help_requested: True when the token was an undeclared -h/-help.
    """
    code = FaultCode.FLAG_PARSE
    title = "bad flag"
    hint = "check the flag spelling and its value"

    def __init__(self, message, /, *, flag=None, token=None, help_requested=False, hint=Unset):
        super().__init__(message, hint=hint)
        self.flag = flag
        self.token = token
        self.help_requested = help_requested


class ParseError(SubcmdError):
    """
    a positional token failed conversion for its parameter's kind.

    attributes
    - param: the Param being bound.
    - token: the raw token.
    - error: the underlying conversion exception (also __cause__).
    """
    code = FaultCode.POSITIONAL_PARSE
    title = "bad positional argument"
    hint = "pass a value of the expected kind"

    def __init__(self, param, token, error, /):
        super().__init__("parse error: parameter %r: %s" % (param.name, error))
        self.param = param
        self.token = token
        self.error = error


class TooFewArgsError(SubcmdError):
    """
    a required positional parameter has no token left to bind.
    """
    code = FaultCode.TOO_FEW_ARGUMENTS
    title = "too few arguments"
    hint = "supply every required positional argument"

    def __init__(self, param, /):
        super().__init__("too few arguments: missing %r" % param.name)
        self.param = param


class HandlerError(SubcmdError):
    """
    the handler reported an error; it is wrapped with the subcommand name.

    attributes
    - name: subcommand name.
    - error: the handler's exception (also __cause__).
    """
    code = FaultCode.HANDLER_ERROR
    title = "subcommand failed"

    def __init__(self, name, error, /):
        super().__init__("running %s: %s" % (name, error))
        self.name = name
        self.error = error


class DelegatedError(SubcmdError):
    """
    a delegated executable could not run or exited with a non-zero status.
    """
    code = FaultCode.DELEGATED_ERROR
    title = "delegated subcommand failed"

    def __init__(self, message, /, *, executable=None, returncode=None):
        super().__init__(message)
        self.executable = executable
        self.returncode = returncode


class UsageError(SubcmdError):
    """
    faults that explain how to call the program.

    str(error) is a one-line summary; detail() is a multi-line explanation.

    attributes
    - subcmds: the mapping of subcommand names to Subcmd being dispatched.
    - path: names of the enclosing subcommands (for nested dispatch).
    """
    hint = "run '%s help' to list subcommands"

    def __init__(self, message, /, subcmds, *, path=()):
        self.subcmds = dict(subcmds)
        self.path = tuple(path)
        super().__init__(message, hint=type(self).hint % " ".join((prog(), *self.path)))

    def detail(self):
        raise NotImplementedError

    def __rich__(self):
        return render(self, body=_usage().render_usage(self))


class MissingSubcmdError(UsageError):
    """
    run() was called without a subcommand name.
    """
    code = FaultCode.MISSING_SUBCOMMAND
    title = "missing subcommand"

    def __init__(self, subcmds, /, *, path=()):
        super().__init__("missing subcommand, want one of: %s" % "; ".join(sorted(subcmds)), subcmds, path=path)

    def detail(self):
        return _usage().subcommand_list("Missing subcommand, want one of:", self.subcmds)


class UnknownSubcmdError(UsageError):
    """
    run() was called with a name that is not a known subcommand.
    """
    code = FaultCode.UNKNOWN_SUBCOMMAND
    title = "unknown subcommand"

    def __init__(self, subcmds, name, /, *, path=()):
        self.name = name
        super().__init__(_unknown("unknown", name, subcmds), subcmds, path=path)

    def detail(self):
        return _usage().subcommand_list(_unknown("Unknown", self.name), self.subcmds)


class HelpRequestedError(UsageError):
    """
    the user asked for help ("help", "help <name>", or an undeclared -h).

    attributes
    - name: the subcommand help was asked for, or None for the overview.
    """
    code = FaultCode.HELP_REQUESTED
    title = "help"
    hint = "run '%s help <subcommand>' for the usage of one subcommand"

    def __init__(self, subcmds, /, name=None, *, path=()):
        self.name = name
        if name is None:
            message = "subcommands are: %s" % "; ".join(sorted(subcmds))
        elif name not in subcmds:
            message = _unknown("unknown", name, subcmds)
        else:
            message = _usage().usage_line(name, subcmds[name], path=path)
        super().__init__(message, subcmds, path=path)

    def detail(self):
        if self.name is None:
            return _usage().subcommand_list("Subcommands are:", self.subcmds)
        if self.name not in self.subcmds:
            return self.message
        return _usage().usage_detail(self.name, self.subcmds[self.name], path=self.path)


def _unknown(prefix, name, subcmds=None):
    text = '%s subcommand "%s"' % (prefix, name)
    if subcmds is None:
        return text + ", want one of:"
    return text + ", want one of: %s" % "; ".join(sorted(subcmds))


def _usage():
    # deferred: usage builds on params/parse, which import this module
    return importlib.import_module(".usage", __package__)


def render(fault, /, *, body=Unset, fancy=False, colorful=True):
    """
    build a rich renderable for a fault.

    layout
    - header: [ prog — code | title ]
    - body: the fault message, or a custom renderable (usage tables)
    - hint: → one actionable sentence, when the fault has one
    - fancy wraps everything in a Panel titled with the header.
    """
    main = __import__("__main__")

    styles = defaultdict(str, {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",
        "error-message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    } | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    if isinstance(fault, SubcmdError):
        code, title = fault.code.normalize(), fault.title
    else:
        code, title = type(fault).__name__, "error"

    header = Text.assemble("[ ", text(prog(), "prog-name"), " — ", text(code, "code"), " | ",
                           text(title.title(), "error-title"), " ]")
    parts = [text(str(fault), "error-message") if body is Unset else body]
    if hint := getattr(fault, "hint", ""):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


def report(fault, /, *, fancy=False, colorful=True):
    """
    print a fault on stderr.

    any exception is accepted; subcmd faults get their code, title and hint,
    usage faults their subcommand/flag tables, other exceptions their type name.
    """
    if not isinstance(fault, BaseException):
        raise TypeError("report() argument must be an exception")
    body = _usage().render_usage(fault) if isinstance(fault, UsageError) else Unset
    console.print(render(fault, body=body, fancy=fancy, colorful=colorful), highlight=False)


__all__ = (
    "FaultCode",
    "SubcmdError",
    "ConfigurationError",
    "SignatureError",
    "ParamDefaultError",
    "CoercionError",
    "FlagParseError",
    "ParseError",
    "TooFewArgsError",
    "HandlerError",
    "DelegatedError",
    "UsageError",
    "MissingSubcmdError",
    "UnknownSubcmdError",
    "HelpRequestedError",
    "render",
    "report",
    "prog",
)
