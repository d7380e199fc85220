"""
subcmd dispatching: pick a subcommand by name, bind its arguments, call it.

Overview
- run(ctx, cmd, args)
  • args[0] names the subcommand, the rest are its tokens.
  • no name              -> MissingSubcmdError
  • "help" [name]        -> HelpRequestedError (unless "help" is a subcommand)
  • undeclared -h/-help  -> HelpRequestedError for that subcommand
  • unknown name         -> the executable <prefix><name> when cmd is a
                            Prefixer and one is on $PATH, else UnknownSubcmdError
  • otherwise: check_map() (unless ctx.suppress_check), bind(), invoke().
- invoke(name, subcmd, binding): call the handler once; an exception it
  raises or returns comes back as HandlerError ("running <name>: ...").
- main(cmd, argv=None, ctx=None): run() for a console script; faults are
  reported on stderr and mapped to an exit status.

Delegated executables
- The executable gets the remaining tokens as arguments and a JSON snapshot
  of cmd in the SUBCMD_ENV environment variable; parse_env() decodes it on
  the other side. It shares stdin, stdout and stderr with this process.

Nesting
- A handler may call run() again with its ctx and its leftover tokens; the
  ctx records the path of subcommands entered so far, which usage lines show.
- Usage, flag and argument faults raised by the nested run() reach the
  caller unwrapped, so main() still exits 2 for them.
"""
import dataclasses
import inspect
import json
import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from .checker import check_map
from .context import Context
from .faults import *
from .parse import bind

log = logging.getLogger(__name__)

# faults caused by the command line rather than by a handler
_COMMAND_LINE_FAULTS = (UsageError, FlagParseError, ParseError, TooFewArgsError)

ENV_VAR = "SUBCMD_ENV"


@runtime_checkable
class Cmd(Protocol):
    """
    anything that lists subcommands: subcmds() -> mapping of name to Subcmd.
    """

    def subcmds(self): ...


@runtime_checkable
class Prefixer(Protocol):
    """
    a Cmd whose unknown subcommands are looked up as executables named
    prefix() + name.
    """

    def prefix(self): ...


def _subcmds(cmd):
    if isinstance(cmd, Mapping):
        return dict(cmd)
    if isinstance(cmd, Cmd):
        subcmds = cmd.subcmds()
        if not isinstance(subcmds, Mapping):
            raise TypeError("subcmds() must return a mapping, got %r" % (subcmds,))
        return dict(subcmds)
    raise TypeError("expected a Cmd or a mapping of subcommands, got %r" % (cmd,))


def snapshot(cmd, /):
    """
    JSON text describing `cmd` for a delegated executable.

    dataclasses are encoded field by field, other objects through their
    public attributes; values JSON cannot hold are encoded as strings.
    """
    if dataclasses.is_dataclass(cmd) and not isinstance(cmd, type):
        data = dataclasses.asdict(cmd)
    elif isinstance(cmd, Mapping):
        data = {}
    else:
        try:
            data = {name: value for name, value in vars(cmd).items() if not name.startswith("_")}
        except TypeError:
            data = {}
    return json.dumps(data, default=str)


def parse_env(target=None, /):
    """
    decode the SUBCMD_ENV variable set by a delegating parent.

    returns None when the variable is unset or empty, the decoded object
    otherwise, or target(**data) when a factory is given.
    raises ValueError (json.JSONDecodeError) on malformed JSON.
    """
    if not (text := os.environ.get(ENV_VAR, "")):
        return None
    data = json.loads(text)
    if target is None:
        return data
    if not isinstance(data, dict):
        raise TypeError("%s holds %s, want a JSON object" % (ENV_VAR, type(data).__name__))
    return target(**data)


def _delegate(cmd, name, args, subcmds, path):
    prefix = cmd.prefix()
    if (executable := shutil.which(prefix + name)) is None:
        raise UnknownSubcmdError(subcmds, name, path=path)

    log.debug("delegating %s to %s", name, executable)
    env = os.environ | {ENV_VAR: snapshot(cmd)}
    try:
        process = subprocess.run([executable, *args], env=env, check=False)
    except OSError as error:
        raise DelegatedError("running %s: %s" % (executable, error), executable=executable) from error
    if process.returncode:
        raise DelegatedError("running %s: exit status %d" % (executable, process.returncode),
                             executable=executable, returncode=process.returncode)


def invoke(name, subcmd, binding, /):
    """
    call the handler of `subcmd` with the bound arguments.

    raises HandlerError when the handler raises an Exception or returns one;
    usage, flag and argument faults from a nested run() pass through as is.
    """
    try:
        result = subcmd.handler(*binding.arguments())
    except _COMMAND_LINE_FAULTS:
        raise
    except Exception as error:
        raise HandlerError(name, error) from error
    if isinstance(result, BaseException):
        raise HandlerError(name, result) from result


def run(ctx, cmd, args, /):
    """
    run the subcommand of `cmd` named by args[0] with the remaining tokens.
    """
    if not isinstance(ctx, Context):
        raise TypeError("run() first argument must be a Context")
    subcmds = _subcmds(cmd)
    path = ctx.names

    if not args:
        raise MissingSubcmdError(subcmds, path=path)
    name, *args = args

    if name not in subcmds:
        if name == "help":
            raise HelpRequestedError(subcmds, args[0] if args else None, path=path)
        if isinstance(cmd, Prefixer):
            return _delegate(cmd, name, args, subcmds, path)
        raise UnknownSubcmdError(subcmds, name, path=path)

    if not ctx.suppress_check:
        check_map(subcmds)

    subcmd = subcmds[name]
    ctx = ctx.with_subcmd(name, subcmd)
    log.debug("running %s with %r", " ".join((*path, name)), args)

    handler = subcmd.handler
    try:
        binding = bind(ctx, subcmd.params, args, _variadic(handler), name=name)
    except FlagParseError as fault:
        if fault.help_requested:
            raise HelpRequestedError({name: subcmd}, name, path=path) from fault
        raise
    invoke(name, subcmd, binding)


def _variadic(handler):
    try:
        parameters = list(inspect.signature(handler).parameters.values())
    except (TypeError, ValueError):
        return False
    return bool(parameters) and parameters[-1].kind is inspect.Parameter.VAR_POSITIONAL


def main(cmd, argv=None, ctx=None, /, *, fancy=False):
    """
    run `cmd` for a console script and return an exit status.

    0 on success and for an explicit help request, 2 for command-line
    mistakes (usage, flag and argument errors), 1 for every other fault.
    faults are reported on stderr.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    ctx = Context.background() if ctx is None else ctx
    try:
        run(ctx, cmd, argv)
    except HelpRequestedError as fault:
        report(fault, fancy=fancy)
        return 0
    except _COMMAND_LINE_FAULTS as fault:
        report(fault, fancy=fancy)
        return 2
    except SubcmdError as fault:
        log.debug("%s failed", " ".join(argv[:1]) or "command", exc_info=True)
        report(fault, fancy=fancy)
        return 1
    return 0


__all__ = (
    "ENV_VAR",
    "Cmd",
    "Prefixer",
    "snapshot",
    "parse_env",
    "invoke",
    "run",
    "main",
)
