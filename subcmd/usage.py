"""
subcmd usage text: how to call a set of subcommands, or one of them.

Plain text (what str(error) and error.detail() return)
- subcommand_list(header, subcmds):
      Subcommands are:
      a    Do a
      bb   Do b
- usage_line(name, subcmd, path=()):
      usage: prog a [-a1] [-a2 int] [-a3 word] a4 [a5]
- usage_detail(name, subcmd, path=()):
      a: Do a
      Usage: prog a [-a1] [-a2 int] [-a3 word] a4 [a5]
      -a1       the a1 flag
      -a2 int   the a2 flag
      -a3 word  a word flag

Rich output (what report() prints for usage faults)
- render_usage(fault): the same information as tables, styled with the
  palette below; __main__.__styles__ overrides any entry.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Group
from rich.table import Table
from rich.text import Text

from .faults import (
    ConfigurationError, HelpRequestedError, MissingSubcmdError, ParamDefaultError, UnknownSubcmdError, prog
)
from .flags import unquote_usage
from .parse import to_flag_set


def subcommand_list(header, subcmds, /):
    """
    header line, then one aligned "name  description" row per subcommand.
    """
    names = sorted(subcmds)
    width = max(map(len, names), default=0)
    lines = [header + "\n"]
    for name in names:
        lines.append("%-*.*s  %s\n" % (width, width, name, subcmds[name].desc))
    return "".join(lines)


def _words(name, subcmd, path):
    flag_set, _, positionals = to_flag_set(subcmd.params, name)
    words = [prog(), *path, name]
    for flag in flag_set:
        label, _ = unquote_usage(flag)
        words.append("[-%s %s]" % (flag.name, label) if label else "[-%s]" % flag.name)
    for param in positionals:
        words.append("[%s]" % param.display_name if param.is_optional else param.name)
    return flag_set, words


def usage_line(name, subcmd, /, path=()):
    """
    one-line usage of a subcommand.
    """
    try:
        _, words = _words(name, subcmd, path)
    except (ConfigurationError, ParamDefaultError) as error:
        return "error constructing usage string: %s" % error
    return "usage: " + " ".join(words)


def usage_detail(name, subcmd, /, path=()):
    """
    description line, usage line and one aligned row per flag.
    """
    try:
        flag_set, words = _words(name, subcmd, path)
    except (ConfigurationError, ParamDefaultError) as error:
        return "error constructing usage string: %s" % error

    lines = []
    if subcmd.desc:
        lines.append("%s: %s\n" % (name, subcmd.desc))
    lines.append("Usage: %s\n" % " ".join(words))

    rows = []
    for flag in flag_set:
        label, usage = unquote_usage(flag)
        rows.append(("%s %s" % (flag.name, label) if label else flag.name, usage))
    width = max((len(left) for left, _ in rows), default=0)
    for left, usage in rows:
        lines.append("-%-*.*s  %s\n" % (width, width, left, usage))
    return "".join(lines)


def _palette():
    return defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "description-section": "italic #A3A3A3",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",
        "children-title": "bold #FFFFFF",
        "children-table": "#4B5563",
        "children": "bold #36C5F0",
        "children-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _subcommand_table(title, subcmds, styles):
    table = Table("name", "description", title=Text(title, styles["children-title"]), box=ROUNDED,
                  style=styles["children-table"], header_style=styles["children-title"], title_justify="left")
    for name in sorted(subcmds):
        table.add_row(Text(name, styles["children"]), Text(subcmds[name].desc, styles["children-description"]))
    return table


def _subcommand_usage(name, subcmd, path, styles):
    try:
        flag_set, words = _words(name, subcmd, path)
    except (ConfigurationError, ParamDefaultError) as error:
        return Text("error constructing usage string: %s" % error)

    renders = []
    if subcmd.desc:
        renders.append(Text.assemble(Text(name, styles["program-name"]), ": ",
                                     Text(subcmd.desc, styles["description-section"])))
    usage = Text()
    usage.append("usage", styles["usage-label"]).append(": ")
    usage.append(" ".join(words[:len(path) + 2]), styles["program-name"])
    if rest := words[len(path) + 2:]:
        usage.append(" ").append(" ".join(rest))
    renders.append(usage)

    if len(flag_set):
        table = Table.grid(padding=(0, 2))
        for flag in flag_set:
            label, doc = unquote_usage(flag)
            left = Text.assemble(Text("-" + flag.name, styles["flag-name"]))
            if label:
                left.append(" ").append(label, styles["metavar"])
            table.add_row(left, Text(doc, styles["argument-description"]))
        renders.append(table)
    return Group(*renders)


def render_usage(fault, /):
    """
    rich renderable for a usage fault (missing/unknown subcommand, help).
    """
    styles = _palette()
    match fault:
        case MissingSubcmdError():
            return _subcommand_table("Missing subcommand, want one of:", fault.subcmds, styles)
        case UnknownSubcmdError():
            return _subcommand_table('Unknown subcommand "%s", want one of:' % fault.name, fault.subcmds, styles)
        case HelpRequestedError(name=None):
            return _subcommand_table("Subcommands are:", fault.subcmds, styles)
        case HelpRequestedError() if fault.name not in fault.subcmds:
            return _subcommand_table('Unknown subcommand "%s", want one of:' % fault.name, fault.subcmds, styles)
        case HelpRequestedError():
            return _subcommand_usage(fault.name, fault.subcmds[fault.name], fault.path, styles)
        case _:
            raise TypeError("render_usage() argument must be a usage fault, not %r" % type(fault).__name__)


__all__ = (
    "subcommand_list",
    "usage_line",
    "usage_detail",
    "render_usage",
)
