# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Help text rendered from the command registry.

Everything here is a pure function of the registry: no I/O, no handler
calls, same output for the same table.
"""

from collections.abc import Sequence

from ..lib.core.config import DEFAULT_ENVIRONMENT, ENVIRONMENTS
from .registry import ArgKind, ArgumentSpec, CommandGroup, CommandRegistry, Subcommand

PROG = "usertests"

_MIN_COLUMN = 18


def shared_option_rows() -> list[tuple[str, str]]:
    return [
        ("--env <env>", f"{' | '.join(ENVIRONMENTS)} (default: {DEFAULT_ENVIRONMENT})"),
        ("--local", "shortcut for --env local"),
        ("--json", "print the raw JSON response"),
    ]


def _table(rows: Sequence[tuple[str, str]], indent: str = "  ") -> list[str]:
    if not rows:
        return []
    width = max(_MIN_COLUMN, max(len(left) for left, _ in rows) + 2)
    return [f"{indent}{left.ljust(width)}{right}".rstrip() for left, right in rows]


def command_path(group: CommandGroup, subcommand: Subcommand) -> str:
    if group.is_direct:
        return f"{PROG} {group.name}"
    return f"{PROG} {group.name} {subcommand.name}"


def _usage_token(arg: ArgumentSpec) -> str:
    if arg.kind is ArgKind.FLAG:
        return f"[{arg.flag}]"
    if arg.kind is ArgKind.VARIADIC:
        token = f"{arg.placeholder}..."
        return token if arg.required else f"[{token}]"
    if arg.kind is ArgKind.POSITIONAL:
        return arg.placeholder if arg.required else f"[{arg.placeholder}]"

    token = f"{arg.flag} {arg.placeholder}".rstrip()
    if not arg.required:
        token = f"[{token}]"
    if arg.repeatable:
        token += "..."
    return token


def usage_line(group: CommandGroup, subcommand: Subcommand) -> str:
    """One-line synopsis: positionals first, then options in declaration order."""
    parts = [command_path(group, subcommand)]
    parts.extend(_usage_token(a) for a in subcommand.positionals)
    parts.extend(_usage_token(a) for a in subcommand.options)
    return " ".join(parts)


def _argument_label(arg: ArgumentSpec) -> str:
    if arg.is_positional:
        return arg.placeholder
    if arg.kind is ArgKind.FLAG:
        return arg.flag
    return f"{arg.flag} {arg.placeholder}".rstrip()


def _argument_note(arg: ArgumentSpec) -> str:
    notes = []
    if arg.required and not arg.is_positional:
        notes.append("required")
    if arg.repeatable:
        notes.append("repeatable")
    if not notes:
        return arg.help
    suffix = f"({', '.join(notes)})"
    return f"{arg.help} {suffix}" if arg.help else suffix


def render_root_help(registry: CommandRegistry, examples: Sequence[str] = ()) -> str:
    lines = [
        "UserTests CLI",
        "",
        "Usage:",
        f"  {PROG} <group> <command> [options]",
        "",
        "Command groups:",
    ]
    lines += _table([(g.name, g.summary) for g in registry.list_groups()])
    lines += ["", "Environment options:"]
    lines += _table(shared_option_rows())

    if examples:
        lines += ["", "Examples:"]
        lines += [f"  {PROG} {example}" for example in examples]

    lines += ["", "Group help:"]
    lines += [f"  {PROG} {g.name} --help" for g in registry.list_groups()]

    aliases = registry.aliases()
    if aliases:
        lines += ["", "Aliases:"]
        lines += _table([(a.token, f"{a.group} {a.subcommand}") for a in aliases])

    lines += ["", "Other:"]
    lines += _table([("--version", "print the version and exit")])
    return "\n".join(lines) + "\n"


def render_group_help(registry: CommandRegistry, group: CommandGroup) -> str:
    """Help for one group; a direct-command group shows its command help."""
    if group.command is not None:
        return render_subcommand_help(registry, group, group.command)

    lines = [
        f"{PROG} {group.name} - {group.summary}",
        "",
        "Usage:",
        f"  {PROG} {group.name} <command> [options]",
        "",
        "Commands:",
    ]
    lines += _table([(s.name, s.summary) for s in group.subcommands])
    lines += ["", "Shared options:"]
    lines += _table(shared_option_rows())
    lines += ["", f'Run "{PROG} {group.name} <command> --help" for command options.']
    return "\n".join(lines) + "\n"


def render_subcommand_help(registry: CommandRegistry, group: CommandGroup, subcommand: Subcommand) -> str:
    lines = [
        "Usage:",
        f"  {usage_line(group, subcommand)}",
        "",
        subcommand.summary,
    ]

    positionals = [(_argument_label(a), _argument_note(a)) for a in subcommand.positionals]
    if positionals:
        lines += ["", "Arguments:"]
        lines += _table(positionals)

    options = [(_argument_label(a), _argument_note(a)) for a in subcommand.options]
    if options:
        lines += ["", "Options:"]
        lines += _table(options)

    if subcommand.examples:
        lines += ["", "Examples:"]
        lines += [f"  {PROG} {example}" for example in subcommand.examples]

    aliases = [
        a.token
        for a in registry.aliases()
        if a.group == group.name and a.subcommand == subcommand.name
    ]
    if aliases:
        lines += ["", f"Alias: {', '.join(f'{PROG} {token}' for token in aliases)}"]
    return "\n".join(lines) + "\n"
