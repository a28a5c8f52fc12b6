# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Declarative command registry.

The registry is the single description of every command group, subcommand
and argument. The dispatcher (``main``) and the help renderer (``help``)
both read it, so parsing behavior and ``--help`` output come from the same
table.

Shape::

    CommandRegistry
      └── CommandGroup ("project")
            └── Subcommand ("create") ── ArgumentSpec ("--name", option, required)
                                      └─ handler(ParsedInvocation)

A group either owns subcommands (``usertests project list``) or is itself a
command (``usertests api GET /api/projects``), in which case ``command`` is
set. Legacy top-level aliases map a token to a (group, subcommand) pair.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ArgKind(Enum):
    OPTION = "option"
    """``--name <value>``"""

    FLAG = "flag"
    """``--name`` (boolean, consumes no value)"""

    POSITIONAL = "positional"
    """One bare token."""

    VARIADIC = "variadic"
    """Every remaining bare token."""


@dataclass(frozen=True)
class ArgumentSpec:
    """One flag or positional accepted by a subcommand."""

    name: str
    """Flag name without dashes (``dry-run``) or positional name (``project_id``)."""

    kind: ArgKind
    placeholder: str = ""
    """Help placeholder: ``<projectId>`` for positionals, ``<name>`` for option values."""

    help: str = ""
    required: bool = False
    repeatable: bool = False
    """Option occurrences accumulate into a list (``--header a:1 --header b:2``)."""

    @property
    def dest(self) -> str:
        """Key under which the parsed value is stored."""
        return self.name.replace("-", "_")

    @property
    def is_positional(self) -> bool:
        return self.kind in (ArgKind.POSITIONAL, ArgKind.VARIADIC)

    @property
    def flag(self) -> str:
        return f"--{self.name}"

    def default(self) -> Any:
        if self.kind is ArgKind.FLAG:
            return False
        if self.repeatable or self.kind is ArgKind.VARIADIC:
            return []
        return None


def positional(name: str, placeholder: str, help: str = "", *, required: bool = True) -> ArgumentSpec:
    return ArgumentSpec(name, ArgKind.POSITIONAL, placeholder, help, required=required)


def variadic(name: str, placeholder: str, help: str = "", *, required: bool = False) -> ArgumentSpec:
    return ArgumentSpec(name, ArgKind.VARIADIC, placeholder, help, required=required)


def option(
    name: str,
    placeholder: str,
    help: str = "",
    *,
    required: bool = False,
    repeatable: bool = False,
) -> ArgumentSpec:
    return ArgumentSpec(name, ArgKind.OPTION, placeholder, help, required=required, repeatable=repeatable)


def flag(name: str, help: str = "") -> ArgumentSpec:
    return ArgumentSpec(name, ArgKind.FLAG, "", help)


@dataclass(frozen=True)
class Subcommand:
    """An action within a group, e.g. ``project create``."""

    name: str
    summary: str
    handler: Handler
    arguments: tuple[ArgumentSpec, ...] = ()
    examples: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        optional_seen = False
        positionals = [a for a in self.arguments if a.is_positional]
        for arg in self.arguments:
            if arg.dest in seen:
                raise ValueError(f"{self.name}: duplicate argument '{arg.name}'")
            seen.add(arg.dest)
            if arg.kind is ArgKind.FLAG and arg.required:
                raise ValueError(f"{self.name}: boolean flag '{arg.flag}' cannot be required")
        for index, arg in enumerate(positionals):
            if arg.kind is ArgKind.VARIADIC and index != len(positionals) - 1:
                raise ValueError(f"{self.name}: variadic '{arg.name}' must be the last positional")
            if arg.required and optional_seen:
                raise ValueError(
                    f"{self.name}: required positional '{arg.name}' follows an optional one"
                )
            if not arg.required:
                optional_seen = True

    @property
    def positionals(self) -> list[ArgumentSpec]:
        return [a for a in self.arguments if a.is_positional]

    @property
    def options(self) -> list[ArgumentSpec]:
        return [a for a in self.arguments if not a.is_positional]

    def find_option(self, name: str) -> ArgumentSpec | None:
        for arg in self.arguments:
            if not arg.is_positional and arg.name == name:
                return arg
        return None


@dataclass(frozen=True)
class CommandGroup:
    """A top-level command namespace, e.g. ``project``."""

    name: str
    summary: str
    subcommands: tuple[Subcommand, ...] = ()
    command: Subcommand | None = None
    """Set for groups invoked directly (``api``); mutually exclusive with subcommands."""

    def __post_init__(self) -> None:
        if bool(self.subcommands) == (self.command is not None):
            raise ValueError(f"group '{self.name}' needs either subcommands or a direct command")
        names = [s.name for s in self.subcommands]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"group '{self.name}': duplicate subcommands {sorted(duplicates)}")

    @property
    def is_direct(self) -> bool:
        return self.command is not None


@dataclass(frozen=True)
class Alias:
    token: str
    group: str
    subcommand: str


@dataclass
class ParsedInvocation:
    """Resolved, validated representation of one CLI invocation."""

    group: CommandGroup | None = None
    subcommand: Subcommand | None = None
    values: dict[str, Any] = field(default_factory=dict)
    residual: list[str] = field(default_factory=list)
    help_requested: bool = False

    def get(self, name: str, default: Any = None) -> Any:
        value = self.values.get(name.replace("-", "_"), default)
        return default if value is None else value

    def __getitem__(self, name: str) -> Any:
        return self.values[name.replace("-", "_")]


Handler = Callable[[ParsedInvocation], "int | None"]


class CommandRegistry:
    """Read-only lookup table over command groups and legacy aliases."""

    def __init__(self, groups: Iterable[CommandGroup], aliases: Sequence[Alias] = ()) -> None:
        self._groups: dict[str, CommandGroup] = {}
        self._owners: dict[int, CommandGroup] = {}
        for group in groups:
            if group.name in self._groups:
                raise ValueError(f"duplicate command group '{group.name}'")
            self._groups[group.name] = group
            owned = group.subcommands if group.command is None else (group.command,)
            for sub in owned:
                if id(sub) in self._owners:
                    raise ValueError(f"subcommand '{sub.name}' is owned by more than one group")
                self._owners[id(sub)] = group

        self._aliases: dict[str, Alias] = {}
        self._alias_targets: dict[str, tuple[CommandGroup, Subcommand]] = {}
        for alias in aliases:
            if alias.token in self._aliases:
                raise ValueError(f"duplicate alias '{alias.token}'")
            target_group = self._groups.get(alias.group)
            target = None if target_group is None else self.resolve_subcommand(target_group, alias.subcommand)
            if target is None:
                raise ValueError(
                    f"alias '{alias.token}' targets unknown command '{alias.group} {alias.subcommand}'"
                )
            self._aliases[alias.token] = alias
            self._alias_targets[alias.token] = (target_group, target)

    def list_groups(self) -> list[CommandGroup]:
        """Groups in declaration order."""
        return list(self._groups.values())

    def resolve_group(self, name: str) -> CommandGroup | None:
        return self._groups.get(name)

    def resolve_subcommand(self, group: CommandGroup, name: str) -> Subcommand | None:
        for sub in group.subcommands:
            if sub.name == name:
                return sub
        return None

    def resolve_alias(self, token: str) -> tuple[CommandGroup, Subcommand] | None:
        return self._alias_targets.get(token)

    def aliases(self) -> list[Alias]:
        return list(self._aliases.values())

    def owner_of(self, subcommand: Subcommand) -> CommandGroup:
        return self._owners[id(subcommand)]
