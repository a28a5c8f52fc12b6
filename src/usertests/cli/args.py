# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Argument parsing against a subcommand's :class:`ArgumentSpec` list.

Rules:

- ``--name value`` and ``--name=value`` bind an option; boolean flags take
  no value.
- Bare tokens fill positionals in declaration order; a variadic positional
  takes all that remain.
- ``--help``/``-h`` anywhere (before ``--``) short-circuits to help.
- ``--`` ends option parsing; later tokens are kept as residual.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from ..lib.core.config import resolve_environment
from ..lib.errors import CliError, fail
from .registry import ArgKind, CommandGroup, ParsedInvocation, Subcommand

HELP_FLAGS = ("--help", "-h")
HELP_TOKENS = ("help", *HELP_FLAGS)
END_OF_OPTIONS = "--"

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


class ParseError(CliError):
    """The command line does not match the subcommand's arguments."""


def wants_help(tokens: list[str]) -> bool:
    for token in tokens:
        if token == END_OF_OPTIONS:
            return False
        if token in HELP_FLAGS:
            return True
    return False


def parse_invocation(group: CommandGroup, subcommand: Subcommand, tokens: list[str]) -> ParsedInvocation:
    """Bind *tokens* to *subcommand*'s arguments.

    Raises:
        ParseError: unknown option, missing value, extra positionals or a
            missing required argument.
    """
    invocation = ParsedInvocation(group=group, subcommand=subcommand)
    if wants_help(tokens):
        invocation.help_requested = True
        return invocation

    values: dict[str, Any] = {arg.dest: arg.default() for arg in subcommand.arguments}
    bare: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == END_OF_OPTIONS:
            invocation.residual = list(tokens[i + 1 :])
            break

        if not token.startswith("--"):
            bare.append(token)
            i += 1
            continue

        name, has_inline, inline = token[2:].partition("=")
        spec = subcommand.find_option(name)
        if spec is None:
            raise ParseError(f"Unknown option: --{name}")

        if spec.kind is ArgKind.FLAG:
            if has_inline:
                raise ParseError(f"Option --{name} does not take a value")
            values[spec.dest] = True
            i += 1
            continue

        if has_inline:
            value = inline
        else:
            if i + 1 >= len(tokens) or tokens[i + 1].startswith("--"):
                raise ParseError(f"Option --{name} requires a value {spec.placeholder}".rstrip())
            i += 1
            value = tokens[i]

        if spec.repeatable:
            values[spec.dest].append(value)
        else:
            values[spec.dest] = value
        i += 1

    for spec in subcommand.positionals:
        if spec.kind is ArgKind.VARIADIC:
            values[spec.dest] = bare
            bare = []
            break
        if not bare:
            break
        values[spec.dest] = bare.pop(0)

    if bare:
        raise ParseError(f"Unexpected extra arguments: {' '.join(bare)}")

    for spec in subcommand.arguments:
        if spec.required and values[spec.dest] in (None, "", []):
            if spec.is_positional:
                raise ParseError(f"Missing required argument: {spec.placeholder}")
            raise ParseError(f"Missing required option: {spec.flag}")

    invocation.values = values
    return invocation


# ---------------------------------------------------------------------------
# Value helpers used by command handlers
# ---------------------------------------------------------------------------


def environment(invocation: ParsedInvocation) -> str:
    """Environment selected by the shared ``--env``/``--local`` options."""
    return resolve_environment(invocation.get("env"), bool(invocation.get("local", False)))


def parse_json_or_file(value: str, field_label: str) -> Any:
    """Parse *value* as inline JSON, ``@file``, or a bare path to a JSON file."""
    if value.startswith("@") or (not _looks_like_json(value) and not _looks_like_inline_primitive(value)):
        path = Path(value[1:] if value.startswith("@") else value)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            fail(f"Invalid {field_label}. Expected JSON string or path to a JSON file. {e}")

    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        fail(f"Invalid {field_label} JSON: {e}")


def parse_header_pairs(values: list[str]) -> dict[str, str]:
    """Turn repeated ``--header key:value`` occurrences into a dict."""
    headers: dict[str, str] = {}
    for raw in values:
        key, sep, header_value = raw.partition(":")
        key, header_value = key.strip(), header_value.strip()
        if not sep or not key or not header_value:
            fail(f'Invalid header "{raw}". Expected format: key:value')
        headers[key] = header_value
    return headers


def parse_int(value: str, flag_name: str) -> int:
    try:
        return int(value)
    except ValueError:
        fail(f"Invalid {flag_name}: expected an integer, got {value!r}")


def _looks_like_json(value: str) -> bool:
    return value.strip().startswith(("{", "[", '"'))


def _looks_like_inline_primitive(value: str) -> bool:
    return value in ("true", "false", "null") or bool(_NUMBER_RE.match(value))
