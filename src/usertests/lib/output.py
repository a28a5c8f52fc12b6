# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Render backend responses as JSON, tables or key/value listings."""

import json
from typing import Any

MAX_CELL_WIDTH = 80


def print_output(data: Any, as_json: bool = False) -> None:
    """Print *data*: pretty JSON with *as_json*, otherwise a readable layout.

    A mapping whose first list-valued entry holds rows (``{"projects": [...],
    "total": 3}``) prints that list as a table followed by the remaining
    keys.
    """
    if as_json:
        print(json.dumps(data, indent=2))
        return

    if isinstance(data, list):
        print_table(data)
        return

    if isinstance(data, dict):
        entry = _first_list_entry(data)
        if entry is not None:
            key, rows = entry
            print(f"{key}:")
            print_table(rows)
            meta = {k: v for k, v in data.items() if k != key}
            if meta:
                print()
                print_object(meta)
            return
        print_object(data)
        return

    if data is None:
        print("(empty)")
        return

    print(str(data))


def print_table(rows: list[Any]) -> None:
    if not rows:
        print("(no results)")
        return

    normalized = [row if isinstance(row, dict) else {"value": row} for row in rows]
    columns: list[str] = []
    for row in normalized:
        for column in row:
            if column not in columns:
                columns.append(column)

    widths = [
        max([len(column)] + [len(format_cell(row.get(column))) for row in normalized])
        for column in columns
    ]

    print(" | ".join(column.ljust(widths[i]) for i, column in enumerate(columns)))
    print("-+-".join("-" * w for w in widths))
    for row in normalized:
        print(
            " | ".join(format_cell(row.get(column)).ljust(widths[i]) for i, column in enumerate(columns))
        )


def print_object(data: dict[str, Any]) -> None:
    if not data:
        print("{}")
        return

    for key, value in data.items():
        if isinstance(value, list):
            print(f"{key}: {len(value)} item(s)")
        elif isinstance(value, dict):
            print(f"{key}: {json.dumps(value)}")
        else:
            print(f"{key}: {format_cell(value)}")


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return truncate(value, MAX_CELL_WIDTH)
    if isinstance(value, (int, float)):
        return str(value)
    return truncate(json.dumps(value), MAX_CELL_WIDTH)


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return f"{value[: max_length - 3]}..."


def _first_list_entry(record: dict[str, Any]) -> tuple[str, list[Any]] | None:
    for key, value in record.items():
        if isinstance(value, list):
            return key, value
    return None
