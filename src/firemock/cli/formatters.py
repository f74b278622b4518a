"""Formatting helpers for CLI presentation."""

from __future__ import annotations

import json
from typing import Any, Iterator, Tuple

from rich.table import Table

from firemock.core.tree.node import Node
from firemock.scenario import ScenarioResult


def format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return json.dumps(value)


def _walk(node: Node, path: str, depth: int, max_depth: int) -> Iterator[Tuple[str, Node, bool]]:
    for name in node.order:
        child = node.child(name)
        child_path = f"{path}/{name}" if path else name
        expand = child.has_children and depth + 1 < max_depth
        yield child_path, child, expand
        if expand:
            yield from _walk(child, child_path, depth + 1, max_depth)


def build_tree_table(node: Node, path: str = "", max_depth: int = 1) -> Table:
    """Children of ``node`` in comparator order, ``max_depth`` levels deep."""
    table = Table(title=f"/{path}", show_header=True, header_style="bold blue")
    table.add_column("Path", style="cyan")
    table.add_column("Priority", style="magenta")
    table.add_column("Value", style="green")

    for child_path, child, expanded in _walk(node, path, 0, max_depth):
        if expanded:
            value = ""
        elif child.has_children:
            value = f"{{{len(child.order)} children}}"
        else:
            value = format_value(child.to_value())
        priority = "" if child.priority is None else format_value(child.priority)
        table.add_row(f"/{child_path}", priority, value)
    return table


def build_event_table(result: ScenarioResult) -> Table:
    table = Table(title="Events")
    table.add_column("#", style="dim")
    table.add_column("Source")
    table.add_column("Event")
    table.add_column("Key")
    table.add_column("Prev")
    table.add_column("Value")
    for record in result.records:
        if record.error is not None:
            value = f"[red]{record.error}[/red]"
        elif record.event == "ok":
            value = ""
        else:
            value = format_value(record.value)
        table.add_row(
            str(record.sequence),
            record.source,
            record.event,
            record.key or "",
            record.prev_name or "",
            value,
        )
    return table


__all__ = ["build_event_table", "build_tree_table", "format_value"]
