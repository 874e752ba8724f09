"""Derive hierarchy facts from task identifiers and parent references."""

from __future__ import annotations

WBS_SEPARATOR = "."
PARENT_SEPARATOR = ","


def depth(task_id: str) -> int:
    """Return the outline depth of a dotted task id (``"2.1.1"`` is 3)."""
    return task_id.count(WBS_SEPARATOR) + 1


def parse_parents(raw: str) -> list[str]:
    """Split a comma-delimited parent list, trimming each entry.

    Order and empty entries are preserved, so ``""`` parses to ``[""]``.
    Callers treat an empty entry as "attach to Start", never as a node name.
    """
    return [part.strip() for part in raw.split(PARENT_SEPARATOR)]
