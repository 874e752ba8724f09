"""Render a task list as a PlantUML work-breakdown outline."""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from .constants import DEFAULT_WBS_FLOOR, FOOTER, LEGEND, ROOT_LINE
from .model import TaskRecord

WBS_MARKER = "*"
COLLAPSED_MARKER = "_"


def wbs_line(task: TaskRecord, floor: int = 0) -> str:
    """Return the outline line for ``task``.

    Depth-1 tasks are printed one level down because the synthetic
    ``* Project`` root owns level 1. Tasks deeper than a positive ``floor``
    get the collapsed marker.
    """
    level = task.depth
    markers = WBS_MARKER * max(level, 2)
    color = task.color
    if color:
        markers += f"[{color}]"
    if floor > 0 and level > floor:
        markers += COLLAPSED_MARKER
    return f"{markers} {task.id}: {task.title}"


def render_wbs(
    tasks: Iterable[TaskRecord],
    *,
    floor: int = DEFAULT_WBS_FLOOR,
    active_only: bool = False,
) -> str:
    """Render the full ``@startwbs`` document, tasks kept in input order."""
    lines = ["@startwbs", ROOT_LINE]
    skipped = 0
    for task in tasks:
        if active_only and task.is_completed:
            skipped += 1
            continue
        lines.append(wbs_line(task, floor))
    logger.debug("WBS outline: {} task line(s), {} completed skipped", len(lines) - 2, skipped)
    return "\n".join(lines) + "\n" + FOOTER + LEGEND + "@endwbs\n"
