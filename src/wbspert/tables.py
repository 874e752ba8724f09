"""Markdown tables and lists derived from the task list, plus epic story files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger

from .model import StatusKind, TaskRecord

TABLE_ROW = "| {} | {} | {} | {} | {} |"

EPIC_HEADER = """---
title: "{id}: {title}"
linkTitle: {id}
---

"""


class EpicDirError(FileNotFoundError):
    """The directory for epic story files does not exist."""


def wbs_table_header() -> str:
    return "\n".join(
        [
            TABLE_ROW.format("WBS", "Status", "Task", "Parents", "Duration"),
            TABLE_ROW.format("---", "------", "----", "-------", "--------"),
        ]
    )


def wbs_table_row(task: TaskRecord) -> str:
    title = task.title
    if task.status_kind is StatusKind.COMPLETE:
        title = f"~~{title}~~"
    return TABLE_ROW.format(task.id, task.status, title, task.parents, f"{task.duration:.2f}")


def render_wbs_table(
    tasks: Iterable[TaskRecord],
    *,
    active_only: bool = False,
    filter_value: str = "",
) -> str:
    lines = [wbs_table_header()]
    for task in tasks:
        if active_only and task.is_completed:
            continue
        if filter_value and not task.matches(filter_value):
            continue
        lines.append(wbs_table_row(task))
    return "\n".join(lines) + "\n"


def render_bug_list(tasks: Iterable[TaskRecord], *, active_only: bool = False) -> str:
    lines = ["| Repo | Status | Title |", "| --- | --- | --- |"]
    for task in tasks:
        if active_only and task.is_completed:
            continue
        if task.is_bug:
            lines.append(f"| {task.repo} | {task.status} | {task.title} |")
    return "\n".join(lines) + "\n"


def render_epic_list(tasks: Iterable[TaskRecord]) -> str:
    """Checklist of epics; finished ones are ticked."""
    lines = []
    for task in tasks:
        if not task.is_epic:
            continue
        mark = "x" if task.status_kind is StatusKind.COMPLETE else " "
        lines.append(f"- [{mark}] {task.title}\n")
    return "".join(lines)


def epic_story(task: TaskRecord) -> str:
    return (
        EPIC_HEADER.format(id=task.id, title=task.title)
        + f"**Status:** {task.status} \n"
        + "\n"
        + task.body
    )


def write_epic_stories(tasks: Iterable[TaskRecord], epic_dir: Path) -> list[Path]:
    """Write ``<id>.md`` for every epic into ``epic_dir``.

    Raises:
        EpicDirError: ``epic_dir`` does not exist.
    """
    if not epic_dir.is_dir():
        raise EpicDirError(f"Epic directory doesn't exist: {epic_dir}")
    written: list[Path] = []
    for task in tasks:
        if not task.is_epic:
            continue
        path = epic_dir / f"{task.id}.md"
        path.write_text(epic_story(task), encoding="utf-8")
        written.append(path)
    logger.info("Wrote {} epic stor{} to {}", len(written), "y" if len(written) == 1 else "ies", epic_dir)
    return written
