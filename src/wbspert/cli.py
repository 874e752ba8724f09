#!/usr/bin/env python3
"""Provide the ``wbspert`` command line.

Renders WBS outlines, PERT graphs, task tables and kanban boards from a task
list, optionally embedding each one into a managed region of a Markdown file.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.markup import escape

from .config import ConfigError, load_batch_config
from .constants import (
    BUG_TAG,
    CONFIG_FILE_ENV,
    DEFAULT_KANBAN_COLUMN,
    DEFAULT_PERT_LEVEL,
    EPIC_TAG,
    KANBAN_TAG,
    PERT_TAG,
    WBS_TABLE_TAG,
    WBS_TAG,
)
from .embed import embed_into_file, fence_plantuml
from .kanban import build_kanban
from .model import Board, TaskRecord
from .pert import build_pert_graph, render_pert
from .sources import TaskInputError, board_tasks, is_board_path, load_board, read_tasks_csv
from .tables import render_bug_list, render_epic_list, render_wbs_table, write_epic_stories
from .wbs import render_wbs

STDIO = "-"


def _configure_logging(level: str = "warning") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )


_configure_logging()


def _add_log_level(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error", "critical"],
        default="warning",
        help="Set logging level (default: warning)",
    )


def _build_render_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wbspert",
        description="Render WBS, PERT, table and kanban charts from a task list",
    )
    parser.add_argument("-i", "--input", default=STDIO, help="CSV file, board file (.yaml/.json), or - for stdin")
    parser.add_argument("-o", "--output", default=STDIO, help="The output file or - for stdout")
    parser.add_argument(
        "-l",
        "--level",
        type=int,
        default=DEFAULT_PERT_LEVEL,
        help=f"The WBS level to use for PERT charts (default: {DEFAULT_PERT_LEVEL})",
    )
    parser.add_argument("-w", "--wbs", action="store_true", help="Generate the WBS")
    parser.add_argument("-p", "--pert", action="store_true", help="Generate the PERT")
    parser.add_argument("-t", "--table", action="store_true", help="Generate Markdown Table")
    parser.add_argument("-k", "--kanban", action="store_true", help="Build a kanban table")
    parser.add_argument("-b", "--bug-list", action="store_true", help="Generate a buglist")
    parser.add_argument("-E", "--epiclist", action="store_true", help="Generate a checklist of epics")
    parser.add_argument("-s", "--epic-stories", action="store_true", help="Write epic stories")
    parser.add_argument("-d", "--epic-dir", type=Path, default=None, help="The location to write epic stories")
    parser.add_argument("-e", "--embed", action="store_true", help="Embed in an existing file")
    parser.add_argument("-r", "--by-repo", action="store_true", help="Do WBS by repo name")
    parser.add_argument(
        "-c",
        "--column",
        default=DEFAULT_KANBAN_COLUMN,
        help=f"Column field for Kanban table (default: {DEFAULT_KANBAN_COLUMN})",
    )
    parser.add_argument("-a", "--active-only", action="store_true", help="Only show incomplete tasks")
    parser.add_argument("-f", "--filter", default="", help="Filter WBS Table and Kanban by a label value")
    parser.add_argument("--board", default=None, help="Board file (.yaml/.json) for the kanban table")
    _add_log_level(parser)
    return parser


def _build_batch_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wbspert batch",
        description="Render every project listed in a batch configuration file",
    )
    parser.add_argument(
        "-f",
        "--config-file",
        type=Path,
        default=os.getenv(CONFIG_FILE_ENV),
        help=f"Batch YAML file (default: ${CONFIG_FILE_ENV})",
    )
    _add_log_level(parser)
    return parser


def _load_inputs(args: argparse.Namespace) -> tuple[list[TaskRecord], Optional[Board]]:
    board: Optional[Board] = None
    if args.input == STDIO:
        tasks = read_tasks_csv(sys.stdin)
    elif is_board_path(args.input):
        board = load_board(Path(args.input))
        tasks = board_tasks(board, by_repo=args.by_repo)
    else:
        with open(args.input, "r", encoding="utf-8", newline="") as handle:
            tasks = read_tasks_csv(handle)
    if args.board:
        board = load_board(Path(args.board))
    logger.info("Loaded {} task(s) from {}", len(tasks), args.input)
    return tasks, board


def _render_artifacts(
    args: argparse.Namespace,
    tasks: list[TaskRecord],
    board: Optional[Board],
) -> list[tuple[str, str, bool]]:
    """Return ``(tag, text, is_plantuml)`` for every requested artifact, in output order."""
    artifacts: list[tuple[str, str, bool]] = []
    if args.pert:
        graph = build_pert_graph(tasks, level=args.level, active_only=args.active_only)
        artifacts.append((PERT_TAG, render_pert(graph), True))
    if args.wbs:
        artifacts.append((WBS_TAG, render_wbs(tasks, active_only=args.active_only), True))
    if args.table:
        text = render_wbs_table(tasks, active_only=args.active_only, filter_value=args.filter)
        artifacts.append((WBS_TABLE_TAG, text, False))
    if args.kanban:
        if board is None:
            raise ConfigError("Kanban output needs a board: pass --board or a board file as --input")
        text = build_kanban(board, column=args.column, filter_value=args.filter, active_only=args.active_only)
        artifacts.append((KANBAN_TAG, text, False))
    if args.bug_list:
        artifacts.append((BUG_TAG, render_bug_list(tasks, active_only=args.active_only), False))
    if args.epiclist:
        artifacts.append((EPIC_TAG, render_epic_list(tasks), False))
    return artifacts


def _write_output(args: argparse.Namespace, artifacts: list[tuple[str, str, bool]]) -> None:
    if args.output == STDIO:
        for _, text, _ in artifacts:
            sys.stdout.write(text)
        return
    output = Path(args.output)
    if args.embed:
        for tag, text, is_plantuml in artifacts:
            embed_into_file(output, fence_plantuml(text) if is_plantuml else text, tag)
        return
    with open(output, "w", encoding="utf-8") as handle:
        for _, text, _ in artifacts:
            handle.write(text)
    logger.info("Wrote {} artifact(s) to {}", len(artifacts), output)


def _render_command(args: argparse.Namespace) -> int:
    if args.epic_stories and args.epic_dir is None:
        raise ConfigError("Writing epic stories needs --epic-dir")
    tasks, board = _load_inputs(args)
    artifacts = _render_artifacts(args, tasks, board)
    _write_output(args, artifacts)
    if args.epic_stories:
        write_epic_stories(tasks, args.epic_dir)
    return 0


def _batch_command(config_file: Optional[Path]) -> int:
    if config_file is None:
        raise ConfigError(f"No batch file given: pass -f or set {CONFIG_FILE_ENV}")
    config, err = load_batch_config(Path(config_file))
    if err:
        raise ConfigError(err)
    parser = _build_render_parser()
    for project in config.projects:
        logger.info("Rendering project {} into {}", project.name, project.output)
        code = _render_command(parser.parse_args(project.to_argv()))
        if code != 0:
            return code
    return 0


def _fail(exc: Exception) -> int:
    logger.error("{}: {}", exc.__class__.__name__, exc)
    Console(stderr=True).print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return 1


def main(argv: list[str] | None = None) -> None:
    """Run the ``wbspert`` CLI.

    Args:
        argv: Optional argument list (excluding the executable name). When omitted,
            uses ``sys.argv[1:]``.

    Raises:
        SystemExit: Always, carrying the process exit code.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        if argv and argv[0] == "batch":
            args = _build_batch_parser().parse_args(argv[1:])
            _configure_logging(args.log_level)
            raise SystemExit(_batch_command(args.config_file))
        if argv and argv[0] == "render":
            argv = argv[1:]
        args = _build_render_parser().parse_args(argv)
        _configure_logging(args.log_level)
        raise SystemExit(_render_command(args))
    except (TaskInputError, ConfigError, OSError) as exc:
        raise SystemExit(_fail(exc)) from exc


if __name__ == "__main__":
    main()
