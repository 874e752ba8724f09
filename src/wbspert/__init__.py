"""Provide the public `wbspert` package exports."""

from __future__ import annotations

from .embed import embed_into_file, merge_region
from .hierarchy import depth, parse_parents
from .kanban import build_kanban, pivot_board
from .model import Board, BoardColumn, Card, StatusKind, TaskRecord
from .pert import build_pert_graph, render_pert
from .wbs import render_wbs

__all__ = [
    "Board",
    "BoardColumn",
    "Card",
    "StatusKind",
    "TaskRecord",
    "build_kanban",
    "build_pert_graph",
    "depth",
    "embed_into_file",
    "merge_region",
    "parse_parents",
    "pivot_board",
    "render_pert",
    "render_wbs",
]
