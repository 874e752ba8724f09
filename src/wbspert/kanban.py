"""Pivot a column-partitioned board into a Markdown kanban table.

Cells keep the row of the card's position inside its column. Suppressing
completed cards leaves a blank cell behind rather than pulling the cards
below it up, so a card's row never depends on which of its neighbours are
done.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .constants import DEFAULT_KANBAN_COLUMN
from .model import Board, BoardColumn, Card

STRIKE = "~~"


@dataclass
class KanbanGrid:
    """Column headers plus a row-major grid of cell texts."""

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


def filter_board(board: Board, value: str) -> Board:
    """Keep only cards labelled ``value`` (or typed ``value``), order preserved."""
    return Board(
        columns=tuple(
            BoardColumn(name=column.name, cards=tuple(c for c in column.cards if c.matches(value)))
            for column in board.columns
        )
    )


def regroup_board(board: Board, group_field: str) -> Board:
    """Re-partition every card by ``group_field`` instead of status.

    Columns appear in order of first use; cards without the field land in a
    trailing ``No <field>`` column.
    """
    if group_field == DEFAULT_KANBAN_COLUMN:
        return board
    grouped: dict[str, list[Card]] = {}
    missing: list[Card] = []
    for card in board.all_cards():
        key = card.fields.get(group_field, "")
        if key:
            grouped.setdefault(key, []).append(card)
        else:
            missing.append(card)
    columns = [BoardColumn(name=name, cards=tuple(cards)) for name, cards in grouped.items()]
    if missing:
        columns.append(BoardColumn(name=f"No {group_field}", cards=tuple(missing)))
    return Board(columns=tuple(columns))


def pivot_board(board: Board, *, active_only: bool = False) -> KanbanGrid:
    """Place card ``r`` of column ``c`` at cell ``(r, c)``."""
    headers = [column.name for column in board.columns]
    max_rows = max((len(column.cards) for column in board.columns), default=0)
    rows = [["" for _ in headers] for _ in range(max_rows)]

    for col_num, column in enumerate(board.columns):
        for row_num, card in enumerate(column.cards):
            marker = ""
            if card.is_completed:
                if active_only:
                    continue
                marker = STRIKE
            rows[row_num][col_num] = f"{marker}{card.title}{marker}"

    return KanbanGrid(headers=headers, rows=rows)


def render_kanban(grid: KanbanGrid) -> str:
    lines = ["".join(f"| {name} " for name in grid.headers) + "|"]
    lines.append("| --- " * len(grid.headers) + "|")
    for row in grid.rows:
        lines.append("".join(f"| {cell} " for cell in row) + "|")
    return "\n".join(lines) + "\n"


def build_kanban(
    board: Board,
    *,
    column: str = DEFAULT_KANBAN_COLUMN,
    filter_value: str = "",
    active_only: bool = False,
) -> str:
    """Regroup, filter, pivot and render ``board`` in one call."""
    if column != DEFAULT_KANBAN_COLUMN:
        board = regroup_board(board, column)
    if filter_value:
        board = filter_board(board, filter_value)
    grid = pivot_board(board, active_only=active_only)
    logger.debug("Kanban grid: {} column(s) x {} row(s)", len(grid.headers), len(grid.rows))
    return render_kanban(grid)
