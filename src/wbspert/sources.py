"""Load task lists and boards from CSV streams and board documents."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

import yaml
from loguru import logger

from .model import Board, Card, TaskRecord

# CSV header -> TaskRecord attribute. Unlisted headers become ``fields``.
CSV_COLUMNS = {
    "Task": "id",
    "Title": "title",
    "Parents": "parents",
    "Duration": "duration",
    "Status": "status",
    "Labels": "labels",
    "Repo": "repo",
    "Body": "body",
    "Number": "number",
}

BOARD_SUFFIXES = {".yaml", ".yml", ".json"}


class TaskInputError(ValueError):
    """A task record or board document could not be decoded."""


def _split_labels(raw: str) -> tuple[str, ...]:
    return tuple(label.strip() for label in raw.split(",") if label.strip())


def _to_float(raw: str, column: str, line: int) -> float:
    if not raw.strip():
        return 0.0
    try:
        return float(raw)
    except ValueError:
        raise TaskInputError(f"line {line}: {column} {raw!r} is not a number") from None


def _to_int(raw: str, column: str, line: int) -> int:
    if not raw.strip():
        return 0
    try:
        return int(raw)
    except ValueError:
        raise TaskInputError(f"line {line}: {column} {raw!r} is not an integer") from None


def _task_from_row(row: dict[Optional[str], Any], line: int) -> TaskRecord:
    if None in row:
        raise TaskInputError(f"line {line}: record has more values than the header")
    values: dict[str, Any] = {}
    fields: dict[str, str] = {}
    for header, raw in row.items():
        text = raw or ""
        attr = CSV_COLUMNS.get(header)
        if attr is None:
            if text:
                fields[header] = text
        elif attr == "duration":
            values[attr] = _to_float(text, header, line)
        elif attr == "number":
            values[attr] = _to_int(text, header, line)
        elif attr == "labels":
            values[attr] = _split_labels(text)
        else:
            values[attr] = text
    values.setdefault("title", "")
    return TaskRecord(fields=fields, **values)


def read_tasks_csv(stream: TextIO) -> list[TaskRecord]:
    """Decode every record of a headed CSV stream, in order.

    Raises:
        TaskInputError: the header lacks ``Task`` or a record is malformed.
    """
    reader = csv.DictReader(stream)
    tasks: list[TaskRecord] = []
    try:
        if not reader.fieldnames:
            raise TaskInputError("CSV input has no header row")
        if "Task" not in reader.fieldnames:
            raise TaskInputError(f"CSV header is missing the Task column: {reader.fieldnames}")
        for row in reader:
            tasks.append(_task_from_row(row, reader.line_num))
    except csv.Error as exc:
        raise TaskInputError(f"line {reader.line_num}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise TaskInputError(f"CSV input is not valid UTF-8: {exc}") from exc
    logger.debug("Read {} task(s) from CSV", len(tasks))
    return tasks


def load_board(path: Path) -> Board:
    """Load a board document (YAML, or JSON which YAML also accepts)."""
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise TaskInputError(f"{path.name}: YAMLError: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise TaskInputError(f"{path.name}: not valid UTF-8: {exc}") from exc
    if not isinstance(data, dict):
        raise TaskInputError(f"{path.name}: expected object, got {type(data).__name__}")
    try:
        board = Board.from_dict(data)
    except (AttributeError, TypeError, ValueError) as exc:
        raise TaskInputError(f"{path.name}: malformed board: {exc}") from exc
    logger.debug("Loaded board {} with {} column(s)", path.name, len(board.columns))
    return board


def is_board_path(name: str) -> bool:
    return Path(name).suffix.lower() in BOARD_SUFFIXES


def _card_task(card: Card) -> TaskRecord:
    fields = card.fields
    try:
        duration = float(fields.get("Duration") or 0)
    except ValueError:
        raise TaskInputError(f"card {card.title!r}: Duration {fields['Duration']!r} is not a number") from None
    return TaskRecord(
        id=fields["WBS"],
        title=card.title,
        parents=fields.get("Parents", ""),
        duration=duration,
        status=card.status,
        labels=card.labels,
        fields=dict(fields),
        repo=card.repo,
        body=card.body,
        number=card.number,
    )


def _repo_tasks(cards: Iterable[Card]) -> list[TaskRecord]:
    by_repo: dict[str, list[Card]] = {}
    for card in cards:
        by_repo.setdefault(card.repo, []).append(card)
    tasks: list[TaskRecord] = []
    for repo_num, (repo, repo_cards) in enumerate(by_repo.items(), start=1):
        tasks.append(TaskRecord(id=str(repo_num), title=repo or "(no repository)", repo=repo))
        for card_num, card in enumerate(repo_cards, start=1):
            tasks.append(
                TaskRecord(
                    id=f"{repo_num}.{card_num}",
                    title=card.title,
                    status=card.status,
                    labels=card.labels,
                    fields=dict(card.fields),
                    repo=card.repo,
                    body=card.body,
                    number=card.number,
                )
            )
    return tasks


def board_tasks(board: Board, *, by_repo: bool = False) -> list[TaskRecord]:
    """Map board cards onto task records.

    Cards carrying a ``WBS`` field keep their own numbering. With ``by_repo``
    every card is numbered under its repository instead.
    """
    cards = board.all_cards()
    if by_repo:
        return _repo_tasks(cards)
    return [_card_task(card) for card in cards if card.fields.get("WBS")]
