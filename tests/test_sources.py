"""Tests for CSV and board input loading."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from wbspert.model import Board, BoardColumn, Card, TaskRecord
from wbspert.sources import TaskInputError, board_tasks, is_board_path, load_board, read_tasks_csv

CSV_TEXT = (
    "Task,Title,Parents,Duration,Status,Labels,Type\n"
    '1,Plan,,,Milestone,,\n'
    '1.1,Design,1,4,In Progress,"epic, ui",epic\n'
    '1.2,Build,"1.1, 1",2.5,,,\n'
)


class TestReadTasksCsv:
    def test_maps_headers(self) -> None:
        tasks = read_tasks_csv(io.StringIO(CSV_TEXT))
        assert [t.id for t in tasks] == ["1", "1.1", "1.2"]
        design = tasks[1]
        assert design == TaskRecord(
            id="1.1",
            title="Design",
            parents="1",
            duration=4.0,
            status="In Progress",
            labels=("epic", "ui"),
            fields={"Type": "epic"},
        )
        assert tasks[0].duration == 0.0
        assert tasks[0].fields == {}
        assert tasks[2].parent_refs == ["1.1", "1"]

    def test_bad_duration_reports_line(self) -> None:
        text = "Task,Title,Duration\n1,A,1\n2,B,soon\n"
        with pytest.raises(TaskInputError, match="line 3"):
            read_tasks_csv(io.StringIO(text))

    def test_missing_task_column(self) -> None:
        with pytest.raises(TaskInputError, match="Task column"):
            read_tasks_csv(io.StringIO("Title,Status\nA,Done\n"))

    def test_extra_values(self) -> None:
        with pytest.raises(TaskInputError, match="more values"):
            read_tasks_csv(io.StringIO("Task,Title\n1,A,surprise\n"))

    def test_empty_input(self) -> None:
        with pytest.raises(TaskInputError, match="no header"):
            read_tasks_csv(io.StringIO(""))


class TestLoadBoard:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "board.yaml"
        path.write_text(
            "columns:\n"
            "  - name: Todo\n"
            "    cards:\n"
            "      - title: Write docs\n"
            "        labels: [docs]\n"
            "  - name: Done\n"
            "    cards: []\n",
            encoding="utf-8",
        )
        board = load_board(path)
        assert board == Board(
            columns=(
                BoardColumn(name="Todo", cards=(Card(title="Write docs", labels=("docs",)),)),
                BoardColumn(name="Done"),
            )
        )

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "board.json"
        path.write_text(json.dumps({"columns": [{"name": "Todo", "cards": [{"title": "a"}]}]}), encoding="utf-8")
        assert load_board(path).columns[0].cards[0].title == "a"

    def test_rejects_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "board.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(TaskInputError, match="expected object"):
            load_board(path)

    def test_rejects_bad_card_number(self, tmp_path: Path) -> None:
        path = tmp_path / "board.yaml"
        path.write_text("columns:\n  - name: A\n    cards:\n      - title: x\n        number: seven\n", encoding="utf-8")
        with pytest.raises(TaskInputError, match="malformed board"):
            load_board(path)

    def test_is_board_path(self) -> None:
        assert is_board_path("board.YAML")
        assert is_board_path("x/board.json")
        assert not is_board_path("tasks.csv")


class TestBoardTasks:
    def _board(self) -> Board:
        return Board(
            columns=(
                BoardColumn(
                    name="Todo",
                    cards=(
                        Card(title="Auth", fields={"WBS": "1.1", "Duration": "3"}, repo="api"),
                        Card(title="No number", repo="web"),
                    ),
                ),
                BoardColumn(
                    name="Done",
                    cards=(Card(title="Login", status="Done", fields={"WBS": "1.2", "Parents": "1.1"}, repo="api"),),
                ),
            )
        )

    def test_cards_with_wbs_field(self) -> None:
        tasks = board_tasks(self._board())
        assert [(t.id, t.title, t.parents, t.duration) for t in tasks] == [
            ("1.1", "Auth", "", 3.0),
            ("1.2", "Login", "1.1", 0.0),
        ]

    def test_by_repo_numbering(self) -> None:
        tasks = board_tasks(self._board(), by_repo=True)
        assert [(t.id, t.title) for t in tasks] == [
            ("1", "api"),
            ("1.1", "Auth"),
            ("1.2", "Login"),
            ("2", "web"),
            ("2.1", "No number"),
        ]


class TestBoardEdgeCases:
    def test_single_label_string(self, tmp_path: Path) -> None:
        path = tmp_path / "board.yaml"
        path.write_text("columns:\n  - name: A\n    cards:\n      - title: x\n        labels: bug\n", encoding="utf-8")
        card = load_board(path).columns[0].cards[0]
        assert card.labels == ("bug",)
        assert card.matches("bug")

    def test_scalar_fields_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "board.yaml"
        path.write_text("columns:\n  - name: A\n    cards:\n      - title: x\n        fields: oops\n", encoding="utf-8")
        with pytest.raises(TaskInputError, match="fields must be a mapping"):
            load_board(path)

    def test_invalid_utf8_board(self, tmp_path: Path) -> None:
        path = tmp_path / "board.yaml"
        path.write_bytes(b"columns:\n  - name: \xff\n")
        with pytest.raises(TaskInputError, match="not valid UTF-8"):
            load_board(path)


def test_invalid_utf8_csv(tmp_path: Path) -> None:
    path = tmp_path / "tasks.csv"
    path.write_bytes(b"Task,Title\n1,\xff\n")
    with open(path, "r", encoding="utf-8", newline="") as handle:
        with pytest.raises(TaskInputError, match="not valid UTF-8"):
            read_tasks_csv(handle)
