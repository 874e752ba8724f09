"""Tests for batch configuration loading."""

from __future__ import annotations

from pathlib import Path

from wbspert.config import BatchConfig, ProjectConfig, load_batch_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_valid_batch(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "wbspert.yaml",
        "projects:\n"
        "  - name: Roadmap\n"
        "    input: roadmap.csv\n"
        "    output: docs/roadmap.md\n"
        "    level: 2\n"
        "    wbs: true\n"
        "    pert: true\n"
        "  - name: Board\n"
        "    input: board.yaml\n"
        "    output: docs/board.md\n"
        "    kanban: true\n",
    )
    config, err = load_batch_config(path)
    assert err is None
    assert [p.name for p in config.projects] == ["Roadmap", "Board"]
    assert config.projects[0].level == 2
    assert config.projects[1].column == "Status"


def test_missing_output_is_reported(tmp_path: Path) -> None:
    path = _write(tmp_path / "wbspert.yaml", "projects:\n  - name: Roadmap\n")
    config, err = load_batch_config(path)
    assert config == BatchConfig()
    assert err is not None
    assert "wbspert.yaml" in err
    assert "output" in err


def test_non_mapping_document(tmp_path: Path) -> None:
    path = _write(tmp_path / "wbspert.yaml", "- a\n- b\n")
    _, err = load_batch_config(path)
    assert err == "wbspert.yaml: expected object, got list"


def test_missing_file(tmp_path: Path) -> None:
    _, err = load_batch_config(tmp_path / "absent.yaml")
    assert err is not None
    assert "FileNotFoundError" in err


class TestToArgv:
    def test_minimal(self) -> None:
        project = ProjectConfig(name="p", input="tasks.csv", output="out.md")
        assert project.to_argv() == ["-e", "-i", "tasks.csv", "-o", "out.md"]

    def test_all_options(self) -> None:
        project = ProjectConfig(
            name="p",
            input="tasks.csv",
            output="out.md",
            board="board.yaml",
            level=2,
            wbs=True,
            wbs_table=True,
            pert=True,
            kanban=True,
            bug_list=True,
            epic_list=True,
            column="Repo",
            active_only=True,
            by_repo=True,
            filter="ui",
        )
        assert project.to_argv() == [
            "-e", "-i", "tasks.csv", "-o", "out.md",
            "--board", "board.yaml",
            "-c", "Repo",
            "-l", "2",
            "-f", "ui",
            "-k", "-w", "-t", "-p", "-b", "--epiclist", "-a", "-r",
        ]


def test_every_project_names_its_input(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "wbspert.yaml",
        "projects:\n"
        "  - name: One\n"
        "    input: one.csv\n"
        "    output: one.md\n"
        "  - name: Two\n"
        "    output: two.md\n",
    )
    config, err = load_batch_config(path)
    assert config == BatchConfig()
    assert err is not None
    assert "input" in err
