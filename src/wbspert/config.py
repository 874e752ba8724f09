"""Load the batch configuration used by ``wbspert batch``.

A batch file lists several projects, each rendered into its own document::

    projects:
      - name: Roadmap
        input: roadmap.csv
        output: docs/roadmap.md
        level: 2
        wbs: true
        pert: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .constants import DEFAULT_KANBAN_COLUMN


class ConfigError(ValueError):
    """Invalid batch configuration or option combination."""


class ProjectConfig(BaseModel):
    name: str
    input: str
    output: str
    board: Optional[str] = None
    level: int = 0
    wbs: bool = False
    wbs_table: bool = False
    pert: bool = False
    kanban: bool = False
    bug_list: bool = False
    epic_list: bool = False
    column: str = DEFAULT_KANBAN_COLUMN
    active_only: bool = False
    by_repo: bool = False
    filter: str = ""

    def to_argv(self) -> list[str]:
        """Translate the project into ``render`` arguments, embed mode on."""
        args = ["-e", "-i", self.input, "-o", self.output]
        if self.board:
            args += ["--board", self.board]
        if self.column != DEFAULT_KANBAN_COLUMN:
            args += ["-c", self.column]
        if self.level > 0:
            args += ["-l", str(self.level)]
        if self.filter:
            args += ["-f", self.filter]
        flags = {
            "-k": self.kanban,
            "-w": self.wbs,
            "-t": self.wbs_table,
            "-p": self.pert,
            "-b": self.bug_list,
            "--epiclist": self.epic_list,
            "-a": self.active_only,
            "-r": self.by_repo,
        }
        args += [flag for flag, enabled in flags.items() if enabled]
        return args


class BatchConfig(BaseModel):
    projects: list[ProjectConfig] = Field(default_factory=list)


def load_batch_config(path: Path) -> tuple[BatchConfig, str | None]:
    """Load and validate a batch file.

    Returns:
        A tuple of ``(config, error_message)``. On failure the config is empty
        and the message names the file and the problem.
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        return BatchConfig(), f"{path}: {exc.__class__.__name__}: {exc}"
    except yaml.YAMLError as exc:
        return BatchConfig(), f"{path.name}: YAMLError: {exc}"
    except UnicodeDecodeError as exc:
        return BatchConfig(), f"{path.name}: not valid UTF-8: {exc}"
    if not isinstance(data, dict):
        return BatchConfig(), f"{path.name}: expected object, got {type(data).__name__}"
    try:
        return BatchConfig.model_validate(data), None
    except ValidationError as exc:
        return BatchConfig(), f"{path.name}: {exc}"
