"""Task and board model for chart generation.

Tasks arrive as a flat, ordered list of hierarchically numbered records
(``1``, ``1.1``, ``1.1.2``...). Boards arrive as ordered columns of cards.
Both are read-only: filters and regroupings build new objects instead of
mutating the ones they were given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from .hierarchy import depth, parse_parents


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

class StatusKind(str, Enum):
    """Presentation class of a free-text status label."""

    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    BLOCKED = "blocked"
    WAITING = "waiting"
    MILESTONE = "milestone"
    UNKNOWN = "unknown"

    @property
    def color(self) -> str:
        return STATUS_COLORS[self]


_STATUS_ALIASES: dict[str, StatusKind] = {
    "in progress": StatusKind.IN_PROGRESS,
    "under review": StatusKind.IN_PROGRESS,
    "complete": StatusKind.COMPLETE,
    "done": StatusKind.COMPLETE,
    "blocked": StatusKind.BLOCKED,
    "stalled": StatusKind.BLOCKED,
    "waiting": StatusKind.WAITING,
    "milestone": StatusKind.MILESTONE,
}

STATUS_COLORS: dict[StatusKind, str] = {
    StatusKind.IN_PROGRESS: "#DarkSeaGreen",
    StatusKind.COMPLETE: "#Thistle",
    StatusKind.BLOCKED: "#Red",
    StatusKind.WAITING: "#Pink",
    StatusKind.MILESTONE: "#Orange",
    StatusKind.UNKNOWN: "",
}


def classify_status(status: str) -> StatusKind:
    """Map a status label (any case) onto a :class:`StatusKind`."""
    return _STATUS_ALIASES.get(status.strip().lower(), StatusKind.UNKNOWN)


def is_completed_status(status: str) -> bool:
    """Return True for ``done`` or anything starting with ``complete``."""
    lowered = status.strip().lower()
    return lowered == "done" or lowered.startswith("complete")


def matches_filter(labels: Iterable[str], fields: Mapping[str, str], value: str) -> bool:
    """A record matches when ``value`` is one of its labels or its ``Type`` field."""
    return value in labels or fields.get("Type") == value


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskRecord:
    """One row of the work breakdown.

    ``parents`` keeps the raw comma-delimited text as it was supplied;
    :attr:`parent_refs` is the parsed form.
    """

    id: str
    title: str
    parents: str = ""
    duration: float = 0.0
    status: str = ""
    labels: tuple[str, ...] = ()
    fields: dict[str, str] = field(default_factory=dict)
    repo: str = ""
    body: str = ""
    number: int = 0

    @property
    def depth(self) -> int:
        return depth(self.id)

    @property
    def parent_refs(self) -> list[str]:
        return parse_parents(self.parents)

    @property
    def status_kind(self) -> StatusKind:
        return classify_status(self.status)

    @property
    def color(self) -> str:
        return self.status_kind.color

    @property
    def is_completed(self) -> bool:
        return is_completed_status(self.status)

    @property
    def is_epic(self) -> bool:
        return matches_filter(self.labels, self.fields, "epic")

    @property
    def is_bug(self) -> bool:
        return "bug" in self.labels

    def matches(self, value: str) -> bool:
        return matches_filter(self.labels, self.fields, value)


# ---------------------------------------------------------------------------
# Boards
# ---------------------------------------------------------------------------

def _labels(raw: Any) -> tuple[str, ...]:
    """A single label may be written as a bare string."""
    if not raw:
        return ()
    if isinstance(raw, str):
        return (raw,)
    return tuple(str(label) for label in raw)


def _fields(raw: Any) -> dict[str, str]:
    if not raw:
        return {}
    if not isinstance(raw, Mapping):
        raise TypeError(f"fields must be a mapping, got {type(raw).__name__}")
    return {str(k): str(v) for k, v in raw.items()}


@dataclass(frozen=True)
class Card:
    """A card on a project board."""

    title: str
    status: str = ""
    labels: tuple[str, ...] = ()
    fields: dict[str, str] = field(default_factory=dict)
    repo: str = ""
    body: str = ""
    number: int = 0

    @property
    def is_completed(self) -> bool:
        return is_completed_status(self.status)

    def matches(self, value: str) -> bool:
        return matches_filter(self.labels, self.fields, value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Card":
        return cls(
            title=str(data.get("title", "")),
            status=str(data.get("status") or ""),
            labels=_labels(data.get("labels")),
            fields=_fields(data.get("fields")),
            repo=str(data.get("repo") or ""),
            body=str(data.get("body") or ""),
            number=int(data.get("number") or 0),
        )


@dataclass(frozen=True)
class BoardColumn:
    name: str
    cards: tuple[Card, ...] = ()


@dataclass(frozen=True)
class Board:
    """Ordered columns of ordered cards."""

    columns: tuple[BoardColumn, ...] = ()

    def all_cards(self) -> list[Card]:
        return [card for column in self.columns for card in column.cards]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Board":
        columns = []
        for raw in data.get("columns") or ():
            cards = tuple(Card.from_dict(card) for card in raw.get("cards") or ())
            columns.append(BoardColumn(name=str(raw.get("name", "")), cards=cards))
        return cls(columns=tuple(columns))
