"""Build and render the PERT dependency graph.

The graph is bracketed by two synthetic anchors: tasks without parents hang
off ``Start`` and tasks nothing depends on feed ``Finish``. Schedule fields
(early/late start and finish) are left blank; only the shape is drawn.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from loguru import logger

from .constants import DEFAULT_PERT_LEVEL, FINISH_NODE, FOOTER, IGNORE_PREFIX, LEGEND, START_NODE
from .model import TaskRecord

PERT_NODE = """
map "{id}: {title}" as {id} {color} {{
	Status => {status}
	Early => ES:   | EF:    
	Duration => {duration:0.1f}
	Late  => LS:   | LF:     
}}
"""


@dataclass
class PertGraph:
    """Nodes and edges of a PERT chart, in emission order."""

    nodes: list[TaskRecord] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)
    sinks: list[str] = field(default_factory=list)

    @property
    def finish_edges(self) -> list[tuple[str, str]]:
        return [(task_id, FINISH_NODE) for task_id in self.sinks]


def pert_node(task: TaskRecord) -> str:
    """Return the PlantUML ``map`` block for one task."""
    return PERT_NODE.format(
        id=task.id,
        title=task.title.replace('"', ""),
        color=task.color,
        status=task.status,
        duration=task.duration,
    )


def build_pert_graph(
    tasks: Iterable[TaskRecord],
    *,
    level: int = DEFAULT_PERT_LEVEL,
    skip_ignored: bool = True,
    active_only: bool = False,
    require_status: bool = True,
) -> PertGraph:
    """Collect the tasks at or below ``level`` and wire them together.

    Two passes: the first records included nodes, their parent edges and a
    multiset of every referenced parent; the second marks as sinks the
    included ids that never appear in that multiset. Parent references are
    drawn as declared, whether or not they name an included task.
    """
    graph = PertGraph()
    referenced: Counter[str] = Counter()

    for task in tasks:
        if skip_ignored and task.id.startswith(IGNORE_PREFIX):
            continue
        if active_only and task.is_completed:
            continue
        if task.depth < level:
            continue
        if require_status and not task.status:
            continue
        graph.nodes.append(task)
        for ref in task.parent_refs:
            if ref:
                referenced[ref] += 1
                graph.edges.append((ref, task.id))
            else:
                graph.edges.append((START_NODE, task.id))

    graph.sinks = [task.id for task in graph.nodes if task.id not in referenced]
    logger.debug(
        "PERT graph: {} node(s), {} edge(s), {} sink(s)",
        len(graph.nodes),
        len(graph.edges),
        len(graph.sinks),
    )
    return graph


def render_pert(graph: PertGraph) -> str:
    """Render ``graph`` as a ``@startuml PERT`` document."""
    parts = [
        "@startuml PERT\n",
        "left to right direction\n",
        f"map {START_NODE} {{\n}}\n",
        f"map {FINISH_NODE} {{\n}}\n",
    ]
    parts.extend(pert_node(task) for task in graph.nodes)
    parts.extend(f"{src} --> {dst}\n" for src, dst in graph.edges)
    parts.extend(f"{src} --> {dst}\n" for src, dst in graph.finish_edges)
    parts.append(FOOTER)
    parts.append(LEGEND)
    parts.append("@enduml\n")
    return "".join(parts)
