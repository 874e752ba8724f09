"""Shared constants: region tags, defaults, and fixed PlantUML boilerplate."""

from __future__ import annotations

DEFAULT_PERT_LEVEL = 3
DEFAULT_WBS_FLOOR = 99
DEFAULT_KANBAN_COLUMN = "Status"

# Housekeeping rows (e.g. "0.99.1") never appear in the PERT chart.
IGNORE_PREFIX = "0.99"

START_NODE = "Start"
FINISH_NODE = "Finish"
ROOT_LINE = "* Project"

WBS_TAG = "wbs"
WBS_TABLE_TAG = "wbsTable"
PERT_TAG = "pert"
KANBAN_TAG = "kanban"
BUG_TAG = "bug"
EPIC_TAG = "epic"

EMBED_TAGS = (WBS_TAG, WBS_TABLE_TAG, PERT_TAG, KANBAN_TAG, BUG_TAG, EPIC_TAG)

FOOTER = "\nfooter\nAs of %date()\nend footer\n"

LEGEND = """
legend right
	<size:18><u>Legend</u></size>
	<back:Thistle>Complete</back>
	<back:DarkSeaGreen>In Process</back>
	<back:Pink>Waiting on Someone</back>
	<back:Red>Blocked / Stalled</back>
	<back:Orange>Milestone</back>
end legend
"""

CONFIG_FILE_ENV = "WBSPERT_CONFIG_FILE"
