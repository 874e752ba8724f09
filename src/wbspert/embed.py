"""Merge generated output into a managed region of an existing document.

A region is delimited by a pair of HTML comments::

    <!-- pert:embed:start -->
    ...generated...
    <!-- pert:embed:end -->

Regenerating replaces the whole region and nothing else, so prose written
around it survives any number of runs.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from loguru import logger


class EmbedError(OSError):
    """The target document could not be read, truncated, or rewritten."""


def embed_pattern(tag: str) -> re.Pattern[str]:
    """Match one tagged region, including leading indentation and the end-of-line."""
    name = re.escape(tag)
    return re.compile(
        rf"^ *<!--\s*{name}:embed:start\s*-->.*?<!--\s*{name}:embed:end\s*-->[ \t]*(?:\r?\n)?",
        re.MULTILINE | re.DOTALL,
    )


def embed_block(content: str, tag: str) -> str:
    return f"<!-- {tag}:embed:start -->\n\n{content}\n<!-- {tag}:embed:end -->\n"


def fence_plantuml(text: str) -> str:
    """Wrap a PlantUML document in a Markdown code fence."""
    return f"```plantuml\n{text}\n```\n"


def _separator(document: str) -> str:
    if not document or document.endswith("\n\n"):
        return ""
    if document.endswith("\n"):
        return "\n"
    return "\n\n"


def _merge(document: str, content: str, tag: str) -> tuple[str, int]:
    block = embed_block(content, tag)
    merged, replaced = embed_pattern(tag).subn(lambda _match: block, document)
    if replaced:
        return merged, replaced
    return document + _separator(document) + block, 0


def merge_region(document: str, content: str, tag: str) -> str:
    """Return ``document`` with exactly one ``tag`` region holding ``content``.

    Every existing region for ``tag`` is overwritten with the same block.
    Without one, the block is appended after a blank line and the existing
    text is left byte-for-byte intact.
    """
    merged, _ = _merge(document, content, tag)
    return merged


def embed_into_file(path: Path, content: str, tag: str) -> int:
    """Merge ``content`` into ``path`` in place; return the regions replaced.

    The file is created when missing. Reading, truncating and rewriting all
    go through one handle that is closed on every exit path.
    """
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    except OSError as exc:
        raise EmbedError(f"Unable to open {path} for embedding: {exc}") from exc

    with os.fdopen(fd, "r+", encoding="utf-8", newline="") as handle:
        try:
            handle.seek(0)
            existing = handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise EmbedError(f"Unable to read {path}: {exc}") from exc

        merged, replaced = _merge(existing, content, tag)

        try:
            handle.seek(0)
            handle.truncate(0)
            handle.write(merged)
        except OSError as exc:
            raise EmbedError(f"Unable to rewrite {path}: {exc}") from exc

    if replaced:
        logger.info("Replaced {} '{}' region(s) in {}", replaced, tag, path)
    else:
        logger.info("No '{}' markers in {}; appended a new region", tag, path)
    return replaced
