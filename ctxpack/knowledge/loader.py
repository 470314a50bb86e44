"""
ctxpack.knowledge.loader -- Reads a context directory into assembler inputs.

A context directory holds the project's Markdown knowledge files::

    .context/
        CONSTITUTION.md    rules the agent must never break
        TASKS.md           "- [ ]" work items
        CONVENTIONS.md     bullet list of coding conventions
        DECISIONS.md       timestamped decision entries
        LEARNINGS.md       timestamped lessons learned
        ...

A missing file is simply absent content.  Only a missing directory is
an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ctxpack.core.config import (
    FILE_CONSTITUTION,
    FILE_CONVENTIONS,
    FILE_DECISIONS,
    FILE_LEARNINGS,
    FILE_TASKS,
    Config,
)
from ctxpack.core.errors import ContextDirNotFound
from ctxpack.core.types import KnowledgeEntry
from ctxpack.knowledge.parser import (
    extract_active_tasks,
    extract_bullet_items,
    extract_constitution_rules,
    parse_entry_blocks,
)

log = logging.getLogger(__name__)

MAX_CONVENTIONS = 1000


@dataclass
class ContextSources:
    """Everything the packet assembler consumes, already parsed."""

    read_order: List[str] = field(default_factory=list)
    constitution: List[str] = field(default_factory=list)
    tasks: List[str] = field(default_factory=list)
    conventions: List[str] = field(default_factory=list)
    decisions: List[KnowledgeEntry] = field(default_factory=list)
    learnings: List[KnowledgeEntry] = field(default_factory=list)


class ContextLoader:
    """Loads ``ContextSources`` from ``config.context_dir``."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self.context_dir = Path(self.config.context_dir)

    def read_file(self, filename: str) -> str:
        """Contents of *filename*, or ``""`` when missing or unreadable."""
        path = self.context_dir / filename
        if not path.is_file():
            log.debug("Knowledge file absent: %s", path)
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Could not read %s: %s", path, exc)
            return ""

    def read_order(self) -> List[str]:
        """Paths of the configured read-order files that exist."""
        return [
            str(self.context_dir / name)
            for name in self.config.read_order
            if (self.context_dir / name).is_file()
        ]

    def load(self) -> ContextSources:
        if not self.context_dir.is_dir():
            raise ContextDirNotFound(self.context_dir)

        sources = ContextSources(
            read_order=self.read_order(),
            constitution=extract_constitution_rules(self.read_file(FILE_CONSTITUTION)),
            tasks=extract_active_tasks(self.read_file(FILE_TASKS)),
            conventions=extract_bullet_items(
                self.read_file(FILE_CONVENTIONS), limit=MAX_CONVENTIONS
            ),
            decisions=parse_entry_blocks(self.read_file(FILE_DECISIONS)),
            learnings=parse_entry_blocks(self.read_file(FILE_LEARNINGS)),
        )
        log.debug(
            "Loaded %s: %d rules, %d tasks, %d conventions, %d decisions, %d learnings",
            self.context_dir,
            len(sources.constitution),
            len(sources.tasks),
            len(sources.conventions),
            len(sources.decisions),
            len(sources.learnings),
        )
        return sources
