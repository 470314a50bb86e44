"""
ctxpack.core.types -- Data types for the context packet assembler.

Every structure here is a plain dataclass: no ORM, no magic,
serialisable to dict/JSON in one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from ctxpack.core.tokens import estimate_tokens  # single source of truth

#: Prefix (after stripping) of a body line marking an entry as obsolete.
SUPERSEDED_MARKER = "~~Superseded"

#: Fixed closing instruction appended to every packet.
DEFAULT_INSTRUCTION = (
    "Before starting work, confirm to the user: "
    '"I have read the required context files and '
    "I'm following project conventions.\""
)


def now_rfc3339() -> str:
    """Current UTC time as an RFC 3339 string with second precision."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# ---------------------------------------------------------------------------
# KnowledgeEntry -- one recorded decision / learning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KnowledgeEntry:
    """
    One block of a knowledge file.

    ``lines`` holds the block verbatim, header line included.
    ``date`` is ``YYYY-MM-DD`` and ``timestamp`` is
    ``YYYY-MM-DD-HHMMSS``, both taken from the header.
    """

    title: str
    date: str
    timestamp: str
    lines: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # accept any sequence, store a tuple so the entry stays hashable
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def content(self) -> str:
        """The full block text."""
        return "\n".join(self.lines)

    @property
    def is_superseded(self) -> bool:
        return any(line.strip().startswith(SUPERSEDED_MARKER) for line in self.lines)


# ---------------------------------------------------------------------------
# ScoredEntry -- entry + score + token cost
# ---------------------------------------------------------------------------


@dataclass
class ScoredEntry:
    """A knowledge entry with its combined score and token estimate.

    ``score`` is in [0.0, 2.0]; exactly 0.0 means superseded.
    """

    entry: KnowledgeEntry
    score: float = 0.0
    tokens: int = -1

    def __post_init__(self) -> None:
        if self.tokens < 0:
            self.tokens = estimate_tokens(self.entry.content)

    @property
    def title(self) -> str:
        return self.entry.title

    @property
    def content(self) -> str:
        return self.entry.content


# ---------------------------------------------------------------------------
# AssembledPacket -- final output of the assembler
# ---------------------------------------------------------------------------


@dataclass
class AssembledPacket:
    """
    The budgeted context packet.

    Every list keeps insertion order, which is the presentation order.
    ``summaries`` holds title-only lines for decisions first, then
    learnings.  ``tokens_used`` is the estimated cost of everything
    actually emitted.
    """

    budget: int
    instruction: str = DEFAULT_INSTRUCTION
    read_order: List[str] = field(default_factory=list)
    constitution: List[str] = field(default_factory=list)
    tasks: List[str] = field(default_factory=list)
    conventions: List[str] = field(default_factory=list)
    decisions: List[str] = field(default_factory=list)
    learnings: List[str] = field(default_factory=list)
    summaries: List[str] = field(default_factory=list)
    tokens_used: int = 0

    @property
    def over_budget(self) -> bool:
        return self.tokens_used > self.budget

    def to_dict(self, generated: Optional[str] = None) -> Dict:
        """Serialise to the JSON packet layout.

        *generated* is the RFC 3339 creation time; pass it explicitly
        for reproducible output.
        """
        return {
            "generated": generated if generated is not None else now_rfc3339(),
            "budget": self.budget,
            "tokens_used": self.tokens_used,
            "read_order": list(self.read_order),
            "constitution": list(self.constitution),
            "tasks": list(self.tasks),
            "conventions": list(self.conventions),
            "decisions": list(self.decisions),
            "learnings": list(self.learnings),
            "summaries": list(self.summaries),
            "instruction": self.instruction,
        }
