"""
ctxpack.working.packet -- Tiered context packet assembler.

Builds the packet an agent reads before starting work.  The token
budget is spent tier by tier, each tier only running while budget
remains:

  1. Read order, constitution rules, closing instruction.  Always
     included in full; if that alone exhausts the budget, stop.
  2. Active tasks, capped at 40% of the *original* budget.
  3. Conventions, capped at 20% of the *original* budget.
  4+5. Decisions and learnings share whatever is left.  The remainder
     is split by size (30% floor each side) and each side degrades
     from full bodies to title-only summaries.

Caps are fractions of the requested budget rather than of what is
left, so allocation does not depend on how much earlier tiers used.
``tokens_used`` is recounted from what was actually emitted and can
exceed a cap by one forced item.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ctxpack.core.config import Config
from ctxpack.core.tokens import estimate_items_tokens, estimate_tokens
from ctxpack.core.types import DEFAULT_INSTRUCTION, AssembledPacket, KnowledgeEntry
from ctxpack.working.allocator import (
    fill_section,
    fit_items_in_budget,
    percent_of,
    split_budget,
)
from ctxpack.working.keywords import KeywordExtractor
from ctxpack.working.scoring import EntryScorer

if TYPE_CHECKING:
    from ctxpack.knowledge.loader import ContextSources

log = logging.getLogger(__name__)


class PacketAssembler:
    """Assembles an ``AssembledPacket`` within a token budget.

    Parameters
    ----------
    config:
        Shares and scoring constants.  Defaults to ``Config()``.
    clock:
        Zero-argument callable returning the reference "now" used for
        recency scoring when ``assemble`` is not given one.
    instruction:
        Closing instruction placed in every packet.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        clock: Optional[Callable[[], datetime]] = None,
        instruction: str = DEFAULT_INSTRUCTION,
    ) -> None:
        self.config = config or Config()
        self.clock = clock or datetime.now
        self.instruction = instruction
        self.scorer = EntryScorer.from_config(self.config)
        self.keywords = KeywordExtractor.from_config(self.config)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def assemble_sources(
        self,
        sources: ContextSources,
        budget: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AssembledPacket:
        """Assemble from a loader bundle.  *budget* defaults to the config's."""
        return self.assemble(
            budget=self.config.token_budget if budget is None else budget,
            read_order=sources.read_order,
            constitution=sources.constitution,
            tasks=sources.tasks,
            conventions=sources.conventions,
            decisions=sources.decisions,
            learnings=sources.learnings,
            now=now,
        )

    def assemble(
        self,
        budget: int,
        read_order: Optional[Sequence[str]] = None,
        constitution: Optional[Sequence[str]] = None,
        tasks: Optional[Sequence[str]] = None,
        conventions: Optional[Sequence[str]] = None,
        decisions: Optional[Sequence[KnowledgeEntry]] = None,
        learnings: Optional[Sequence[KnowledgeEntry]] = None,
        now: Optional[datetime] = None,
    ) -> AssembledPacket:
        """Run the five tiers and return the packet.

        Missing inputs are treated as empty.  With the same inputs and
        the same *now* the result is always equal.
        """
        now = now or self.clock()
        packet = AssembledPacket(budget=budget, instruction=self.instruction)
        remaining = budget

        # -- Tier 1: read order, constitution, instruction -----------------
        packet.read_order = list(read_order or ())
        packet.constitution = list(constitution or ())
        tier1_tokens = (
            estimate_items_tokens(packet.read_order)
            + estimate_items_tokens(packet.constitution)
            + estimate_tokens(packet.instruction)
        )
        remaining -= tier1_tokens
        log.debug(
            "tier 1: %d tokens, %d remaining",
            tier1_tokens,
            remaining,
            extra={"tier": "rules", "tokens": tier1_tokens, "remaining": remaining},
        )

        if remaining <= 0:
            log.info(
                "Budget %d exhausted by constitution and read order (%d tokens)",
                budget,
                tier1_tokens,
                extra={"tier": "rules", "budget": budget},
            )
            packet.tokens_used = tier1_tokens
            return packet

        # -- Tier 2: active tasks ------------------------------------------
        all_tasks = list(tasks or ())
        task_cap = percent_of(budget, self.config.task_share)
        packet.tasks = fit_items_in_budget(all_tasks, task_cap)
        task_tokens = estimate_items_tokens(packet.tasks)
        remaining -= task_tokens
        log.debug(
            "tier 2: %d/%d tasks, %d tokens (cap %d), %d remaining",
            len(packet.tasks),
            len(all_tasks),
            task_tokens,
            task_cap,
            remaining,
            extra={
                "tier": "tasks",
                "tokens": task_tokens,
                "cap": task_cap,
                "kept": len(packet.tasks),
                "dropped": len(all_tasks) - len(packet.tasks),
                "remaining": remaining,
            },
        )

        if remaining <= 0:
            log.info(
                "Budget %d exhausted after tasks", budget, extra={"tier": "tasks", "budget": budget}
            )
            packet.tokens_used = tier1_tokens + task_tokens
            return packet

        # -- Tier 3: conventions -------------------------------------------
        all_conventions = list(conventions or ())
        convention_cap = percent_of(budget, self.config.convention_share)
        packet.conventions = fit_items_in_budget(all_conventions, convention_cap)
        convention_tokens = estimate_items_tokens(packet.conventions)
        remaining -= convention_tokens
        log.debug(
            "tier 3: %d/%d conventions, %d tokens (cap %d), %d remaining",
            len(packet.conventions),
            len(all_conventions),
            convention_tokens,
            convention_cap,
            remaining,
            extra={
                "tier": "conventions",
                "tokens": convention_tokens,
                "cap": convention_cap,
                "kept": len(packet.conventions),
                "dropped": len(all_conventions) - len(packet.conventions),
                "remaining": remaining,
            },
        )

        if remaining <= 0:
            log.info(
                "Budget %d exhausted after conventions",
                budget,
                extra={"tier": "conventions", "budget": budget},
            )
            packet.tokens_used = tier1_tokens + task_tokens + convention_tokens
            return packet

        # -- Tier 4+5: decisions and learnings -----------------------------
        # Relevance is judged against the tasks that made it into the packet.
        keywords = self.keywords.extract(packet.tasks)
        scored_decisions = self.scorer.score_entries(decisions or (), keywords, now)
        scored_learnings = self.scorer.score_entries(learnings or (), keywords, now)

        decision_budget, learning_budget = split_budget(
            remaining,
            scored_decisions,
            scored_learnings,
            min_share=self.config.section_min_share,
        )

        packet.decisions, decision_summaries = fill_section(
            scored_decisions, decision_budget, full_share=self.config.full_content_share
        )
        packet.learnings, learning_summaries = fill_section(
            scored_learnings, learning_budget, full_share=self.config.full_content_share
        )
        packet.summaries = decision_summaries + learning_summaries
        log.debug(
            "tier 4+5: keywords=%d decisions=%d full/%d summarised (budget %d), "
            "learnings=%d full/%d summarised (budget %d)",
            len(keywords),
            len(packet.decisions),
            len(decision_summaries),
            decision_budget,
            len(packet.learnings),
            len(learning_summaries),
            learning_budget,
            extra={
                "tier": "knowledge",
                "keywords": len(keywords),
                "decision_budget": decision_budget,
                "learning_budget": learning_budget,
                "summarised": len(packet.summaries),
            },
        )

        packet.tokens_used = (
            tier1_tokens
            + task_tokens
            + convention_tokens
            + estimate_items_tokens(packet.decisions)
            + estimate_items_tokens(packet.learnings)
            + estimate_items_tokens(packet.summaries)
        )
        return packet


def assemble_packet(
    budget: int,
    read_order: Optional[Sequence[str]] = None,
    constitution: Optional[Sequence[str]] = None,
    tasks: Optional[Sequence[str]] = None,
    conventions: Optional[Sequence[str]] = None,
    decisions: Optional[Sequence[KnowledgeEntry]] = None,
    learnings: Optional[Sequence[KnowledgeEntry]] = None,
    now: Optional[datetime] = None,
    config: Optional[Config] = None,
) -> AssembledPacket:
    """One-shot helper: ``PacketAssembler(config).assemble(...)``."""
    return PacketAssembler(config).assemble(
        budget,
        read_order=read_order,
        constitution=constitution,
        tasks=tasks,
        conventions=conventions,
        decisions=decisions,
        learnings=learnings,
        now=now,
    )


