"""ctxpack.working -- Scoring, budget allocation and packet assembly."""

from ctxpack.working.allocator import fill_section, fit_items_in_budget, split_budget
from ctxpack.working.keywords import KeywordExtractor, extract_keywords
from ctxpack.working.packet import PacketAssembler, assemble_packet
from ctxpack.working.scoring import EntryScorer, score_entries, score_entry

__all__ = [
    "PacketAssembler",
    "assemble_packet",
    "EntryScorer",
    "score_entry",
    "score_entries",
    "KeywordExtractor",
    "extract_keywords",
    "fill_section",
    "fit_items_in_budget",
    "split_budget",
]
