"""ctxpack.knowledge -- Context directory loading and Markdown parsing."""

from ctxpack.knowledge.loader import ContextLoader, ContextSources
from ctxpack.knowledge.parser import (
    extract_active_tasks,
    extract_bullet_items,
    extract_constitution_rules,
    parse_entry_blocks,
)

__all__ = [
    "ContextLoader",
    "ContextSources",
    "parse_entry_blocks",
    "extract_active_tasks",
    "extract_bullet_items",
    "extract_constitution_rules",
]
