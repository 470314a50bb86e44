"""ctxpack.core -- Configuration, type definitions, and token utilities."""

from ctxpack.core.config import Config
from ctxpack.core.errors import ConfigError, ContextDirNotFound, CtxpackError
from ctxpack.core.tokens import estimate_items_tokens, estimate_tokens
from ctxpack.core.types import (
    DEFAULT_INSTRUCTION,
    AssembledPacket,
    KnowledgeEntry,
    ScoredEntry,
    now_rfc3339,
)

__all__ = [
    "Config",
    "ConfigError",
    "ContextDirNotFound",
    "CtxpackError",
    "estimate_tokens",
    "estimate_items_tokens",
    "DEFAULT_INSTRUCTION",
    "AssembledPacket",
    "KnowledgeEntry",
    "ScoredEntry",
    "now_rfc3339",
]
