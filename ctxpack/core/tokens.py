"""
ctxpack.core.tokens -- Token estimation utilities.

Kept in its own module so callers that only need token math
don't have to import the full types module.

The estimate is ``ceil(chars / 4)``.  It runs a little high compared
to real subword tokenizers, which is the safe direction for a budget:
an under-filled packet is fine, an overflowing one is not.
"""

from __future__ import annotations

from typing import Iterable

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate the number of tokens in *text*.

    Returns 0 for empty input.
    """
    if not text:
        return 0
    return (len(text) + CHARS_PER_TOKEN - 1) // CHARS_PER_TOKEN


def estimate_items_tokens(items: Iterable[str]) -> int:
    """Sum of :func:`estimate_tokens` over *items*."""
    return sum(estimate_tokens(item) for item in items)

