"""
ctxpack.working.allocator -- Token budget allocation primitives.

Three small policies used by the packet assembler:

``fit_items_in_budget``
    Strict sequential fill for flat string lists (tasks, conventions).
    Stops at the first item that would overflow; later, smaller items
    are not considered.  If nothing fits, the first item is forced in
    so a non-empty source never yields an empty section.

``split_budget``
    Divides the remaining budget between decisions and learnings.
    When both fit, each side gets exactly its need.  When they do not,
    each side is guaranteed a 30% floor and the remaining 40% is split
    proportionally to each side's total size.

``fill_section``
    Graceful degradation for one scored section: full bodies while
    80% of the section budget lasts, title-only summaries after that,
    superseded entries (score 0.0) dropped entirely.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ctxpack.core.tokens import estimate_tokens
from ctxpack.core.types import ScoredEntry


def total_entry_tokens(entries: Iterable[ScoredEntry]) -> int:
    """Sum of the token estimates of *entries*."""
    return sum(e.tokens for e in entries)


def percent_of(amount: int, share: float) -> int:
    """``amount * share`` in whole-percent integer math, rounded down."""
    return amount * round(share * 100) // 100


def fit_items_in_budget(items: Sequence[str], budget: int) -> List[str]:
    """Take items in order while the running total stays within *budget*.

    Returns an empty list only when *items* is empty.
    """
    if not items:
        return []

    selected: List[str] = []
    used = 0
    for item in items:
        tokens = estimate_tokens(item)
        if used + tokens > budget:
            break
        selected.append(item)
        used += tokens

    # Always include at least one item if there are any
    if not selected:
        selected.append(items[0])
    return selected


def split_budget(
    total: int,
    a: Sequence[ScoredEntry],
    b: Sequence[ScoredEntry],
    min_share: float = 0.30,
) -> Tuple[int, int]:
    """Split *total* tokens between sections *a* and *b*.

    Returns ``(budget_a, budget_b)``.  Policy, in priority order:

    1. both empty -> ``(0, 0)``
    2. one empty -> the other side gets *total*
    3. neither side has any content -> even split
    4. combined need fits -> each side gets its need
    5. oversubscribed -> ``min_share`` floor each, the rest split
       proportionally to size; the pair sums to *total*
    """
    if not a and not b:
        return 0, 0
    if not a:
        return 0, total
    if not b:
        return total, 0

    a_tokens = total_entry_tokens(a)
    b_tokens = total_entry_tokens(b)
    combined = a_tokens + b_tokens

    if combined == 0:
        return total // 2, total - total // 2

    if combined <= total:
        return a_tokens, b_tokens

    floor = percent_of(total, min_share)
    flex = total - 2 * floor
    a_flex = int(flex * (a_tokens / combined))

    budget_a = floor + a_flex
    return budget_a, total - budget_a


def fill_section(
    entries: Sequence[ScoredEntry],
    budget: int,
    full_share: float = 0.80,
) -> Tuple[List[str], List[str]]:
    """Choose full bodies and title-only summaries for one section.

    *entries* must already be sorted by score, highest first.

    Returns ``(full, summaries)``.  Entries scoring exactly 0.0
    (superseded) appear in neither list.
    """
    if not entries or budget <= 0:
        return [], []

    full_budget = percent_of(budget, full_share)
    used = 0
    full: List[str] = []
    summaries: List[str] = []

    for scored in entries:
        if scored.score == 0.0:
            continue
        if used + scored.tokens <= full_budget:
            full.append(scored.content)
            used += scored.tokens
        else:
            summaries.append(scored.title)

    return full, summaries
