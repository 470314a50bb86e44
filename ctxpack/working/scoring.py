"""
ctxpack.working.scoring -- Recency / relevance scoring for knowledge entries.

Each entry gets a combined score in [0.0, 2.0]:

  1. **Recency** -- a step function over the entry's age in calendar
     days.  With the default buckets::

         age <= 7   -> 1.0
         age <= 30  -> 0.7
         age <= 90  -> 0.4
         otherwise  -> 0.2   (also used for unparsable dates)

  2. **Relevance** -- how many distinct task keywords occur in the
     entry body (case-insensitive substring match), divided by 3 and
     capped at 1.0.

    score = recency + relevance

A superseded entry (a body line starting with ``~~Superseded``) scores
exactly 0.0, which the section filler treats as "drop entirely".
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from ctxpack.core.config import DEFAULT_RECENCY_BUCKETS
from ctxpack.core.tokens import estimate_tokens
from ctxpack.core.types import KnowledgeEntry, ScoredEntry

if TYPE_CHECKING:
    from ctxpack.core.config import Config

SUPERSEDED_SCORE = 0.0


def parse_entry_date(value: str) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` date, returning None when malformed."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, TypeError, AttributeError):
        return None


class EntryScorer:
    """
    Scores knowledge entries against a keyword set and a reference time.

    Parameters
    ----------
    recency_buckets : sequence of (max_age_days, score)
        Evaluated in order; the first bucket whose limit is >= the
        entry's age wins.
    stale_recency : float
        Score for entries older than every bucket, or with a bad date.
    relevance_saturation : int
        Number of distinct keyword matches that yields relevance 1.0.
    """

    def __init__(
        self,
        recency_buckets: Sequence[Tuple[int, float]] = DEFAULT_RECENCY_BUCKETS,
        stale_recency: float = 0.2,
        relevance_saturation: int = 3,
    ) -> None:
        self.recency_buckets: Tuple[Tuple[int, float], ...] = tuple(
            (int(days), float(score)) for days, score in recency_buckets
        )
        self.stale_recency = stale_recency
        self.relevance_saturation = max(1, relevance_saturation)

    @classmethod
    def from_config(cls, config: Config) -> "EntryScorer":
        return cls(
            recency_buckets=config.recency_buckets,
            stale_recency=config.stale_recency,
            relevance_saturation=config.relevance_saturation,
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def age_days(self, entry: KnowledgeEntry, now: datetime) -> Optional[int]:
        """Calendar days between the entry date and *now* (None if unparsable)."""
        entry_date = parse_entry_date(entry.date)
        if entry_date is None:
            return None
        return (now.date() - entry_date).days

    def recency_score(self, entry: KnowledgeEntry, now: datetime) -> float:
        age = self.age_days(entry, now)
        if age is None:
            return self.stale_recency
        for max_age, score in self.recency_buckets:
            if age <= max_age:
                return score
        return self.stale_recency

    def relevance_score(self, entry: KnowledgeEntry, keywords: Iterable[str]) -> float:
        """Fraction of the saturation count matched by distinct keywords."""
        distinct = {kw.lower() for kw in keywords or () if kw}
        if not distinct:
            return 0.0
        haystack = entry.content.lower()
        matches = sum(1 for kw in distinct if kw in haystack)
        return min(1.0, matches / self.relevance_saturation)

    # ------------------------------------------------------------------
    # Combined
    # ------------------------------------------------------------------

    def score_entry(
        self,
        entry: KnowledgeEntry,
        keywords: Iterable[str],
        now: datetime,
    ) -> float:
        if entry.is_superseded:
            return SUPERSEDED_SCORE
        return self.recency_score(entry, now) + self.relevance_score(entry, keywords)

    def score_entries(
        self,
        entries: Iterable[KnowledgeEntry],
        keywords: Iterable[str],
        now: datetime,
    ) -> List[ScoredEntry]:
        """Score every entry and return them sorted by score, highest first.

        The sort is stable: entries with equal scores keep input order.
        """
        keywords = list(keywords or ())
        scored = [
            ScoredEntry(
                entry=entry,
                score=self.score_entry(entry, keywords, now),
                tokens=estimate_tokens(entry.content),
            )
            for entry in entries or ()
        ]
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored


_default_scorer = EntryScorer()


def recency_score(entry: KnowledgeEntry, now: datetime) -> float:
    return _default_scorer.recency_score(entry, now)


def relevance_score(entry: KnowledgeEntry, keywords: Iterable[str]) -> float:
    return _default_scorer.relevance_score(entry, keywords)


def score_entry(entry: KnowledgeEntry, keywords: Iterable[str], now: datetime) -> float:
    return _default_scorer.score_entry(entry, keywords, now)


def score_entries(
    entries: Iterable[KnowledgeEntry],
    keywords: Iterable[str],
    now: datetime,
) -> List[ScoredEntry]:
    return _default_scorer.score_entries(entries, keywords, now)
