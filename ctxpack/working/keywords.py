"""
ctxpack.working.keywords -- Task keyword extraction.

Turns the selected task lines into a flat list of lowercase keywords
used by the entry scorer for relevance matching.  Every keyword has
the same weight; order is first occurrence, which keeps the output
deterministic.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Optional, Set

from ctxpack.core.config import DEFAULT_STOP_WORDS

if TYPE_CHECKING:
    from ctxpack.core.config import Config

# Anything that is not a letter or digit separates tokens.  Underscores
# count as separators too so ``snake_case`` yields both halves.
_SPLIT_RE = re.compile(r"[\W_]+", re.UNICODE)


class KeywordExtractor:
    """Extracts deduplicated lowercase keywords from short texts.

    Parameters
    ----------
    stop_words : frozenset[str]
        Words dropped regardless of length.
    min_length : int
        Tokens shorter than this are dropped (default 3).
    """

    def __init__(
        self,
        stop_words: Optional[Iterable[str]] = None,
        min_length: int = 3,
    ) -> None:
        source = DEFAULT_STOP_WORDS if stop_words is None else stop_words
        self.stop_words: FrozenSet[str] = frozenset(w.lower() for w in source)
        self.min_length = min_length

    @classmethod
    def from_config(cls, config: Config) -> "KeywordExtractor":
        return cls(stop_words=config.stop_words, min_length=config.min_keyword_length)

    def tokenize(self, text: str) -> List[str]:
        """Split *text* on whitespace / punctuation and lowercase each piece."""
        return [tok.lower() for tok in _SPLIT_RE.split(text) if tok]

    def is_keyword(self, token: str) -> bool:
        return len(token) >= self.min_length and token not in self.stop_words

    def extract(self, texts: Iterable[str]) -> List[str]:
        """Return keywords from *texts* in first-occurrence order."""
        seen: Set[str] = set()
        keywords: List[str] = []
        for text in texts or ():
            for token in self.tokenize(text):
                if token in seen or not self.is_keyword(token):
                    continue
                seen.add(token)
                keywords.append(token)
        return keywords


_default_extractor = KeywordExtractor()


def extract_keywords(texts: Iterable[str]) -> List[str]:
    """Module-level shortcut using the default stop-word list."""
    return _default_extractor.extract(texts)
