"""
ctxpack.core.config -- Configuration for the context packet assembler.

Supports loading from YAML, environment variables, and programmatic
construction.  A ``Config`` is treated as read-only once an assembly
starts: the scorer and keyword extractor copy what they need at
construction time.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from ctxpack.core.errors import ConfigError

log = logging.getLogger(__name__)

DEFAULT_TOKEN_BUDGET = 8000
DEFAULT_CONTEXT_DIR = ".context"
RC_FILENAME = ".ctxpackrc"

ENV_CONTEXT_DIR = "CTXPACK_DIR"
ENV_TOKEN_BUDGET = "CTXPACK_TOKEN_BUDGET"

# ---------------------------------------------------------------------------
# Knowledge file names
# ---------------------------------------------------------------------------

FILE_CONSTITUTION = "CONSTITUTION.md"
FILE_TASKS = "TASKS.md"
FILE_CONVENTIONS = "CONVENTIONS.md"
FILE_ARCHITECTURE = "ARCHITECTURE.md"
FILE_DECISIONS = "DECISIONS.md"
FILE_LEARNINGS = "LEARNINGS.md"
FILE_GLOSSARY = "GLOSSARY.md"
FILE_DRIFT = "DRIFT.md"
FILE_AGENT_PLAYBOOK = "AGENT_PLAYBOOK.md"

# Rules first, operating manual last.
DEFAULT_READ_ORDER: Tuple[str, ...] = (
    FILE_CONSTITUTION,
    FILE_TASKS,
    FILE_CONVENTIONS,
    FILE_ARCHITECTURE,
    FILE_DECISIONS,
    FILE_LEARNINGS,
    FILE_GLOSSARY,
    FILE_DRIFT,
    FILE_AGENT_PLAYBOOK,
)

# ---------------------------------------------------------------------------
# Scoring constants
# ---------------------------------------------------------------------------

DEFAULT_STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "the", "for", "and", "with", "that", "this", "from", "are",
        "was", "were", "been", "have", "has", "not", "but", "all",
        "can", "will", "into", "when", "then", "than", "also",
        "should", "would", "could", "about", "each", "which",
        "their", "there", "these", "those", "its", "our", "your",
        "you", "use", "using",
    }
)

# Numeric fields and the type each is coerced to.
_NUMERIC_FIELDS = {
    "token_budget": int,
    "task_share": float,
    "convention_share": float,
    "section_min_share": float,
    "full_content_share": float,
    "stale_recency": float,
    "relevance_saturation": int,
    "min_keyword_length": int,
}

# Keys accepted in config files under another name (.contextrc spelling).
FIELD_ALIASES = {"priority_order": "read_order"}

# (max_age_days, score), evaluated in order
DEFAULT_RECENCY_BUCKETS: Tuple[Tuple[int, float], ...] = (
    (7, 1.0),
    (30, 0.7),
    (90, 0.4),
)


@dataclass
class Config:
    """
    Central configuration object.

    Construct directly, via ``Config.from_yaml(path)``, or via
    ``Config.load()`` which reads ``.ctxpackrc`` and then applies
    ``CTXPACK_*`` environment overrides.
    """

    # -- storage ------------------------------------------------------------
    context_dir: Path = field(default_factory=lambda: Path(DEFAULT_CONTEXT_DIR))
    read_order: List[str] = field(default_factory=lambda: list(DEFAULT_READ_ORDER))

    # -- budget -------------------------------------------------------------
    token_budget: int = DEFAULT_TOKEN_BUDGET

    # -- tier shares (fractions of the *original* budget) -------------------
    task_share: float = 0.40
    convention_share: float = 0.20

    # -- decisions / learnings split ----------------------------------------
    section_min_share: float = 0.30  # floor per side when oversubscribed
    full_content_share: float = 0.80  # rest is headroom for summaries

    # -- scoring ------------------------------------------------------------
    recency_buckets: Tuple[Tuple[int, float], ...] = DEFAULT_RECENCY_BUCKETS
    stale_recency: float = 0.2
    relevance_saturation: int = 3
    min_keyword_length: int = 3
    stop_words: FrozenSet[str] = DEFAULT_STOP_WORDS

    # -- logging ------------------------------------------------------------
    structured_logging: bool = False
    log_level: str = "INFO"

    # -----------------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------------

    def __post_init__(self) -> None:
        for name in ("read_order", "stop_words"):
            if isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} must be a list, got {getattr(self, name)!r}")
        try:
            self.context_dir = Path(self.context_dir)
            self.read_order = [str(name) for name in self.read_order]
            self.stop_words = frozenset(str(w).lower() for w in self.stop_words)
            self.log_level = str(self.log_level)
            self.recency_buckets = tuple(
                (int(days), float(score)) for days, score in self.recency_buckets
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration value: {exc}") from exc

        for name, kind in _NUMERIC_FIELDS.items():
            value = getattr(self, name)
            if isinstance(value, bool):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            try:
                setattr(self, name, kind(value))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{name} must be a number, got {value!r}") from exc

        for name in (
            "task_share",
            "convention_share",
            "section_min_share",
            "full_content_share",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be between 0 and 1, got {value!r}")
        if self.section_min_share > 0.5:
            raise ConfigError(
                f"section_min_share must be at most 0.5, got {self.section_min_share!r}"
            )
        if self.token_budget < 0:
            raise ConfigError(f"token_budget must be >= 0, got {self.token_budget!r}")
        if self.relevance_saturation < 1:
            raise ConfigError(
                f"relevance_saturation must be >= 1, got {self.relevance_saturation!r}"
            )

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file.

        Any key in the YAML that matches a Config field is applied.
        Unknown keys are silently ignored so the file can carry
        application-level settings alongside ctxpack config.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError(f"Expected a mapping in {path}, got {type(raw).__name__}")

        # pull the ctxpack section if nested, else use top-level
        data = raw.get("ctxpack", raw)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Expected a mapping under 'ctxpack' in {path}, got {type(data).__name__}"
            )
        try:
            return cls(**cls._known_fields(data))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value in {path}: {exc}") from exc

    @classmethod
    def from_env(cls, base: Optional["Config"] = None) -> "Config":
        """Apply ``CTXPACK_DIR`` / ``CTXPACK_TOKEN_BUDGET`` on top of *base*.

        A budget that is not a positive integer is ignored.
        """
        data = base.to_dict() if base is not None else {}

        env_dir = os.environ.get(ENV_CONTEXT_DIR)
        if env_dir:
            data["context_dir"] = env_dir

        env_budget = os.environ.get(ENV_TOKEN_BUDGET)
        if env_budget:
            try:
                budget = int(env_budget)
            except ValueError:
                budget = 0
            if budget > 0:
                data["token_budget"] = budget
            else:
                log.warning("Ignoring invalid %s=%r", ENV_TOKEN_BUDGET, env_budget)

        return cls(**cls._known_fields(data))

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Config":
        """Load *path* (or ``.ctxpackrc`` when present), then env overrides."""
        if path is not None:
            base = cls.from_yaml(path)
        elif Path(RC_FILENAME).exists():
            base = cls.from_yaml(RC_FILENAME)
        else:
            base = cls()
        return cls.from_env(base)

    @classmethod
    def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Config fields present in *data*; a null value means "use the default"."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        data = dict(data)
        for alias, name in FIELD_ALIASES.items():
            if alias in data and name not in data:
                data[name] = data.pop(alias)
        return {k: v for k, v in data.items() if k in known and v is not None}

    # -----------------------------------------------------------------------
    # Derived paths
    # -----------------------------------------------------------------------

    def path_for(self, filename: str) -> Path:
        return self.context_dir / filename

    @property
    def decisions_path(self) -> Path:
        return self.path_for(FILE_DECISIONS)

    @property
    def learnings_path(self) -> Path:
        return self.path_for(FILE_LEARNINGS)

    # -----------------------------------------------------------------------
    # Serialisation
    # -----------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dict (YAML/JSON-safe)."""
        return {
            "context_dir": str(self.context_dir),
            "read_order": list(self.read_order),
            "token_budget": self.token_budget,
            "task_share": self.task_share,
            "convention_share": self.convention_share,
            "section_min_share": self.section_min_share,
            "full_content_share": self.full_content_share,
            "recency_buckets": [list(b) for b in self.recency_buckets],
            "stale_recency": self.stale_recency,
            "relevance_saturation": self.relevance_saturation,
            "min_keyword_length": self.min_keyword_length,
            "stop_words": sorted(self.stop_words),
            "structured_logging": self.structured_logging,
            "log_level": self.log_level,
        }
