"""ctxpack.core.errors -- Exception types raised outside the assembly core."""

from __future__ import annotations


class CtxpackError(Exception):
    """Base class for all ctxpack errors."""


class ConfigError(CtxpackError, ValueError):
    """Invalid configuration value or unparsable config file."""


class ContextDirNotFound(CtxpackError, FileNotFoundError):
    """The context directory itself does not exist."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Context directory not found: {path}")
