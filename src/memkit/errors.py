"""Error taxonomy shared by the builder and the reflection reader.

Every error carries a stable ``code`` so callers (and the CLI) can report
a one-line diagnostic without parsing messages. "Not found" conditions on
the remote store are never raised; they are returned as ``None``.
"""

from __future__ import annotations


class MemkitError(Exception):
    """Base class for all fatal memkit errors."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        return f"{self.args[0]} ({self.code})"


class RetrievalError(MemkitError):
    """Remote store failure other than 404 (transport, auth, rate limit)."""


class InvalidInputError(MemkitError):
    """Malformed arguments passed to the generation entry point."""


class WriteError(MemkitError):
    """Destination file could not be written."""


class PackageError(MemkitError):
    """A skill archive could not be created."""


class ConfigError(MemkitError):
    """Configuration or unit definitions are missing or invalid."""


__all__ = [
    "ConfigError",
    "InvalidInputError",
    "MemkitError",
    "PackageError",
    "RetrievalError",
    "WriteError",
]
