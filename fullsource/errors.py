"""Exceptions raised by the full-source installer."""

from __future__ import annotations


class FullSourceError(Exception):
    """Base exception for all installer errors."""


class ConfigurationError(FullSourceError):
    """Raised when a required option (e.g. the web framework name) is missing."""


class FetchError(FullSourceError):
    """Raised when a remote manifest or source tree cannot be retrieved.

    ``chain`` holds the underlying messages, outermost first.
    """

    def __init__(self, message: str, chain: list[str] | None = None) -> None:
        self.chain = [message] + list(chain or [])
        super().__init__(": ".join(self.chain))


class ParseError(FullSourceError):
    """Raised when a manifest cannot be parsed or a region marker is missing."""


class WriteError(FullSourceError):
    """Raised when the rewritten manifest cannot be written."""
