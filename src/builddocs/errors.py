"""Exception hierarchy for build-docs.

Library entry points raise these; only the CLI turns them into exit codes.
"""

from __future__ import annotations


class BuildDocsError(Exception):
    """Base exception for build-docs operations."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ConfigError(BuildDocsError):
    """Raised when the options record cannot be read or fails validation."""


class LinkError(BuildDocsError):
    """Raised when the linker is handed structurally invalid input."""


class ElementTreeError(BuildDocsError):
    """Raised when the element tree builder is handed structurally invalid input."""
