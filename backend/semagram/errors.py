"""Failure taxonomy for the grapheme store and archival boundary.

Geometry generation and composition have no error paths of their own;
everything here originates at the storage or archival boundary.
"""

from __future__ import annotations


class SemagramError(Exception):
    """Base class for all semagram failures."""


class StorageUnavailable(SemagramError):
    """The grapheme store backend could not be read or written. Fatal to the request."""


class ConcurrentCreateTimeout(StorageUnavailable):
    """A waiter for an in-flight grapheme creation gave up.

    Surfaced to callers as StorageUnavailable rather than creating a duplicate.
    """

    def __init__(self, key: str, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:.1f}s waiting for grapheme '{key}'")
        self.key = key
        self.timeout = timeout


class ArchivalFailure(SemagramError):
    """An SVG could not be written to its archive location. Non-fatal."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"Could not archive '{identifier}': {reason}")
        self.identifier = identifier
        self.reason = reason
