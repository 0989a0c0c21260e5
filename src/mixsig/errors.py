"""
Exception hierarchy for mixsig.

Sampling never raises: non-finite inputs and degenerate parameters are
sanitized at the sampling boundary. Only the construction path (building
signals from specifications, the ``Rng`` helpers) rejects configuration.
"""

from __future__ import annotations

from typing import Optional


class MixsigError(Exception):
    """Base error for the mixsig library."""


class SpecError(MixsigError, ValueError):
    """Raised when a signal specification cannot be parsed, validated or built.

    Args:
        message: Human readable description of the failure
        path: Dotted location of the failing sub-specification, e.g. ``"a.signal"``
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path or None
        super().__init__(f"{path}: {message}" if path else message)

    def nested(self, segment: str) -> "SpecError":
        """Return a copy of this error located one level deeper under ``segment``."""
        path = f"{segment}.{self.path}" if self.path else segment
        return SpecError(self.message, path=path)
