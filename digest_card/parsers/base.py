"""
Base classes and interfaces for digest parsers.

This module defines the contract that all digest parsers must follow.
"""

from typing import Protocol
from digest_card.models import DigestRecord


class DigestParser(Protocol):
    """
    Protocol for digest parsers.

    Classes implementing this protocol turn the raw text of a digest into
    a DigestRecord. Implementations must not raise on malformed input.
    """

    def parse(self, text: str) -> DigestRecord:
        """Parses a digest document."""
