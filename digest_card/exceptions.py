"""Exception hierarchy for the Digest Card application."""

from typing import Optional


class DigestCardError(Exception):
    """Base exception for all Digest Card errors."""


class ConfigError(DigestCardError):
    """Raised when the input path or the config file is unusable."""


class DeliveryError(DigestCardError):
    """Raised when posting a card to the Feishu webhook fails."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, body: str = ""
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
