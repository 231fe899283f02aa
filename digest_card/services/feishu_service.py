"""
Feishu service module for delivering cards to a bot webhook.

This module provides the FeishuService class which wraps the card in an
interactive message and posts it to the configured webhook.
"""

import logging
from typing import Any, Optional

import requests
from digest_card.exceptions import DeliveryError
from digest_card.models import CardDocument

logger = logging.getLogger(__name__)


class FeishuService:
    """Service for sending interactive cards through a Feishu bot webhook."""

    def __init__(self, webhook: str, timeout: Optional[float] = None):
        self.webhook = webhook
        self.timeout = timeout

    def build_payload(self, card: CardDocument) -> dict:
        """Wraps a card in an interactive message."""
        return {"msg_type": "interactive", "card": card}

    def send_card(self, card: CardDocument, user_id: Optional[str] = None) -> Any:
        """Posts the card to the webhook and returns the decoded response."""
        if user_id:
            # Per-user routing is done by the caller's gateway, not the webhook
            logger.info("Card generated for user: %s", user_id)

        try:
            resp = requests.post(
                self.webhook, json=self.build_payload(card), timeout=self.timeout
            )
        except requests.RequestException as req_err:
            raise DeliveryError(f"Failed to send Feishu card: {req_err}") from req_err

        if not resp.ok:
            raise DeliveryError(
                f"Failed to send Feishu card: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        logger.info("Card sent to Feishu.")
        try:
            return resp.json()
        except ValueError:
            logger.warning("Feishu response was not JSON: %s", resp.text)
            return None
