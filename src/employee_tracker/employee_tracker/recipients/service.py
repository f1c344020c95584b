from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import normalize_email, require_positive_id
from ..core.exceptions import NotFoundError
from .model import Recipient, RecipientChange
from .repository import RecipientRepository

logger = logging.getLogger(__name__)


class RecipientService:
    """Use case: maintain who receives the daily attendance email."""

    def __init__(self, recipients: RecipientRepository):
        self._recipients = recipients

    def list_recipients(self) -> Sequence[Recipient]:
        return self._recipients.list_all()

    def add_recipient(self, email: str) -> RecipientChange:
        normalized = normalize_email(email)

        existing = self._recipients.get_by_email(normalized)
        if existing and existing.active:
            return RecipientChange(existing, "This email address is already receiving daily emails")
        if existing:
            self._recipients.set_active(existing.recipient_id, active=True)
            logger.info("recipient reactivated id=%s", existing.recipient_id)
            return RecipientChange(
                Recipient(existing.recipient_id, existing.email, True),
                "Email recipient reactivated successfully",
            )

        recipient_id = self._recipients.create(normalized)
        logger.info("recipient added id=%s", recipient_id)
        return RecipientChange(Recipient(recipient_id, normalized, True), "Email recipient added successfully")

    def toggle_recipient(self, recipient_id) -> RecipientChange:
        recipient_id = require_positive_id(recipient_id, "recipient ID")
        recipient = self._recipients.get_by_id(recipient_id)
        if not recipient:
            raise NotFoundError("Recipient not found.")

        active = not recipient.active
        if not self._recipients.set_active(recipient_id, active=active):
            raise NotFoundError("Recipient not found.")
        action = "activated" if active else "deactivated"
        return RecipientChange(Recipient(recipient_id, recipient.email, active), f"{recipient.email} has been {action}")

    def delete_recipient(self, recipient_id) -> Recipient:
        recipient_id = require_positive_id(recipient_id, "recipient ID")
        recipient = self._recipients.get_by_id(recipient_id)
        if not recipient or not self._recipients.delete_by_id(recipient_id):
            raise NotFoundError("Recipient not found. They may have already been deleted.")
        return recipient
