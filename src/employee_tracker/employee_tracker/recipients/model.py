from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recipient:
    """Email address that receives the daily dispatch."""

    recipient_id: int
    email: str
    active: bool = True


@dataclass(frozen=True)
class RecipientChange:
    """What an add/toggle did, for the flash message."""

    recipient: Recipient
    message: str
