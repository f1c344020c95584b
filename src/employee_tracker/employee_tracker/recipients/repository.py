from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Recipient


class RecipientRepository(Protocol):
    def get_by_id(self, recipient_id: int) -> Optional[Recipient]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Recipient]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Recipient]:
        raise NotImplementedError

    def list_active_emails(self) -> Sequence[str]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create(self, email: str) -> int:
        raise NotImplementedError

    def set_active(self, recipient_id: int, *, active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, recipient_id: int) -> bool:
        raise NotImplementedError
