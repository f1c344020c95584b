from __future__ import annotations

from datetime import date
from typing import ContextManager, Optional, Protocol

from .model import DispatchRecord


class DispatchTransaction(Protocol):
    """Open transaction around the dispatch insert.

    Leaving the context cleanly commits; an exception rolls the insert back.
    """

    def insert(self, *, dispatch_date: date, token: str) -> int:
        """Raise DuplicateDispatchError when the date (or token) already exists."""
        raise NotImplementedError


class DispatchRepository(Protocol):
    def get_for_date(self, dispatch_date: date) -> Optional[DispatchRecord]:
        raise NotImplementedError

    def transaction(self) -> ContextManager[DispatchTransaction]:
        raise NotImplementedError
