from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Administrator account. Plain data, no DB access."""

    user_id: int
    username: str
    password_hash: str
