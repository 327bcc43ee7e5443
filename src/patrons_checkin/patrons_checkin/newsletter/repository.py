from __future__ import annotations

from typing import Protocol

from .model import MarketingUser


class MarketingUserRepository(Protocol):
    def create_if_not_subscribed(self, user: MarketingUser) -> bool:
        """Insert ``user`` unless its email already has a subscribed user; False in that case."""
        raise NotImplementedError

    def create_unsubscribe_link(self, marketing_user_id: str, *, link_id: str, created_at: int) -> None:
        raise NotImplementedError

    def unsubscribe(self, link_id: str, *, used_at: int) -> bool:
        """Mark the link used and its user unsubscribed; False when the link is unknown."""
        raise NotImplementedError
