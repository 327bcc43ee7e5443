from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from ..common.validators import require_non_empty
from ..core.constants import NOT_YET
from ..core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class MarketingUser:
    """Someone who signed up for the newsletter."""

    marketing_user_id: str
    name: str
    email: str
    is_subscribed: bool = True
    created_at: int = 0
    unsubscribed_at: int = NOT_YET

    def to_dict(self) -> dict:
        return {
            "id": self.marketing_user_id,
            "name": self.name,
            "email": self.email,
            "isSubscribed": self.is_subscribed,
            "createdAt": self.created_at,
            "unsubscribedAt": self.unsubscribed_at,
        }


@dataclass(frozen=True)
class NewsletterSignupRequest:
    name: str
    email: str
    captcha: str

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "NewsletterSignupRequest":
        email = require_non_empty(payload.get("email"), "email").lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("email is not a valid email address")
        return cls(
            name=require_non_empty(payload.get("name"), "name"),
            email=email,
            captcha=require_non_empty(payload.get("captcha"), "captcha"),
        )
