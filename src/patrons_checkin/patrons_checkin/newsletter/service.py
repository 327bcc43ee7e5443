from __future__ import annotations

import logging
from typing import Callable

from ..common.datetime_utils import now_millis
from ..common.ids import new_id
from ..common.validators import require_present
from ..core.constants import DEFAULT_UNSUBSCRIBE_URL
from ..core.exceptions import MarketingUserAlreadySubscribed, RecaptchaFailure, UnsubscribeLinkNotFound
from .captcha import CaptchaVerifier
from .mailer import Mailer
from .model import MarketingUser, NewsletterSignupRequest
from .repository import MarketingUserRepository

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to the Patrons newsletter"

WELCOME_TEXT = (
    "Hi {name},\n\n"
    "Thanks for signing up to hear from Patrons. We will send news to {email}.\n\n"
    "To stop receiving these emails, visit {unsubscribe_link}\n"
)

WELCOME_HTML = (
    "<p>Hi {name},</p>"
    "<p>Thanks for signing up to hear from Patrons. We will send news to {email}.</p>"
    '<p><a href="{unsubscribe_link}">Unsubscribe</a></p>'
)


class NewsletterService:
    """Use case: anonymous newsletter sign-up and unsubscribe."""

    def __init__(
        self,
        users: MarketingUserRepository,
        captcha: CaptchaVerifier,
        mailer: Mailer,
        *,
        unsubscribe_url: str = DEFAULT_UNSUBSCRIBE_URL,
        clock: Callable[[], int] = now_millis,
    ):
        self._users = users
        self._captcha = captcha
        self._mailer = mailer
        self._unsubscribe_url = unsubscribe_url
        self._clock = clock

    def sign_up(self, request: NewsletterSignupRequest) -> MarketingUser:
        """Verify the captcha, register the email, then send the welcome mail with its unsubscribe link."""
        if not self._captcha.verify(request.captcha):
            raise RecaptchaFailure()

        now = self._clock()
        user = MarketingUser(
            marketing_user_id=new_id(),
            name=request.name,
            email=request.email,
            created_at=now,
        )
        if not self._users.create_if_not_subscribed(user):
            logger.warning("Newsletter email already subscribed. [email: %s]", request.email)
            raise MarketingUserAlreadySubscribed()

        link_id = new_id()
        self._users.create_unsubscribe_link(user.marketing_user_id, link_id=link_id, created_at=now)
        self._send_welcome(user, self._unsubscribe_url.format(id=link_id))

        logger.info("Newsletter sign-up. [muId: %s]", user.marketing_user_id)
        return user

    def _send_welcome(self, user: MarketingUser, unsubscribe_link: str) -> None:
        values = {"name": user.name, "email": user.email, "unsubscribe_link": unsubscribe_link}
        self._mailer.send(
            user.email,
            WELCOME_SUBJECT,
            WELCOME_TEXT.format(**values),
            WELCOME_HTML.format(**values),
        )

    def unsubscribe(self, link_id: str) -> None:
        require_present(link_id=link_id)
        if not self._users.unsubscribe(link_id, used_at=self._clock()):
            raise UnsubscribeLinkNotFound()
        logger.info("Newsletter unsubscribe. [linkId: %s]", link_id)
