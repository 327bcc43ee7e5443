from __future__ import annotations

import logging
import secrets

from ..common.datetime_utils import now_millis
from ..common.ids import new_id
from ..core.constants import SESSION_TOKEN_BYTES
from ..core.enums import AccessLevel
from .model import Session
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """1024 random bits rendered as 256 uppercase hex characters."""
    return secrets.token_bytes(SESSION_TOKEN_BYTES).hex().upper()


class SessionIssuer:
    """Issue new manager sessions with store-unique opaque tokens.

    The store insert is conditional on the token not existing yet, so a
    collision simply means drawing another token. There is no retry cap: with
    1024 bits of entropy the loop body runs once in practice.
    """

    def __init__(self, sessions: SessionRepository, *, token_factory=generate_session_id, clock=now_millis):
        self._sessions = sessions
        self._token_factory = token_factory
        self._clock = clock

    def issue(self, *, manager_id: str, ip_address: str, access_level: AccessLevel) -> Session:
        while True:
            session = Session(
                id=new_id(),
                session_id=self._token_factory(),
                manager_id=manager_id,
                ip_address=ip_address,
                created_at=self._clock(),
                access_level=access_level,
                is_active=True,
            )
            if self._sessions.insert_if_absent(session):
                return session
            logger.warning("Session id collision, regenerating. [mId: %s]", manager_id)
