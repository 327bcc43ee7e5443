from __future__ import annotations

from typing import Optional

from ..core.exceptions import SessionExpired, Unauthenticated
from .model import Principal
from .repository import SessionRepository


class AuthenticationGate:
    """Resolve an inbound session token to the calling manager.

    Knows nothing about the resource being accessed; per-resource checks are
    ManagerAuthService's job.
    """

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    def authenticate(self, token: Optional[str]) -> Principal:
        if not token or not token.strip():
            raise Unauthenticated()

        session = self._sessions.get_by_session_id(token.strip())
        if session is None:
            raise Unauthenticated("Specified session does not exist")

        if not session.is_active:
            raise SessionExpired()

        return Principal(manager_id=session.manager_id, access_level=session.access_level)
