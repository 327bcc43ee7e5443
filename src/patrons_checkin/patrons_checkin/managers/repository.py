from __future__ import annotations

from typing import Optional, Protocol

from .model import Manager, Session


class ManagerRepository(Protocol):
    """Repository interface for managers.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, manager_id: str) -> Optional[Manager]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Manager]:
        raise NotImplementedError

    def update_password(self, manager_id: str, *, password_hash: str, salt: str) -> bool:
        """Store a new hash + salt and clear is_password_reset."""

        raise NotImplementedError

    def can_access_venue(self, manager_id: str, venue_id: str) -> bool:
        raise NotImplementedError

    def can_access_service(self, manager_id: str, service_id: str) -> bool:
        raise NotImplementedError


class SessionRepository(Protocol):
    def insert_if_absent(self, session: Session) -> bool:
        """Insert the session unless its session_id is taken; False on collision."""

        raise NotImplementedError

    def get_by_session_id(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def deactivate_for_manager(self, manager_id: str) -> int:
        raise NotImplementedError
