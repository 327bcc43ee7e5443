from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..area_services.model import Service
from ..area_services.repository import ServiceRepository
from ..common.validators import require_present
from ..core.enums import AccessLevel
from ..core.exceptions import BadLogin, ManagerNotFound, NoAccess
from ..venues.model import Venue
from ..venues.repository import VenueRepository
from .model import LoginResult, Manager, ManagerProfile
from .passwords import PasswordHasher
from .repository import ManagerRepository, SessionRepository
from .sessions import SessionIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagerVenue:
    """A venue as seen from the manager dashboard: areas with their running service."""

    venue: Venue
    active_services: Dict[str, Service] = field(default_factory=dict)

    def to_dict(self) -> dict:
        out = self.venue.to_public_dict()
        for area in out["areas"]:
            service = self.active_services.get(area["id"])
            area["activeService"] = service.to_dict() if service else None
        return out


class ManagerAuthService:
    """Use case: manager login, self-service account actions and per-resource authorization."""

    def __init__(
        self,
        managers: ManagerRepository,
        sessions: SessionRepository,
        venues: VenueRepository,
        services: ServiceRepository,
        *,
        passwords: Optional[PasswordHasher] = None,
        issuer: Optional[SessionIssuer] = None,
    ):
        self._managers = managers
        self._sessions = sessions
        self._venues = venues
        self._services = services
        self._passwords = passwords or PasswordHasher()
        self._issuer = issuer or SessionIssuer(sessions)

    def _get_manager(self, manager_id: str) -> Manager:
        manager = self._managers.get_by_id(manager_id)
        if manager is None:
            raise ManagerNotFound()
        return manager

    def _password_matches(self, manager: Manager, password: str) -> bool:
        # One-time bootstrap path: plaintext password handed out at provisioning.
        if manager.is_password_reset and hmac.compare_digest(
            password.encode("utf-8"), manager.password.encode("utf-8")
        ):
            return True
        if not manager.salt or not manager.password:
            return False
        return self._passwords.verify(password, manager.salt, manager.password)

    def login(self, username: str, password: str, client_ip: str) -> LoginResult:
        require_present(username=username, password=password, client_ip=client_ip)

        manager = self._managers.get_by_username(username)
        if manager is None:
            raise ManagerNotFound()

        if not self._password_matches(manager, password):
            raise BadLogin()

        access_level = AccessLevel.RESET if manager.is_password_reset else AccessLevel.FULL
        session = self._issuer.issue(
            manager_id=manager.manager_id,
            ip_address=client_ip,
            access_level=access_level,
        )
        logger.info("Manager logged in. [mId: %s, level: %s]", manager.manager_id, access_level.value)
        return LoginResult(session_id=session.session_id, access_level=session.access_level)

    def get_self(self, manager_id: str) -> ManagerProfile:
        require_present(manager_id=manager_id)

        manager = self._get_manager(manager_id)
        return ManagerProfile(
            first_name=manager.first_name,
            last_name=manager.last_name,
            email=manager.email,
            is_password_reset=manager.is_password_reset,
        )

    def update_password(self, manager_id: str, new_password: str) -> None:
        """Rotate the password under a fresh salt and log out every session of the manager.

        Sessions end before the new password is written; if ending them fails
        the old password stays.
        """
        require_present(manager_id=manager_id, new_password=new_password)

        manager = self._get_manager(manager_id)
        hashed = self._passwords.hash(new_password)

        deactivated = self._sessions.deactivate_for_manager(manager.manager_id)
        self._managers.update_password(manager.manager_id, password_hash=hashed.hashed_password, salt=hashed.salt)
        logger.info("Manager password updated. [mId: %s, sessionsEnded: %s]", manager.manager_id, deactivated)

    def get_venues(self, manager_id: str) -> List[ManagerVenue]:
        require_present(manager_id=manager_id)

        out: List[ManagerVenue] = []
        for venue in self._venues.list_for_manager(manager_id):
            active: Dict[str, Service] = {}
            for area in venue.areas:
                if not area.has_active_service:
                    continue
                service = self._services.get_service(area.active_service_id)
                if service is not None:
                    active[area.area_id] = service
            out.append(ManagerVenue(venue=venue, active_services=active))
        return out

    def ensure_can_access_venue(self, manager_id: str, venue_id: str) -> None:
        if not self._managers.can_access_venue(manager_id, venue_id):
            raise NoAccess()

    def ensure_can_access_service(self, manager_id: str, service_id: str) -> None:
        if not self._managers.can_access_service(manager_id, service_id):
            raise NoAccess()
