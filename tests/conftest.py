from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Set

import pytest

from src.patrons_checkin.patrons_checkin.area_services.model import (
    CheckIn,
    DiningPatron,
    GamingPatron,
    GamingPatronUpdate,
    Service,
    Sitting,
)
from src.patrons_checkin.patrons_checkin.area_services.service import ServiceLifecycleService
from src.patrons_checkin.patrons_checkin.checkins.service import CheckInService
from src.patrons_checkin.patrons_checkin.common.ids import new_id
from src.patrons_checkin.patrons_checkin.core.constants import NO_ACTIVE_SERVICE, NOT_YET
from src.patrons_checkin.patrons_checkin.core.enums import ServiceType
from src.patrons_checkin.patrons_checkin.core.exceptions import (
    AreaHasActiveService,
    AreaHasNoActiveService,
    AreaNotFound,
    CheckInNotFound,
    PatronNotFound,
    ServiceIsNotActive,
    ServiceNotFound,
    TableNotFound,
)
from src.patrons_checkin.patrons_checkin.managers.gate import AuthenticationGate
from src.patrons_checkin.patrons_checkin.managers.model import Manager, Session
from src.patrons_checkin.patrons_checkin.managers.passwords import PasswordHasher
from src.patrons_checkin.patrons_checkin.managers.service import ManagerAuthService
from src.patrons_checkin.patrons_checkin.managers.sessions import SessionIssuer
from src.patrons_checkin.patrons_checkin.newsletter.model import MarketingUser
from src.patrons_checkin.patrons_checkin.newsletter.service import NewsletterService
from src.patrons_checkin.patrons_checkin.venues.model import Area, Venue
from src.patrons_checkin.patrons_checkin.venues.service import VenueService

NOW = 1_700_000_000_000

MANAGER_PASSWORD = "secret-pass!"
RESET_PASSWORD = "first-login"


class FakeClock:
    def __init__(self, start: int = NOW):
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


# -------- Venues --------
class InMemoryVenues:
    def __init__(self, venues: List[Venue], manager_venues: Dict[str, Set[str]]):
        self._venues: Dict[str, Venue] = {v.venue_id: v for v in venues}
        self._manager_venues = manager_venues

    def get_by_id(self, venue_id: str) -> Optional[Venue]:
        return self._venues.get(venue_id)

    def get_by_url_name(self, url_name: str) -> Optional[Venue]:
        return next((v for v in self._venues.values() if v.url_name == url_name), None)

    def list_for_manager(self, manager_id: str) -> List[Venue]:
        ids = self._manager_venues.get(manager_id, set())
        return sorted((v for v in self._venues.values() if v.venue_id in ids), key=lambda v: v.name)

    def area(self, venue_id: str, area_id: str, area_type: ServiceType) -> Optional[Area]:
        venue = self._venues.get(venue_id)
        return venue.find_area(area_id, area_type) if venue else None

    def set_area(self, venue_id: str, area_id: str, **changes) -> None:
        venue = self._venues[venue_id]
        areas = tuple(replace(a, **changes) if a.area_id == area_id else a for a in venue.areas)
        self._venues[venue_id] = replace(venue, areas=areas)


# -------- Services --------
class InMemoryServices:
    """Mirrors the MySQL store: conditional start, active-only table lookups, merge by re-parenting."""

    def __init__(self, venues: InMemoryVenues):
        self._venues = venues
        self.services: Dict[str, Service] = {}
        self.mutations = 0

    def get_service(self, service_id: str) -> Optional[Service]:
        return self.services.get(service_id)

    def put(self, service: Service) -> Service:
        self.services[service.service_id] = service
        return service

    def start_service(self, *, venue_id, area_id, service_type, opened_at) -> Service:
        area = self._venues.area(venue_id, area_id, service_type)
        if area is None:
            raise AreaNotFound()
        if area.has_active_service:
            raise AreaHasActiveService()
        service = Service(
            service_id=new_id(),
            venue_id=venue_id,
            area_id=area_id,
            service_type=service_type,
            opened_at=opened_at,
            closed_at=NOT_YET,
            is_active=True,
        )
        self.services[service.service_id] = service
        self._venues.set_area(venue_id, area_id, active_service_id=service.service_id)
        self.mutations += 1
        return service

    def stop_service(self, *, venue_id, area_id, service_type, closed_at) -> None:
        area = self._venues.area(venue_id, area_id, service_type)
        if area is None:
            raise AreaNotFound()
        if not area.has_active_service:
            raise AreaHasNoActiveService()
        service = self.services[area.active_service_id]
        self.services[service.service_id] = replace(service, is_active=False, closed_at=closed_at)
        self._venues.set_area(venue_id, area_id, active_service_id=NO_ACTIVE_SERVICE)
        self.mutations += 1

    def _active(self, service_id: str, service_type: ServiceType) -> Service:
        service = self.services.get(service_id)
        if service is None or service.service_type != service_type:
            raise ServiceNotFound()
        if not service.is_active:
            raise ServiceIsNotActive()
        return service

    def _save_sittings(self, service: Service, sittings) -> None:
        self.services[service.service_id] = replace(service, sittings=tuple(sittings))
        self.mutations += 1

    def _save_patrons(self, service: Service, patrons) -> None:
        self.services[service.service_id] = replace(service, patrons=tuple(patrons))
        self.mutations += 1

    @staticmethod
    def _find_active_table(service: Service, table_number: str, *, exclude: str = "") -> Optional[Sitting]:
        return next(
            (
                s
                for s in service.sittings
                if s.is_active and s.table_number == table_number and s.sitting_id != exclude
            ),
            None,
        )

    @staticmethod
    def _active_sitting(service: Service, sitting_id: str) -> Sitting:
        sitting = service.find_sitting(sitting_id)
        if sitting is None or not sitting.is_active:
            raise TableNotFound()
        return sitting

    def add_gaming_patron(self, service_id: str, patron: GamingPatron) -> None:
        service = self._active(service_id, ServiceType.GAMING)
        self._save_patrons(service, service.patrons + (patron,))

    def create_or_append_dining_check_in(self, service_id, *, table_number, check_in: CheckIn, created_at) -> str:
        service = self._active(service_id, ServiceType.DINING)
        target = self._find_active_table(service, table_number)
        if target is None:
            target = Sitting(sitting_id=new_id(), table_number=table_number, created_at=created_at)
            sittings = service.sittings + (replace(target, check_ins=(check_in,)),)
        else:
            sittings = tuple(
                replace(s, check_ins=s.check_ins + (check_in,)) if s.sitting_id == target.sitting_id else s
                for s in service.sittings
            )
        self._save_sittings(service, sittings)
        return target.sitting_id

    def move_dining_group(self, service_id, *, table_id, check_in_id, new_table_number, now) -> str:
        service = self._active(service_id, ServiceType.DINING)
        source = self._active_sitting(service, table_id)
        check_in = source.find_check_in(check_in_id)
        if check_in is None:
            raise CheckInNotFound()
        if source.table_number == new_table_number:
            return table_id

        remaining = tuple(c for c in source.check_ins if c.check_in_id != check_in_id)
        sittings = [
            replace(s, check_ins=remaining, is_active=bool(remaining)) if s.sitting_id == table_id else s
            for s in service.sittings
        ]
        destination = self._find_active_table(service, new_table_number, exclude=table_id)
        if destination is None:
            destination = Sitting(sitting_id=new_id(), table_number=new_table_number, created_at=now)
            sittings.append(replace(destination, check_ins=(check_in,)))
        else:
            sittings = [
                replace(s, check_ins=s.check_ins + (check_in,)) if s.sitting_id == destination.sitting_id else s
                for s in sittings
            ]
        self._save_sittings(service, sittings)
        return destination.sitting_id

    def move_dining_table(self, service_id, *, table_id, new_table_number) -> str:
        service = self._active(service_id, ServiceType.DINING)
        source = self._active_sitting(service, table_id)
        if source.table_number == new_table_number:
            return table_id

        destination = self._find_active_table(service, new_table_number, exclude=table_id)
        if destination is None:
            self._save_sittings(
                service,
                (replace(s, table_number=new_table_number) if s.sitting_id == table_id else s for s in service.sittings),
            )
            return table_id

        sittings = [
            replace(s, check_ins=s.check_ins + source.check_ins) if s.sitting_id == destination.sitting_id else s
            for s in service.sittings
            if s.sitting_id != table_id
        ]
        self._save_sittings(service, sittings)
        return destination.sitting_id

    def close_dining_table(self, service_id, *, table_id) -> None:
        service = self._active(service_id, ServiceType.DINING)
        if service.find_sitting(table_id) is None:
            raise TableNotFound()
        self._save_sittings(
            service, (replace(s, is_active=False) if s.sitting_id == table_id else s for s in service.sittings)
        )

    def _map_dining_patron(self, service_id, table_id, check_in_id, patron_id, fn) -> None:
        service = self._active(service_id, ServiceType.DINING)
        sitting = service.find_sitting(table_id)
        check_in = sitting.find_check_in(check_in_id) if sitting else None
        if check_in is None or check_in.find_patron(patron_id) is None:
            raise PatronNotFound()

        people = tuple(q for q in (fn(p) if p.patron_id == patron_id else p for p in check_in.people) if q)
        new_check_in = replace(check_in, people=people)
        new_sitting = replace(
            sitting,
            check_ins=tuple(new_check_in if c.check_in_id == check_in_id else c for c in sitting.check_ins),
        )
        self._save_sittings(
            service, (new_sitting if s.sitting_id == table_id else s for s in service.sittings)
        )

    def update_dining_patron(self, service_id, *, table_id, check_in_id, patron: DiningPatron) -> None:
        self._map_dining_patron(service_id, table_id, check_in_id, patron.patron_id, lambda _: patron)

    def delete_dining_patron(self, service_id, *, table_id, check_in_id, patron_id) -> None:
        self._map_dining_patron(service_id, table_id, check_in_id, patron_id, lambda _: None)

    def _map_gaming_patron(self, service_id, patron_id, fn) -> None:
        service = self._active(service_id, ServiceType.GAMING)
        if not any(p.patron_id == patron_id for p in service.patrons):
            raise PatronNotFound()
        patrons = (q for q in (fn(p) if p.patron_id == patron_id else p for p in service.patrons) if q)
        self._save_patrons(service, patrons)

    def update_gaming_patron(self, service_id, *, patron_id, update: GamingPatronUpdate) -> None:
        self._map_gaming_patron(
            service_id,
            patron_id,
            lambda p: replace(
                p, first_name=update.first_name, last_name=update.last_name, phone_number=update.phone_number
            ),
        )

    def delete_gaming_patron(self, service_id, *, patron_id) -> None:
        self._map_gaming_patron(service_id, patron_id, lambda _: None)

    def check_out_gaming_patron(self, service_id, *, patron_id, checked_out_at) -> None:
        self._map_gaming_patron(
            service_id, patron_id, lambda p: replace(p, check_out_time=checked_out_at, is_active=False)
        )


# -------- Managers / sessions --------
class InMemoryManagers:
    def __init__(self, managers: List[Manager], services: InMemoryServices):
        self.managers: Dict[str, Manager] = {m.manager_id: m for m in managers}
        self._services = services

    def get_by_id(self, manager_id: str) -> Optional[Manager]:
        return self.managers.get(manager_id)

    def get_by_username(self, username: str) -> Optional[Manager]:
        return next((m for m in self.managers.values() if m.username == username), None)

    def update_password(self, manager_id: str, *, password_hash: str, salt: str) -> bool:
        manager = self.managers.get(manager_id)
        if manager is None:
            return False
        self.managers[manager_id] = replace(manager, password=password_hash, salt=salt, is_password_reset=False)
        return True

    def can_access_venue(self, manager_id: str, venue_id: str) -> bool:
        manager = self.managers.get(manager_id)
        return manager is not None and venue_id in manager.venue_ids

    def can_access_service(self, manager_id: str, service_id: str) -> bool:
        service = self._services.get_service(service_id)
        return service is not None and self.can_access_venue(manager_id, service.venue_id)


class InMemorySessions:
    def __init__(self):
        self.by_token: Dict[str, Session] = {}
        self.insert_attempts = 0

    def insert_if_absent(self, session: Session) -> bool:
        self.insert_attempts += 1
        if session.session_id in self.by_token:
            return False
        self.by_token[session.session_id] = session
        return True

    def get_by_session_id(self, session_id: str) -> Optional[Session]:
        return self.by_token.get(session_id)

    def deactivate_for_manager(self, manager_id: str) -> int:
        count = 0
        for token, session in list(self.by_token.items()):
            if session.manager_id == manager_id and session.is_active:
                self.by_token[token] = replace(session, is_active=False)
                count += 1
        return count


# -------- Newsletter --------
class InMemoryMarketingUsers:
    def __init__(self):
        self.users: Dict[str, MarketingUser] = {}
        self.links: Dict[str, dict] = {}

    def create_if_not_subscribed(self, user: MarketingUser) -> bool:
        if any(u.email == user.email and u.is_subscribed for u in self.users.values()):
            return False
        self.users[user.marketing_user_id] = user
        return True

    def create_unsubscribe_link(self, marketing_user_id: str, *, link_id: str, created_at: int) -> None:
        self.links[link_id] = {"user": marketing_user_id, "created_at": created_at, "used_at": NOT_YET}

    def unsubscribe(self, link_id: str, *, used_at: int) -> bool:
        link = self.links.get(link_id)
        if link is None:
            return False
        if link["used_at"] == NOT_YET:
            link["used_at"] = used_at
            user = self.users[link["user"]]
            if user.is_subscribed:
                self.users[user.marketing_user_id] = replace(user, is_subscribed=False, unsubscribed_at=used_at)
        return True


class FakeCaptcha:
    def __init__(self, passes: bool = True):
        self.passes = passes
        self.tokens: List[str] = []

    def verify(self, token: str) -> bool:
        self.tokens.append(token)
        return self.passes


class FakeMailer:
    def __init__(self):
        self.sent: List[dict] = []

    def send(self, to_email, subject, body_text, body_html=None) -> bool:
        self.sent.append({"to": to_email, "subject": subject, "text": body_text, "html": body_html})
        return True


# -------- World --------
VENUE_ID = "venue-1"
OTHER_VENUE_ID = "venue-2"
DINING_AREA_ID = "dining-1"
GAMING_AREA_ID = "gaming-1"
CLOSED_AREA_ID = "dining-closed"


@dataclass
class World:
    clock: FakeClock
    venues: InMemoryVenues
    services: InMemoryServices
    managers: InMemoryManagers
    sessions: InMemorySessions
    gate: AuthenticationGate
    auth: ManagerAuthService
    lifecycle: ServiceLifecycleService
    checkins: CheckInService
    venue_service: VenueService
    marketing_users: InMemoryMarketingUsers
    captcha: FakeCaptcha
    mailer: FakeMailer
    newsletter: NewsletterService


@pytest.fixture(scope="session")
def hashed_manager_password():
    return PasswordHasher().hash(MANAGER_PASSWORD)


@pytest.fixture
def world(hashed_manager_password) -> World:
    clock = FakeClock()
    venue = Venue(
        venue_id=VENUE_ID,
        url_name="the-club",
        name="The Club",
        areas=(
            Area(DINING_AREA_ID, ServiceType.DINING, "bistro", "Bistro", is_open=True),
            Area(GAMING_AREA_ID, ServiceType.GAMING, "gaming", "Gaming Room", is_open=True),
            Area(CLOSED_AREA_ID, ServiceType.DINING, "terrace", "Terrace", is_open=False),
        ),
    )
    other = Venue(
        venue_id=OTHER_VENUE_ID,
        url_name="elsewhere",
        name="Elsewhere",
        areas=(Area("dining-2", ServiceType.DINING, "dine", "Dining", is_open=True),),
    )
    managers = [
        Manager(
            manager_id="m-full",
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            username="ada",
            password=hashed_manager_password.hashed_password,
            salt=hashed_manager_password.salt,
            venue_ids=(VENUE_ID,),
        ),
        Manager(
            manager_id="m-reset",
            first_name="Grace",
            last_name="Hopper",
            email="grace@example.com",
            username="grace",
            password=RESET_PASSWORD,
            salt="",
            is_password_reset=True,
            venue_ids=(VENUE_ID,),
        ),
        Manager(
            manager_id="m-other",
            first_name="Alan",
            last_name="Turing",
            email="alan@example.com",
            username="alan",
            password=hashed_manager_password.hashed_password,
            salt=hashed_manager_password.salt,
            venue_ids=(OTHER_VENUE_ID,),
        ),
    ]

    venues = InMemoryVenues(
        [venue, other],
        {m.manager_id: set(m.venue_ids) for m in managers},
    )
    services = InMemoryServices(venues)
    manager_repo = InMemoryManagers(managers, services)
    sessions = InMemorySessions()

    marketing_users = InMemoryMarketingUsers()
    captcha = FakeCaptcha()
    mailer = FakeMailer()

    auth = ManagerAuthService(
        manager_repo,
        sessions,
        venues,
        services,
        issuer=SessionIssuer(sessions, clock=clock),
    )
    return World(
        clock=clock,
        venues=venues,
        services=services,
        managers=manager_repo,
        sessions=sessions,
        gate=AuthenticationGate(sessions),
        auth=auth,
        lifecycle=ServiceLifecycleService(services, auth, clock=clock),
        checkins=CheckInService(venues, services, clock=clock),
        venue_service=VenueService(venues),
        marketing_users=marketing_users,
        captcha=captcha,
        mailer=mailer,
        newsletter=NewsletterService(
            marketing_users,
            captcha,
            mailer,
            unsubscribe_url="http://checkin.test/unsubscribe/{id}",
            clock=clock,
        ),
    )
