from __future__ import annotations

import logging
from typing import Callable

from ..area_services.model import CheckIn, DiningPatron, GamingPatron
from ..area_services.repository import ServiceRepository
from ..common.datetime_utils import now_millis
from ..common.ids import new_id
from ..common.validators import require_non_empty, require_present
from ..core.constants import NOT_YET
from ..core.enums import ServiceType
from ..core.exceptions import AreaHasNoService, AreaIsClosed, AreaNotFound, VenueNotFound, ZeroPatronCount
from ..venues.model import Area
from ..venues.repository import VenueRepository
from .model import DiningCheckInRequest, GamingCheckInRequest

logger = logging.getLogger(__name__)


class CheckInService:
    """Use case: anonymous patrons checking in to a venue area."""

    def __init__(self, venues: VenueRepository, services: ServiceRepository, *, clock: Callable[[], int] = now_millis):
        self._venues = venues
        self._services = services
        self._clock = clock

    def _open_area(self, venue_id: str, area_id: str, area_type: ServiceType) -> Area:
        venue = self._venues.get_by_id(venue_id)
        if venue is None:
            raise VenueNotFound()

        area = venue.find_area(area_id, area_type)
        if area is None:
            raise AreaNotFound()
        if not area.is_open:
            raise AreaIsClosed()
        if not area.has_active_service:
            raise AreaHasNoService()
        return area

    def submit_gaming_check_in(self, venue_id: str, area_id: str, check_in: GamingCheckInRequest) -> GamingPatron:
        require_present(venue_id=venue_id, area_id=area_id)
        first_name = require_non_empty(check_in.first_name, "firstName")
        last_name = require_non_empty(check_in.last_name, "lastName")
        phone_number = require_non_empty(check_in.phone_number, "phoneNumber")

        area = self._open_area(venue_id, area_id, ServiceType.GAMING)

        patron = GamingPatron(
            patron_id=new_id(),
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            check_in_time=self._clock(),
            check_out_time=NOT_YET,
            is_active=True,
        )
        self._services.add_gaming_patron(area.active_service_id, patron)

        logger.info("Gaming check-in. [vId: %s, aId: %s]", venue_id, area_id)
        return patron

    def submit_dining_check_in(self, venue_id: str, area_id: str, check_in: DiningCheckInRequest) -> CheckIn:
        """Record a group check-in, joining the active sitting for the table number or opening one."""
        require_present(venue_id=venue_id, area_id=area_id)
        table_number = require_non_empty(check_in.table_number, "tableNumber")
        if not check_in.people:
            raise ZeroPatronCount()
        people = tuple(
            DiningPatron(
                patron_id=new_id(),
                first_name=require_non_empty(p.first_name, "firstName"),
                phone_number=require_non_empty(p.phone_number, "phoneNumber"),
            )
            for p in check_in.people
        )

        area = self._open_area(venue_id, area_id, ServiceType.DINING)

        now = self._clock()
        record = CheckIn(check_in_id=new_id(), time=now, people=people)
        self._services.create_or_append_dining_check_in(
            area.active_service_id,
            table_number=table_number,
            check_in=record,
            created_at=now,
        )

        logger.info(
            "Dining check-in. [vId: %s, aId: %s, tN: %s, count: %s]",
            venue_id, area_id, table_number, len(people),
        )
        return record
