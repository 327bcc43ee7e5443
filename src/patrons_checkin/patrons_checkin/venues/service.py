from __future__ import annotations

from ..common.validators import require_present
from ..core.exceptions import VenueNotFound
from .model import Venue
from .repository import VenueRepository


class VenueService:
    """Use case: public (anonymous) venue lookups."""

    def __init__(self, venues: VenueRepository):
        self._venues = venues

    def get_venue_by_id(self, venue_id: str) -> Venue:
        require_present(venue_id=venue_id)
        venue = self._venues.get_by_id(venue_id)
        if venue is None:
            raise VenueNotFound()
        return venue

    def get_venue_by_url(self, url_name: str) -> Venue:
        require_present(url_name=url_name)
        venue = self._venues.get_by_url_name(url_name)
        if venue is None:
            raise VenueNotFound()
        return venue
