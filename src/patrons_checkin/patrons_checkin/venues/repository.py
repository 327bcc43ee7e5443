from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Venue


class VenueRepository(Protocol):
    def get_by_id(self, venue_id: str) -> Optional[Venue]:
        raise NotImplementedError

    def get_by_url_name(self, url_name: str) -> Optional[Venue]:
        raise NotImplementedError

    def list_for_manager(self, manager_id: str) -> Sequence[Venue]:
        raise NotImplementedError
