from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import ServiceType
from .model import CheckIn, DiningPatron, GamingPatron, GamingPatronUpdate, Service


class ServiceRepository(Protocol):
    """Repository interface for area services and everything they own.

    Implementations must make each mutation atomic with respect to other
    mutations of the same service or area: start/stop are conditional writes
    on the area, and dining mutations serialise on the service.
    """

    def get_service(self, service_id: str) -> Optional[Service]:
        raise NotImplementedError

    def start_service(self, *, venue_id: str, area_id: str, service_type: ServiceType, opened_at: int) -> Service:
        """Raises AreaNotFound, or AreaHasActiveService when the area already runs one."""

        raise NotImplementedError

    def stop_service(self, *, venue_id: str, area_id: str, service_type: ServiceType, closed_at: int) -> None:
        """Raises AreaNotFound, or AreaHasNoActiveService."""

        raise NotImplementedError

    # -------- Check-ins --------
    def add_gaming_patron(self, service_id: str, patron: GamingPatron) -> None:
        raise NotImplementedError

    def create_or_append_dining_check_in(
        self, service_id: str, *, table_number: str, check_in: CheckIn, created_at: int
    ) -> str:
        """Append to the active sitting with ``table_number`` or open one; returns its id."""

        raise NotImplementedError

    # -------- Dining tables --------
    def move_dining_group(
        self, service_id: str, *, table_id: str, check_in_id: str, new_table_number: str, now: int
    ) -> str:
        raise NotImplementedError

    def move_dining_table(self, service_id: str, *, table_id: str, new_table_number: str) -> str:
        raise NotImplementedError

    def close_dining_table(self, service_id: str, *, table_id: str) -> None:
        raise NotImplementedError

    # -------- Dining patrons --------
    def update_dining_patron(self, service_id: str, *, table_id: str, check_in_id: str, patron: DiningPatron) -> None:
        raise NotImplementedError

    def delete_dining_patron(self, service_id: str, *, table_id: str, check_in_id: str, patron_id: str) -> None:
        raise NotImplementedError

    # -------- Gaming patrons --------
    def update_gaming_patron(self, service_id: str, *, patron_id: str, update: GamingPatronUpdate) -> None:
        raise NotImplementedError

    def delete_gaming_patron(self, service_id: str, *, patron_id: str) -> None:
        raise NotImplementedError

    def check_out_gaming_patron(self, service_id: str, *, patron_id: str, checked_out_at: int) -> None:
        raise NotImplementedError
