from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from ..common.datetime_utils import now_millis
from ..common.validators import require_present, require_table_number
from ..core.enums import ServiceType
from ..core.exceptions import (
    CheckInNotFound,
    PatronNotFound,
    ServiceIsNotActive,
    ServiceNotFound,
    TableNotFound,
    ValidationError,
)
from ..managers.service import ManagerAuthService
from .model import DiningPatron, DiningPatronUpdate, GamingPatronUpdate, Service
from .repository import ServiceRepository

logger = logging.getLogger(__name__)


class ServiceLifecycleService:
    """Use case: run dining/gaming services and edit what happens inside them.

    Every operation authorises the manager against the venue or service
    before it reads or mutates any service state.
    """

    def __init__(
        self,
        services: ServiceRepository,
        auth: ManagerAuthService,
        *,
        clock: Callable[[], int] = now_millis,
    ):
        self._services = services
        self._auth = auth
        self._clock = clock

    def _get_active_service(self, service_id: str, service_type: ServiceType) -> Service:
        service = self._services.get_service(service_id)
        if service is None or service.service_type != service_type:
            raise ServiceNotFound()
        if not service.is_active:
            raise ServiceIsNotActive()
        return service

    # -------- Start / stop --------
    def _start(self, manager_id: str, venue_id: str, area_id: str, service_type: ServiceType) -> Service:
        require_present(manager_id=manager_id, venue_id=venue_id, area_id=area_id)
        self._auth.ensure_can_access_venue(manager_id, venue_id)

        service = self._services.start_service(
            venue_id=venue_id,
            area_id=area_id,
            service_type=service_type,
            opened_at=self._clock(),
        )
        logger.info(
            "Service started. [type: %s, vId: %s, aId: %s, sId: %s]",
            service_type.value, venue_id, area_id, service.service_id,
        )
        return service

    def _stop(self, manager_id: str, venue_id: str, area_id: str, service_type: ServiceType) -> None:
        require_present(manager_id=manager_id, venue_id=venue_id, area_id=area_id)
        self._auth.ensure_can_access_venue(manager_id, venue_id)

        self._services.stop_service(
            venue_id=venue_id,
            area_id=area_id,
            service_type=service_type,
            closed_at=self._clock(),
        )
        logger.info("Service stopped. [type: %s, vId: %s, aId: %s]", service_type.value, venue_id, area_id)

    def start_dining_service(self, manager_id: str, venue_id: str, area_id: str) -> Service:
        return self._start(manager_id, venue_id, area_id, ServiceType.DINING)

    def start_gaming_service(self, manager_id: str, venue_id: str, area_id: str) -> Service:
        return self._start(manager_id, venue_id, area_id, ServiceType.GAMING)

    def stop_dining_service(self, manager_id: str, venue_id: str, area_id: str) -> None:
        self._stop(manager_id, venue_id, area_id, ServiceType.DINING)

    def stop_gaming_service(self, manager_id: str, venue_id: str, area_id: str) -> None:
        self._stop(manager_id, venue_id, area_id, ServiceType.GAMING)

    # -------- Dining tables --------
    def move_dining_group(
        self, manager_id: str, service_id: str, table_id: str, check_in_id: str, new_table_number: str
    ) -> str:
        """Move one check-in to another table number; returns the destination sitting id."""
        require_present(
            manager_id=manager_id,
            service_id=service_id,
            table_id=table_id,
            check_in_id=check_in_id,
            new_table_number=new_table_number,
        )
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._get_active_service(service_id, ServiceType.DINING)

        return self._services.move_dining_group(
            service_id,
            table_id=table_id,
            check_in_id=check_in_id,
            new_table_number=require_table_number(new_table_number),
            now=self._clock(),
        )

    def move_dining_table(self, manager_id: str, service_id: str, table_id: str, new_table_number: str) -> str:
        """Renumber a sitting, merging into an active sitting that already has the number."""
        require_present(
            manager_id=manager_id,
            service_id=service_id,
            table_id=table_id,
            new_table_number=new_table_number,
        )
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._get_active_service(service_id, ServiceType.DINING)

        return self._services.move_dining_table(
            service_id,
            table_id=table_id,
            new_table_number=require_table_number(new_table_number),
        )

    def close_dining_table(self, manager_id: str, service_id: str, table_id: str) -> None:
        require_present(manager_id=manager_id, service_id=service_id, table_id=table_id)
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._get_active_service(service_id, ServiceType.DINING)

        self._services.close_dining_table(service_id, table_id=table_id)

    # -------- Dining patrons --------
    def _locate_dining_patron(
        self, service_id: str, table_id: str, check_in_id: str, patron_id: str
    ) -> DiningPatron:
        service = self._get_active_service(service_id, ServiceType.DINING)

        sitting = service.find_sitting(table_id)
        if sitting is None:
            raise TableNotFound()

        check_in = sitting.find_check_in(check_in_id)
        if check_in is None:
            raise CheckInNotFound()

        patron = check_in.find_patron(patron_id)
        if patron is None:
            raise PatronNotFound()
        return patron

    def delete_dining_patron(
        self, manager_id: str, service_id: str, table_id: str, check_in_id: str, patron_id: str
    ) -> None:
        require_present(
            manager_id=manager_id,
            service_id=service_id,
            table_id=table_id,
            check_in_id=check_in_id,
            patron_id=patron_id,
        )
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._locate_dining_patron(service_id, table_id, check_in_id, patron_id)

        self._services.delete_dining_patron(
            service_id,
            table_id=table_id,
            check_in_id=check_in_id,
            patron_id=patron_id,
        )

    def update_dining_patron(
        self,
        manager_id: str,
        service_id: str,
        table_id: str,
        check_in_id: str,
        patron_id: str,
        update: DiningPatronUpdate,
    ) -> DiningPatron:
        require_present(
            manager_id=manager_id,
            service_id=service_id,
            table_id=table_id,
            check_in_id=check_in_id,
            patron_id=patron_id,
        )
        if update is None:
            raise ValidationError("update is required")
        self._auth.ensure_can_access_service(manager_id, service_id)

        patron = self._locate_dining_patron(service_id, table_id, check_in_id, patron_id)
        patron = replace(patron, first_name=update.first_name, phone_number=update.phone_number)

        self._services.update_dining_patron(service_id, table_id=table_id, check_in_id=check_in_id, patron=patron)
        return patron

    # -------- Gaming patrons --------
    def delete_gaming_patron(self, manager_id: str, service_id: str, patron_id: str) -> None:
        require_present(manager_id=manager_id, service_id=service_id, patron_id=patron_id)
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._get_active_service(service_id, ServiceType.GAMING)

        self._services.delete_gaming_patron(service_id, patron_id=patron_id)

    def update_gaming_patron(
        self, manager_id: str, service_id: str, patron_id: str, update: GamingPatronUpdate
    ) -> None:
        require_present(manager_id=manager_id, service_id=service_id, patron_id=patron_id)
        if update is None:
            raise ValidationError("update is required")
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._get_active_service(service_id, ServiceType.GAMING)

        self._services.update_gaming_patron(service_id, patron_id=patron_id, update=update)

    def check_out_gaming_patron(self, manager_id: str, service_id: str, patron_id: str) -> None:
        require_present(manager_id=manager_id, service_id=service_id, patron_id=patron_id)
        self._auth.ensure_can_access_service(manager_id, service_id)
        self._get_active_service(service_id, ServiceType.GAMING)

        self._services.check_out_gaming_patron(service_id, patron_id=patron_id, checked_out_at=self._clock())
