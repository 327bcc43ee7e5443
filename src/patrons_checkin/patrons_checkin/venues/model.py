from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..core.constants import NO_ACTIVE_SERVICE
from ..core.enums import ServiceType


@dataclass(frozen=True)
class Area:
    """A dining room or gaming floor inside a venue."""

    area_id: str
    area_type: ServiceType
    short_name: str
    name: str
    is_open: bool = False
    active_service_id: str = NO_ACTIVE_SERVICE

    @property
    def has_active_service(self) -> bool:
        return bool(self.active_service_id) and self.active_service_id != NO_ACTIVE_SERVICE

    def to_public_dict(self) -> dict:
        return {
            "id": self.area_id,
            "type": self.area_type.value,
            "shortName": self.short_name,
            "name": self.name,
            "isOpen": self.is_open,
            "hasActiveService": self.has_active_service,
        }


@dataclass(frozen=True)
class Venue:
    venue_id: str
    url_name: str
    name: str
    areas: Tuple[Area, ...] = field(default_factory=tuple)

    def find_area(self, area_id: str, area_type: ServiceType) -> Optional[Area]:
        for area in self.areas:
            if area.area_id == area_id and area.area_type == area_type:
                return area
        return None

    def to_public_dict(self) -> dict:
        return {
            "id": self.venue_id,
            "urlName": self.url_name,
            "name": self.name,
            "areas": [a.to_public_dict() for a in self.areas],
        }
