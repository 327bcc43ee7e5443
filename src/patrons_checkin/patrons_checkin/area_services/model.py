from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from ..common.validators import require_non_empty
from ..core.constants import NOT_YET
from ..core.enums import ServiceType


@dataclass(frozen=True)
class DiningPatron:
    patron_id: str
    first_name: str
    phone_number: str

    def to_dict(self) -> dict:
        return {"id": self.patron_id, "firstName": self.first_name, "phoneNumber": self.phone_number}


@dataclass(frozen=True)
class CheckIn:
    """A group of dining patrons admitted together."""

    check_in_id: str
    time: int
    people: Tuple[DiningPatron, ...] = field(default_factory=tuple)

    def find_patron(self, patron_id: str) -> Optional[DiningPatron]:
        return next((p for p in self.people if p.patron_id == patron_id), None)

    def to_dict(self) -> dict:
        return {"id": self.check_in_id, "time": self.time, "people": [p.to_dict() for p in self.people]}


@dataclass(frozen=True)
class Sitting:
    """A table within a dining service; groups check-ins by table number."""

    sitting_id: str
    table_number: str
    created_at: int
    is_active: bool = True
    check_ins: Tuple[CheckIn, ...] = field(default_factory=tuple)

    def find_check_in(self, check_in_id: str) -> Optional[CheckIn]:
        return next((c for c in self.check_ins if c.check_in_id == check_in_id), None)

    def to_dict(self) -> dict:
        return {
            "id": self.sitting_id,
            "tableNumber": self.table_number,
            "createdAt": self.created_at,
            "isActive": self.is_active,
            "checkIns": [c.to_dict() for c in self.check_ins],
        }


@dataclass(frozen=True)
class GamingPatron:
    patron_id: str
    first_name: str
    last_name: str
    phone_number: str
    check_in_time: int
    check_out_time: int = NOT_YET
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.patron_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "checkInTime": self.check_in_time,
            "checkOutTime": self.check_out_time,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class Service:
    """One continuous operating window of an area.

    Tagged by ``service_type``: a DINING service carries ``sittings``, a
    GAMING service carries ``patrons``; the other collection stays empty.
    """

    service_id: str
    venue_id: str
    area_id: str
    service_type: ServiceType
    opened_at: int
    closed_at: int = NOT_YET
    is_active: bool = True
    sittings: Tuple[Sitting, ...] = field(default_factory=tuple)
    patrons: Tuple[GamingPatron, ...] = field(default_factory=tuple)

    def find_sitting(self, sitting_id: str) -> Optional[Sitting]:
        return next((s for s in self.sittings if s.sitting_id == sitting_id), None)

    def to_dict(self) -> dict:
        out = {
            "id": self.service_id,
            "venueId": self.venue_id,
            "areaId": self.area_id,
            "serviceType": self.service_type.value,
            "openedAt": self.opened_at,
            "closedAt": self.closed_at,
            "isActive": self.is_active,
        }
        if self.service_type == ServiceType.DINING:
            out["sittings"] = [s.to_dict() for s in self.sittings]
        else:
            out["patrons"] = [p.to_dict() for p in self.patrons]
        return out


@dataclass(frozen=True)
class DiningPatronUpdate:
    first_name: str
    phone_number: str

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "DiningPatronUpdate":
        return cls(
            first_name=require_non_empty(payload.get("firstName"), "firstName"),
            phone_number=require_non_empty(payload.get("phoneNumber"), "phoneNumber"),
        )


@dataclass(frozen=True)
class GamingPatronUpdate:
    first_name: str
    last_name: str
    phone_number: str

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "GamingPatronUpdate":
        return cls(
            first_name=require_non_empty(payload.get("firstName"), "firstName"),
            last_name=require_non_empty(payload.get("lastName"), "lastName"),
            phone_number=require_non_empty(payload.get("phoneNumber"), "phoneNumber"),
        )
