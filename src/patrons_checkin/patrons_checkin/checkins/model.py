from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GamingCheckInRequest:
    first_name: str
    last_name: str
    phone_number: str

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "GamingCheckInRequest":
        return cls(
            first_name=payload.get("firstName"),
            last_name=payload.get("lastName"),
            phone_number=payload.get("phoneNumber"),
        )


@dataclass(frozen=True)
class DiningPersonRequest:
    first_name: str
    phone_number: str


@dataclass(frozen=True)
class DiningCheckInRequest:
    table_number: str
    people: Tuple[DiningPersonRequest, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "DiningCheckInRequest":
        people = payload.get("people")
        if people is None:
            people = []
        if not isinstance(people, list) or not all(isinstance(p, Mapping) for p in people):
            raise ValidationError("people must be a list of patrons")

        table_number = payload.get("tableNumber")
        if isinstance(table_number, int) and not isinstance(table_number, bool):
            table_number = str(table_number)

        return cls(
            table_number=table_number,
            people=tuple(
                DiningPersonRequest(first_name=p.get("firstName"), phone_number=p.get("phoneNumber"))
                for p in people
            ),
        )
