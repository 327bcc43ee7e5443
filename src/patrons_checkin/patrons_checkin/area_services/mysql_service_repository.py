from __future__ import annotations

from typing import Dict, List, Optional

from ..common.ids import new_id
from ..core.constants import NO_ACTIVE_SERVICE, NOT_YET
from ..core.enums import ServiceType
from ..core.exceptions import (
    AreaHasActiveService,
    AreaHasNoActiveService,
    AreaNotFound,
    CheckInNotFound,
    PatronNotFound,
    ServiceIsNotActive,
    ServiceNotFound,
    TableNotFound,
)
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import CheckIn, DiningPatron, GamingPatron, GamingPatronUpdate, Service, Sitting
from .repository import ServiceRepository


class MySQLServiceRepository(ServiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Loading --------
    def _load_sittings(self, cur, service_id: str) -> List[Sitting]:
        cur.execute(
            """
            SELECT sitting_id, table_number, created_at, is_active
            FROM sittings
            WHERE service_id=%s
            ORDER BY created_at, sitting_id
            """,
            (service_id,),
        )
        sitting_rows = fetchall(cur)

        cur.execute(
            "SELECT check_in_id, sitting_id, time FROM check_ins WHERE service_id=%s ORDER BY time, check_in_id",
            (service_id,),
        )
        check_in_rows = fetchall(cur)

        people: Dict[str, List[DiningPatron]] = {r["check_in_id"]: [] for r in check_in_rows}
        if people:
            ids = list(people)
            cur.execute(
                f"""
                SELECT patron_id, check_in_id, first_name, phone_number
                FROM dining_patrons
                WHERE check_in_id IN ({placeholders(ids)})
                ORDER BY position, patron_id
                """,
                tuple(ids),
            )
            for r in fetchall(cur):
                people[r["check_in_id"]].append(
                    DiningPatron(patron_id=r["patron_id"], first_name=r["first_name"], phone_number=r["phone_number"])
                )

        check_ins: Dict[str, List[CheckIn]] = {r["sitting_id"]: [] for r in sitting_rows}
        for r in check_in_rows:
            check_ins.setdefault(r["sitting_id"], []).append(
                CheckIn(check_in_id=r["check_in_id"], time=int(r["time"]), people=tuple(people[r["check_in_id"]]))
            )

        return [
            Sitting(
                sitting_id=r["sitting_id"],
                table_number=r["table_number"],
                created_at=int(r["created_at"]),
                is_active=bool(r["is_active"]),
                check_ins=tuple(check_ins[r["sitting_id"]]),
            )
            for r in sitting_rows
        ]

    def _load_gaming_patrons(self, cur, service_id: str) -> List[GamingPatron]:
        cur.execute(
            """
            SELECT patron_id, first_name, last_name, phone_number, check_in_time, check_out_time, is_active
            FROM gaming_patrons
            WHERE service_id=%s
            ORDER BY check_in_time, patron_id
            """,
            (service_id,),
        )
        return [
            GamingPatron(
                patron_id=r["patron_id"],
                first_name=r["first_name"],
                last_name=r["last_name"],
                phone_number=r["phone_number"],
                check_in_time=int(r["check_in_time"]),
                check_out_time=int(r["check_out_time"]),
                is_active=bool(r["is_active"]),
            )
            for r in fetchall(cur)
        ]

    def get_service(self, service_id: str) -> Optional[Service]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT service_id, venue_id, area_id, service_type, opened_at, closed_at, is_active
                FROM services
                WHERE service_id=%s
                """,
                (service_id,),
            )
            row = fetchone(cur)
            if not row:
                return None

            service_type = ServiceType(row["service_type"])
            sittings: List[Sitting] = []
            patrons: List[GamingPatron] = []
            if service_type == ServiceType.DINING:
                sittings = self._load_sittings(cur, service_id)
            else:
                patrons = self._load_gaming_patrons(cur, service_id)

            return Service(
                service_id=row["service_id"],
                venue_id=row["venue_id"],
                area_id=row["area_id"],
                service_type=service_type,
                opened_at=int(row["opened_at"]),
                closed_at=int(row["closed_at"]),
                is_active=bool(row["is_active"]),
                sittings=tuple(sittings),
                patrons=tuple(patrons),
            )

    # -------- Lifecycle --------
    def _lock_area(self, cur, *, venue_id: str, area_id: str, service_type: ServiceType) -> dict:
        cur.execute(
            """
            SELECT area_id, active_service_id
            FROM areas
            WHERE area_id=%s AND venue_id=%s AND area_type=%s
            FOR UPDATE
            """,
            (area_id, venue_id, service_type.value),
        )
        row = fetchone(cur)
        if not row:
            raise AreaNotFound()
        return row

    def start_service(self, *, venue_id: str, area_id: str, service_type: ServiceType, opened_at: int) -> Service:
        service = Service(
            service_id=new_id(),
            venue_id=venue_id,
            area_id=area_id,
            service_type=service_type,
            opened_at=opened_at,
            closed_at=NOT_YET,
            is_active=True,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_area(cur, venue_id=venue_id, area_id=area_id, service_type=service_type)
            cur.execute(
                """
                INSERT INTO services(service_id, venue_id, area_id, service_type, opened_at, closed_at, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (service.service_id, venue_id, area_id, service_type.value, opened_at, NOT_YET),
            )
            # Conditional write: only an idle area can take the new service.
            cur.execute(
                "UPDATE areas SET active_service_id=%s WHERE area_id=%s AND active_service_id=%s",
                (service.service_id, area_id, NO_ACTIVE_SERVICE),
            )
            if cur.rowcount != 1:
                raise AreaHasActiveService()
        return service

    def stop_service(self, *, venue_id: str, area_id: str, service_type: ServiceType, closed_at: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            area = self._lock_area(cur, venue_id=venue_id, area_id=area_id, service_type=service_type)
            active_service_id = area["active_service_id"]
            if not active_service_id or active_service_id == NO_ACTIVE_SERVICE:
                raise AreaHasNoActiveService()

            cur.execute(
                "UPDATE services SET is_active=0, closed_at=%s WHERE service_id=%s",
                (closed_at, active_service_id),
            )
            cur.execute(
                "UPDATE areas SET active_service_id=%s WHERE area_id=%s",
                (NO_ACTIVE_SERVICE, area_id),
            )

    # -------- Helpers for mutations --------
    def _lock_service(self, cur, service_id: str, service_type: ServiceType) -> dict:
        """Lock the service row; every mutation of one service serialises here."""
        cur.execute(
            "SELECT service_id, service_type, is_active FROM services WHERE service_id=%s FOR UPDATE",
            (service_id,),
        )
        row = fetchone(cur)
        if not row or row["service_type"] != service_type.value:
            raise ServiceNotFound()
        if not row["is_active"]:
            raise ServiceIsNotActive()
        return row

    def _active_sitting(self, cur, service_id: str, sitting_id: str) -> dict:
        cur.execute(
            """
            SELECT sitting_id, table_number
            FROM sittings
            WHERE sitting_id=%s AND service_id=%s AND is_active=1
            """,
            (sitting_id, service_id),
        )
        row = fetchone(cur)
        if not row:
            raise TableNotFound()
        return row

    def _find_active_table(self, cur, service_id: str, table_number: str, *, exclude: Optional[str] = None):
        cur.execute(
            """
            SELECT sitting_id
            FROM sittings
            WHERE service_id=%s AND table_number=%s AND is_active=1 AND sitting_id<>%s
            ORDER BY created_at, sitting_id
            LIMIT 1
            """,
            (service_id, table_number, exclude or ""),
        )
        row = fetchone(cur)
        return row["sitting_id"] if row else None

    def _insert_sitting(self, cur, service_id: str, table_number: str, created_at: int) -> str:
        sitting_id = new_id()
        cur.execute(
            """
            INSERT INTO sittings(sitting_id, service_id, table_number, created_at, is_active)
            VALUES(%s,%s,%s,%s,1)
            """,
            (sitting_id, service_id, table_number, created_at),
        )
        return sitting_id

    # -------- Check-ins --------
    def add_gaming_patron(self, service_id: str, patron: GamingPatron) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.GAMING)
            cur.execute(
                """
                INSERT INTO gaming_patrons(
                    patron_id, service_id, first_name, last_name, phone_number,
                    check_in_time, check_out_time, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    patron.patron_id,
                    service_id,
                    patron.first_name,
                    patron.last_name,
                    patron.phone_number,
                    patron.check_in_time,
                    patron.check_out_time,
                    1 if patron.is_active else 0,
                ),
            )

    def create_or_append_dining_check_in(
        self, service_id: str, *, table_number: str, check_in: CheckIn, created_at: int
    ) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.DINING)

            sitting_id = self._find_active_table(cur, service_id, table_number)
            if sitting_id is None:
                sitting_id = self._insert_sitting(cur, service_id, table_number, created_at)

            cur.execute(
                "INSERT INTO check_ins(check_in_id, sitting_id, service_id, time) VALUES(%s,%s,%s,%s)",
                (check_in.check_in_id, sitting_id, service_id, check_in.time),
            )
            for position, person in enumerate(check_in.people):
                cur.execute(
                    """
                    INSERT INTO dining_patrons(patron_id, check_in_id, first_name, phone_number, position)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (person.patron_id, check_in.check_in_id, person.first_name, person.phone_number, position),
                )
            return sitting_id

    # -------- Dining tables --------
    def move_dining_group(
        self, service_id: str, *, table_id: str, check_in_id: str, new_table_number: str, now: int
    ) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.DINING)
            source = self._active_sitting(cur, service_id, table_id)

            cur.execute(
                "SELECT check_in_id FROM check_ins WHERE check_in_id=%s AND sitting_id=%s",
                (check_in_id, table_id),
            )
            if not fetchone(cur):
                raise CheckInNotFound()

            if source["table_number"] == new_table_number:
                return table_id

            destination = self._find_active_table(cur, service_id, new_table_number, exclude=table_id)
            if destination is None:
                destination = self._insert_sitting(cur, service_id, new_table_number, now)

            cur.execute("UPDATE check_ins SET sitting_id=%s WHERE check_in_id=%s", (destination, check_in_id))

            cur.execute("SELECT COUNT(*) AS n FROM check_ins WHERE sitting_id=%s", (table_id,))
            remaining = fetchone(cur)
            if not remaining or int(remaining["n"]) == 0:
                cur.execute("UPDATE sittings SET is_active=0 WHERE sitting_id=%s", (table_id,))

            return destination

    def move_dining_table(self, service_id: str, *, table_id: str, new_table_number: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.DINING)
            source = self._active_sitting(cur, service_id, table_id)
            if source["table_number"] == new_table_number:
                return table_id

            destination = self._find_active_table(cur, service_id, new_table_number, exclude=table_id)
            if destination is None:
                cur.execute(
                    "UPDATE sittings SET table_number=%s WHERE sitting_id=%s",
                    (new_table_number, table_id),
                )
                return table_id

            # Merge: re-parent every check-in, then drop the emptied sitting.
            cur.execute("UPDATE check_ins SET sitting_id=%s WHERE sitting_id=%s", (destination, table_id))
            cur.execute("DELETE FROM sittings WHERE sitting_id=%s", (table_id,))
            return destination

    def close_dining_table(self, service_id: str, *, table_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.DINING)
            cur.execute(
                "SELECT sitting_id FROM sittings WHERE sitting_id=%s AND service_id=%s",
                (table_id, service_id),
            )
            if not fetchone(cur):
                raise TableNotFound()
            cur.execute("UPDATE sittings SET is_active=0 WHERE sitting_id=%s", (table_id,))

    # -------- Dining patrons --------
    def _locate_dining_patron(self, cur, service_id: str, table_id: str, check_in_id: str, patron_id: str) -> None:
        cur.execute(
            """
            SELECT dp.patron_id
            FROM dining_patrons dp
            JOIN check_ins ci ON ci.check_in_id = dp.check_in_id
            JOIN sittings s ON s.sitting_id = ci.sitting_id
            WHERE dp.patron_id=%s AND ci.check_in_id=%s AND s.sitting_id=%s AND s.service_id=%s
            FOR UPDATE
            """,
            (patron_id, check_in_id, table_id, service_id),
        )
        if not fetchone(cur):
            raise PatronNotFound()

    def update_dining_patron(self, service_id: str, *, table_id: str, check_in_id: str, patron: DiningPatron) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.DINING)
            self._locate_dining_patron(cur, service_id, table_id, check_in_id, patron.patron_id)
            cur.execute(
                "UPDATE dining_patrons SET first_name=%s, phone_number=%s WHERE patron_id=%s",
                (patron.first_name, patron.phone_number, patron.patron_id),
            )

    def delete_dining_patron(self, service_id: str, *, table_id: str, check_in_id: str, patron_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.DINING)
            self._locate_dining_patron(cur, service_id, table_id, check_in_id, patron_id)
            cur.execute("DELETE FROM dining_patrons WHERE patron_id=%s", (patron_id,))

    # -------- Gaming patrons --------
    def _lock_gaming_patron(self, cur, service_id: str, patron_id: str) -> None:
        cur.execute(
            "SELECT patron_id FROM gaming_patrons WHERE patron_id=%s AND service_id=%s FOR UPDATE",
            (patron_id, service_id),
        )
        if not fetchone(cur):
            raise PatronNotFound()

    def update_gaming_patron(self, service_id: str, *, patron_id: str, update: GamingPatronUpdate) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.GAMING)
            self._lock_gaming_patron(cur, service_id, patron_id)
            cur.execute(
                """
                UPDATE gaming_patrons
                SET first_name=%s, last_name=%s, phone_number=%s
                WHERE patron_id=%s
                """,
                (update.first_name, update.last_name, update.phone_number, patron_id),
            )

    def delete_gaming_patron(self, service_id: str, *, patron_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.GAMING)
            cur.execute(
                "DELETE FROM gaming_patrons WHERE patron_id=%s AND service_id=%s",
                (patron_id, service_id),
            )
            if cur.rowcount == 0:
                raise PatronNotFound()

    def check_out_gaming_patron(self, service_id: str, *, patron_id: str, checked_out_at: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._lock_service(cur, service_id, ServiceType.GAMING)
            self._lock_gaming_patron(cur, service_id, patron_id)
            cur.execute(
                "UPDATE gaming_patrons SET check_out_time=%s, is_active=0 WHERE patron_id=%s",
                (checked_out_at, patron_id),
            )
