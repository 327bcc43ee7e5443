from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..core.enums import ServiceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import Area, Venue
from .repository import VenueRepository


class MySQLVenueRepository(VenueRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _areas_by_venue(self, cur, venue_ids: List[str]) -> Dict[str, List[Area]]:
        out: Dict[str, List[Area]] = {vid: [] for vid in venue_ids}
        if not venue_ids:
            return out
        cur.execute(
            f"""
            SELECT area_id, venue_id, area_type, short_name, name, is_open, active_service_id
            FROM areas
            WHERE venue_id IN ({placeholders(venue_ids)})
            ORDER BY position, area_id
            """,
            tuple(venue_ids),
        )
        for r in fetchall(cur):
            out[r["venue_id"]].append(
                Area(
                    area_id=r["area_id"],
                    area_type=ServiceType(r["area_type"]),
                    short_name=r["short_name"],
                    name=r["name"],
                    is_open=bool(r["is_open"]),
                    active_service_id=r["active_service_id"],
                )
            )
        return out

    def _build(self, cur, rows) -> List[Venue]:
        areas = self._areas_by_venue(cur, [r["venue_id"] for r in rows])
        return [
            Venue(
                venue_id=r["venue_id"],
                url_name=r["url_name"],
                name=r["name"],
                areas=tuple(areas[r["venue_id"]]),
            )
            for r in rows
        ]

    def get_by_id(self, venue_id: str) -> Optional[Venue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT venue_id, url_name, name FROM venues WHERE venue_id=%s", (venue_id,))
            row = fetchone(cur)
            if not row:
                return None
            return self._build(cur, [row])[0]

    def get_by_url_name(self, url_name: str) -> Optional[Venue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT venue_id, url_name, name FROM venues WHERE url_name=%s", (url_name,))
            row = fetchone(cur)
            if not row:
                return None
            return self._build(cur, [row])[0]

    def list_for_manager(self, manager_id: str) -> Sequence[Venue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT v.venue_id, v.url_name, v.name
                FROM venues v
                JOIN manager_venues mv ON mv.venue_id = v.venue_id
                WHERE mv.manager_id=%s
                ORDER BY v.name
                """,
                (manager_id,),
            )
            return self._build(cur, fetchall(cur))
