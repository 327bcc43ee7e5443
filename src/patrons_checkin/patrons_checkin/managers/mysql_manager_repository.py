from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Manager
from .repository import ManagerRepository

_MANAGER_COLUMNS = """
    manager_id, first_name, last_name, email, username, password, salt, is_password_reset
"""


class MySQLManagerRepository(ManagerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, row: dict) -> Manager:
        cur.execute(
            "SELECT venue_id FROM manager_venues WHERE manager_id=%s ORDER BY venue_id",
            (row["manager_id"],),
        )
        venue_ids = tuple(r["venue_id"] for r in fetchall(cur))
        return Manager(
            manager_id=row["manager_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            username=row["username"],
            password=row["password"],
            salt=row.get("salt") or "",
            is_password_reset=bool(row.get("is_password_reset", False)),
            venue_ids=venue_ids,
        )

    def get_by_id(self, manager_id: str) -> Optional[Manager]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MANAGER_COLUMNS} FROM managers WHERE manager_id=%s", (manager_id,))
            row = fetchone(cur)
            if not row:
                return None
            return self._load(cur, row)

    def get_by_username(self, username: str) -> Optional[Manager]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MANAGER_COLUMNS} FROM managers WHERE username=%s", (username,))
            row = fetchone(cur)
            if not row:
                return None
            return self._load(cur, row)

    def update_password(self, manager_id: str, *, password_hash: str, salt: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE managers
                SET password=%s, salt=%s, is_password_reset=0
                WHERE manager_id=%s
                """,
                (password_hash, salt, manager_id),
            )
            return cur.rowcount > 0

    def can_access_venue(self, manager_id: str, venue_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM manager_venues WHERE manager_id=%s AND venue_id=%s",
                (manager_id, venue_id),
            )
            return fetchone(cur) is not None

    def can_access_service(self, manager_id: str, service_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS ok
                FROM services s
                JOIN manager_venues mv ON mv.venue_id = s.venue_id
                WHERE s.service_id=%s AND mv.manager_id=%s
                """,
                (service_id, manager_id),
            )
            return fetchone(cur) is not None
