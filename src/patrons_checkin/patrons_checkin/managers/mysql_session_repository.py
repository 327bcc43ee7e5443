from __future__ import annotations

from typing import Optional

from ..core.enums import AccessLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Session
from .repository import SessionRepository


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_if_absent(self, session: Session) -> bool:
        # sessions.session_id is UNIQUE: the insert is the existence check.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO sessions(id, session_id, manager_id, ip_address, created_at, access_level, is_active)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session.id,
                        session.session_id,
                        session.manager_id,
                        session.ip_address,
                        session.created_at,
                        session.access_level.value,
                        1 if session.is_active else 0,
                    ),
                )
        except Exception as exc:
            if is_duplicate_key(exc):
                return False
            raise
        return True

    def get_by_session_id(self, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, session_id, manager_id, ip_address, created_at, access_level, is_active
                FROM sessions
                WHERE session_id=%s
                """,
                (session_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Session(
                id=row["id"],
                session_id=row["session_id"],
                manager_id=row["manager_id"],
                ip_address=row["ip_address"],
                created_at=int(row["created_at"]),
                access_level=AccessLevel(row["access_level"]),
                is_active=bool(row["is_active"]),
            )

    def deactivate_for_manager(self, manager_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE sessions SET is_active=0 WHERE manager_id=%s AND is_active=1", (manager_id,))
            return int(cur.rowcount)
