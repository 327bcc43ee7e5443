from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import MarketingUser
from .repository import MarketingUserRepository


class MySQLMarketingUserRepository(MarketingUserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_if_not_subscribed(self, user: MarketingUser) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Locks the email's index range so concurrent sign-ups serialise.
            cur.execute(
                "SELECT marketing_user_id FROM marketing_users WHERE email=%s AND is_subscribed=1 FOR UPDATE",
                (user.email,),
            )
            if fetchone(cur):
                return False
            cur.execute(
                """
                INSERT INTO marketing_users(marketing_user_id, name, email, is_subscribed, created_at, unsubscribed_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.marketing_user_id,
                    user.name,
                    user.email,
                    1 if user.is_subscribed else 0,
                    user.created_at,
                    user.unsubscribed_at,
                ),
            )
        return True

    def create_unsubscribe_link(self, marketing_user_id: str, *, link_id: str, created_at: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO marketing_unsubscribe_links(link_id, marketing_user_id, created_at, is_used, used_at)
                VALUES(%s,%s,%s,0,-1)
                """,
                (link_id, marketing_user_id, created_at),
            )

    def unsubscribe(self, link_id: str, *, used_at: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT marketing_user_id, is_used FROM marketing_unsubscribe_links WHERE link_id=%s FOR UPDATE",
                (link_id,),
            )
            row = fetchone(cur)
            if not row:
                return False
            if row["is_used"]:
                return True

            cur.execute(
                "UPDATE marketing_unsubscribe_links SET is_used=1, used_at=%s WHERE link_id=%s",
                (used_at, link_id),
            )
            cur.execute(
                """
                UPDATE marketing_users SET is_subscribed=0, unsubscribed_at=%s
                WHERE marketing_user_id=%s AND is_subscribed=1
                """,
                (used_at, row["marketing_user_id"]),
            )
        return True
