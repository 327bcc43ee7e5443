from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

from ..managers.passwords import PasswordHasher
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchall, fetchone

logger = logging.getLogger(__name__)

DEMO_MANAGER_ID = "000000000000000000000001"
DEMO_VENUE_ID = "0000000000000000000000a1"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips -- comments).
    buf: List[str] = []
    in_single = False
    in_double = False
    escape = False

    for line in sql.splitlines(keepends=True):
        if not in_single and not in_double and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                buf.append(ch)
                escape = False
                continue

            if ch == "\\":
                buf.append(ch)
                escape = True
                continue

            if ch == "'" and not in_double:
                in_single = not in_single
            elif ch == '"' and not in_single:
                in_double = not in_double
            elif ch == ";" and not in_single and not in_double:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue

            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_sql_file(conn: DatabaseConnection, path: Path) -> None:
    sql = _strip_create_db_and_use(path.read_text(encoding="utf-8"))
    with db_cursor(conn) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    raw = conn.connect(with_database=False)
    try:
        cur = raw.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        raw.commit()
    finally:
        raw.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_sql_file(DatabaseConnection(DBConfig.from_dict(db_config)), Path(schema_path))
    logger.info("Applied schema. [path: %s]", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_sql_file(DatabaseConnection(DBConfig.from_dict(db_config)), Path(seed_path))
    logger.info("Applied seed. [path: %s]", seed_path)


def ensure_demo_manager(
    db_config: dict,
    *,
    username: str = "demo",
    password: str = "demo-password!",
    reset: bool = False,
) -> None:
    """Create or refresh the demo manager and grant it the demo venue.

    With ``reset`` the password is stored as a one-time plaintext password,
    the way newly provisioned managers receive theirs.
    """
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    if reset:
        stored_password, salt = password, ""
    else:
        hashed = PasswordHasher().hash(password)
        stored_password, salt = hashed.hashed_password, hashed.salt

    with db_cursor(conn) as (_, cur):
        cur.execute("SELECT venue_id FROM venues WHERE venue_id=%s", (DEMO_VENUE_ID,))
        if not fetchone(cur):
            raise RuntimeError(f"Demo venue {DEMO_VENUE_ID} missing; apply seed.sql first")

        cur.execute(
            """
            INSERT INTO managers(manager_id, first_name, last_name, email, username, password, salt, is_password_reset)
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE password=VALUES(password), salt=VALUES(salt),
                is_password_reset=VALUES(is_password_reset)
            """,
            (DEMO_MANAGER_ID, "Demo", "Manager", "demo@example.com", username, stored_password, salt, 1 if reset else 0),
        )
        cur.execute(
            "INSERT IGNORE INTO manager_venues(manager_id, venue_id) VALUES(%s,%s)",
            (DEMO_MANAGER_ID, DEMO_VENUE_ID),
        )
    logger.info("Demo manager ready. [username: %s, reset: %s]", username, reset)


def list_tables(db_config: dict) -> List[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn) as (_, cur):
        cur.execute("SHOW TABLES")
        return [next(iter(row.values())) for row in fetchall(cur)]
