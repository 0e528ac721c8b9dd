from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ``;`` outside quotes; ``--`` comment lines are dropped."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
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


def _run_script(db: DatabaseConnection, sql: str) -> None:
    conn = db.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    db = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = db.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{db.config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    _run_script(DatabaseConnection(DBConfig.from_dict(db_config)), sql)
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))
    _run_script(DatabaseConnection(DBConfig.from_dict(db_config)), sql)
    logger.info("Applied seed %s", seed_path)


def ensure_default_users(db_config: dict, *, admin_password: str = "admin123", demo_doctors: bool = False) -> None:
    """Create the default admin (and optionally demo doctors) with real password hashes."""

    db = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = db.connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(user_id: str, name: str, role: str, password: str) -> None:
            cur.execute("SELECT user_id FROM users WHERE user_id=%s", (user_id,))
            if cur.fetchone():
                return
            cur.execute(
                "INSERT INTO users (user_id, name, role, password_hash) VALUES (%s, %s, %s, %s)",
                (user_id, name, role, generate_password_hash(password)),
            )
            logger.info("Created default %s account %s", role, user_id)

        upsert_user("admin", "Administrator", "admin", admin_password)
        if demo_doctors:
            upsert_user("19900101", "Dr. John Doe", "doctor", "doctor123")
            upsert_user("19850615", "Dr. Jane Smith", "doctor", "doctor123")
            upsert_user("19920320", "Dr. Ahmad Rahman", "doctor", "doctor123")

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
