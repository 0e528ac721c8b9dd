from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _row_to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        name=row["name"],
        role=Role(row["role"]),
        password_hash=row["password_hash"],
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, password_hash, created_at
                FROM users
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(self, *, user_id: str, name: str, role: Role, password_hash: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(user_id, name, role, password_hash)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (user_id, name, role.value, password_hash),
                )
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError(f"User {user_id} already exists") from e
            raise

    def update_password(self, user_id: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, password_hash, created_at
                FROM users
                WHERE role=%s
                ORDER BY name ASC
                """,
                (role.value,),
            )
            return [_row_to_user(r) for r in fetchall(cur)]
