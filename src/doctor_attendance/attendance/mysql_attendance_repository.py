from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import as_utc, to_db_datetime
from ..core.enums import AttendanceType
from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, NewAttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "a.attendance_id, a.user_id, a.type, a.timestamp, a.attendance_date, a.photo_path, a.location_lat, a.location_lng"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=str(r["user_id"]),
        type=AttendanceType(r["type"]),
        timestamp=as_utc(r["timestamp"]),
        attendance_date=r["attendance_date"],
        photo_path=r["photo_path"],
        location_lat=r.get("location_lat"),
        location_lng=r.get("location_lng"),
        doctor_name=r.get("doctor_name"),
    )


def _filter_clause(search: Optional[str], start_date: Optional[date], end_date: Optional[date]) -> tuple[str, list[Any]]:
    clauses = ["1=1"]
    params: list[Any] = []

    if search:
        clauses.append("(u.name LIKE %s OR u.user_id LIKE %s)")
        pattern = f"%{search}%"
        params.extend([pattern, pattern])
    if start_date is not None:
        clauses.append("a.attendance_date >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("a.attendance_date <= %s")
        params.append(end_date)

    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user_and_date(self, user_id: str, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.user_id=%s AND a.attendance_date=%s
                ORDER BY a.timestamp ASC
                """,
                (user_id, attendance_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(user_id, type, timestamp, attendance_date, photo_path, location_lat, location_lng)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.user_id,
                        record.type.value,
                        to_db_datetime(record.timestamp),
                        record.attendance_date,
                        record.photo_path,
                        record.location_lat,
                        record.location_lng,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateAttendanceError(
                    f"{record.type.value} already recorded for {record.user_id} on {record.attendance_date}"
                ) from e
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=record.user_id,
            type=record.type,
            timestamp=as_utc(record.timestamp),
            attendance_date=record.attendance_date,
            photo_path=record.photo_path,
            location_lat=record.location_lat,
            location_lng=record.location_lng,
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance a WHERE a.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def count_for_user(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendance WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_user(self, user_id: str, *, limit: int, offset: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.user_id=%s
                ORDER BY a.timestamp DESC
                LIMIT %s OFFSET %s
                """,
                (user_id, int(limit), int(offset)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_photo_paths_for_user(self, user_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT photo_path FROM attendance WHERE user_id=%s", (user_id,))
            return [r["photo_path"] for r in fetchall(cur) if r["photo_path"]]

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.name AS doctor_name
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                ORDER BY a.timestamp DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_filtered(
        self,
        *,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        where, params = _filter_clause(search, start_date, end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                WHERE {where}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_filtered(
        self,
        *,
        limit: int,
        offset: int,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        where, params = _filter_clause(search, start_date, end_date)
        params.extend([int(limit), int(offset)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.name AS doctor_name
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                WHERE {where}
                ORDER BY a.timestamp DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
