from datetime import date, datetime, timezone

import mysql.connector
import pytest
from mysql.connector import errorcode

from doctor_attendance.attendance.model import NewAttendanceRecord
from doctor_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from doctor_attendance.core.enums import AttendanceType, Role
from doctor_attendance.core.exceptions import ConflictError, DuplicateAttendanceError
from doctor_attendance.users.mysql_user_repository import MySQLUserRepository

from support import AUTHORIZED, DOCTOR_ID


class FailingCursor:
    def __init__(self, error: Exception):
        self._error = error

    def execute(self, sql, params=None):
        raise self._error

    def close(self):
        pass


class FailingConnection:
    def __init__(self, error: Exception):
        self._error = error
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return FailingCursor(self._error)

    def commit(self):
        pass

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FailingFactory:
    def __init__(self, error: Exception):
        self.conn = FailingConnection(error)

    def connect(self, *, with_database=True):
        return self.conn


def _integrity_error(errno: int) -> mysql.connector.IntegrityError:
    return mysql.connector.IntegrityError(msg="integrity", errno=errno)


def test_duplicate_user_id_is_a_conflict():
    factory = FailingFactory(_integrity_error(errorcode.ER_DUP_ENTRY))
    repo = MySQLUserRepository(factory)

    with pytest.raises(ConflictError):
        repo.create_user(user_id=DOCTOR_ID, name="Dr. John Doe", role=Role.DOCTOR, password_hash="x")
    assert factory.conn.rolled_back


def test_other_integrity_errors_propagate():
    repo = MySQLUserRepository(FailingFactory(_integrity_error(errorcode.ER_NO_REFERENCED_ROW_2)))

    with pytest.raises(mysql.connector.IntegrityError):
        repo.create_user(user_id=DOCTOR_ID, name="Dr. John Doe", role=Role.DOCTOR, password_hash="x")


def test_duplicate_attendance_slot():
    repo = MySQLAttendanceRepository(FailingFactory(_integrity_error(errorcode.ER_DUP_ENTRY)))
    record = NewAttendanceRecord(
        user_id=DOCTOR_ID,
        type=AttendanceType.CHECKIN,
        timestamp=datetime(2024, 1, 15, 1, 0, tzinfo=timezone.utc),
        attendance_date=date(2024, 1, 15),
        photo_path="uploads/attendance/selfie.jpg",
        location_lat=AUTHORIZED.latitude,
        location_lng=AUTHORIZED.longitude,
    )

    with pytest.raises(DuplicateAttendanceError):
        repo.create(record)
